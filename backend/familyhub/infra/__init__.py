"""Infrastructure adapters: database pool, auth, file storage."""
