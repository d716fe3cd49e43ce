"""Association members and their credentials."""
