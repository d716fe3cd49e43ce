"""Family tree: members, photos, relationships and tree views."""
