"""FamilyHub backend package."""
