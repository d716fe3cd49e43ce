"""HTTP routers for the FamilyHub API."""
