"""Shared document library with categories."""
