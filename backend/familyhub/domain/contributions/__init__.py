"""Contributions: payments toward monthly sessions, events and projects."""
