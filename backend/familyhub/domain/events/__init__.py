"""Family events with participants, contributions and assignments."""
