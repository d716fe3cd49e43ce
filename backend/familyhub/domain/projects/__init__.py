"""Family projects with phases, participants, contributions and assignments."""
