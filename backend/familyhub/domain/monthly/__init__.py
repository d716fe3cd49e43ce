"""Monthly contribution sessions and per-member assignments."""
