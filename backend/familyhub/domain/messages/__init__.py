"""Internal messaging between members."""
