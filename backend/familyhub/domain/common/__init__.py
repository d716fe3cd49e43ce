"""Building blocks shared by every entity family."""
