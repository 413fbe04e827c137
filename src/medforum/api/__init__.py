"""HTTP layer for the forum core."""
