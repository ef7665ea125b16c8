"""Route factories."""
