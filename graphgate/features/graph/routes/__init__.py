"""Route modules for the graph feature."""
