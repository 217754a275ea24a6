"""Physics parameters."""
