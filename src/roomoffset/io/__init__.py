"""Plan file input/output."""
