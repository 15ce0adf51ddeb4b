"""Reading pages from a local workspace directory."""
