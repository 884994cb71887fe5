"""Low-level helpers for the processing core."""
