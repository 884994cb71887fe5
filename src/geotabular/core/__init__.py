"""Dataset processing core."""
