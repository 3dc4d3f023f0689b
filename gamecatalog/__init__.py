"""Game catalog with scheduled external metadata synchronization."""
