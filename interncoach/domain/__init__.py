"""Domain rules (pure functions, no I/O)."""
