"""Interactive terminal UI for nudeps."""
