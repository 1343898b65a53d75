"""Core infrastructure: paths, settings, theme and history state."""
