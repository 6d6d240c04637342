"""Navigation services module."""
