"""Background task entry points."""
