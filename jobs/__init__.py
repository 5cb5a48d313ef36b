"""Background jobs: dramatiq actors, scheduler and health server."""
