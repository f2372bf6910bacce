"""Adapters connecting the core to HTTP, schedulers and logging."""
