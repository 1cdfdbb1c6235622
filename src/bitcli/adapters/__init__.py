"""Adapters implementing the core ports (HTTP client, cache, executors)."""
