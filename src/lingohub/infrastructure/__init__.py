"""Infrastructure layer: HTTP client, artifact storage, preferences and caches."""
