"""Infrastructure layer: HTTP integrations, audio adapters, observability."""
