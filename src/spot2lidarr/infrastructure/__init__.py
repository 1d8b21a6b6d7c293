"""Infrastructure layer: HTTP integrations, rate limiting, retries and logging."""
