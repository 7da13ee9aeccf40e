"""Infrastructure layer - httpx adapters and settings."""
