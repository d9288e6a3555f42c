"""Infrastructure Layer - Persistence and security adapters."""
