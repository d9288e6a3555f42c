"""API V1 Endpoints."""
