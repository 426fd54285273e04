"""Service layer for dashboard entity management."""
