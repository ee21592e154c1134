"""Application layer: mappers, models and services."""
