"""HTTP boundary for CRUD resources."""
