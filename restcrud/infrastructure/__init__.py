"""Infrastructure layer for restcrud."""
