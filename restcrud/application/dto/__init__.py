"""Model and DTO base classes."""
from .base import CRUDDTO, CRUDModel

__all__ = ["CRUDDTO", "CRUDModel"]
