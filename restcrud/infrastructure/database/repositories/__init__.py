"""Database repositories module."""
from .base import CRUDRepository, SQLAlchemyCRUDRepository, is_duplicate_error

__all__ = [
    'CRUDRepository',
    'SQLAlchemyCRUDRepository',
    'is_duplicate_error'
]
