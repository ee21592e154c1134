"""Database infrastructure module."""
from .connection import DatabaseConnection
from .models import Base, CRUDEntity, UUIDCRUDEntity
from .repositories import CRUDRepository, SQLAlchemyCRUDRepository

__all__ = [
    'DatabaseConnection',
    'Base',
    'CRUDEntity',
    'UUIDCRUDEntity',
    'CRUDRepository',
    'SQLAlchemyCRUDRepository'
]
