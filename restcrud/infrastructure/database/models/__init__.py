"""Database models module."""
from .base import Base, CRUDEntity, UTCDateTime, UUIDCRUDEntity

__all__ = [
    'Base',
    'CRUDEntity',
    'UTCDateTime',
    'UUIDCRUDEntity'
]
