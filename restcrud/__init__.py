"""Generic CRUD building blocks for FastAPI and SQLAlchemy."""

from restcrud.api.app import create_app
from restcrud.api.controller import CRUDController
from restcrud.application.dto.base import CRUDDTO, CRUDModel
from restcrud.application.mappers import (
    CRUDDTOMapper,
    CRUDMapper,
    FunctionMapper,
    IdentityDTOMapper,
)
from restcrud.application.services.base import CRUDService
from restcrud.core import (
    ConcurrencyInvariantViolation,
    CRUDError,
    CRUDErrorException,
    DuplicateEntityError,
    InstantProvider,
    Paged,
    Parameters,
)
from restcrud.infrastructure.database import (
    CRUDEntity,
    CRUDRepository,
    DatabaseConnection,
    SQLAlchemyCRUDRepository,
    UUIDCRUDEntity,
)

__version__ = "0.1.0"

__all__ = [
    "ConcurrencyInvariantViolation",
    "create_app",
    "CRUDController",
    "CRUDDTO",
    "CRUDDTOMapper",
    "CRUDEntity",
    "CRUDError",
    "CRUDErrorException",
    "CRUDMapper",
    "CRUDModel",
    "CRUDRepository",
    "CRUDService",
    "DatabaseConnection",
    "DuplicateEntityError",
    "FunctionMapper",
    "IdentityDTOMapper",
    "InstantProvider",
    "Paged",
    "Parameters",
    "SQLAlchemyCRUDRepository",
    "UUIDCRUDEntity",
]
