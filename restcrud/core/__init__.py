from restcrud.core.exceptions import (
    ConcurrencyInvariantViolation,
    CRUDError,
    CRUDErrorException,
    DuplicateEntityError,
)
from restcrud.core.instant_provider import InstantProvider
from restcrud.core.paged import Paged
from restcrud.core.parameters import Parameters

__all__ = [
    "ConcurrencyInvariantViolation",
    "CRUDError",
    "CRUDErrorException",
    "DuplicateEntityError",
    "InstantProvider",
    "Paged",
    "Parameters",
]
