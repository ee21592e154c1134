"""In-memory test harness for CRUD resources.

Requires the ``test`` extra (pytest, pytest-asyncio, httpx).
"""

from restcrud.testing.controller_tests import CRUDControllerTests
from restcrud.testing.data import CRUDTestData
from restcrud.testing.id_generator import IdGenerator
from restcrud.testing.instant_provider import AdjustableInstantProvider
from restcrud.testing.repository import InMemoryCRUDRepository
from restcrud.testing.service_tests import CRUDServiceTests

__all__ = [
    "AdjustableInstantProvider",
    "CRUDControllerTests",
    "CRUDServiceTests",
    "CRUDTestData",
    "IdGenerator",
    "InMemoryCRUDRepository",
]
