"""Base CRUD service.

This module provides the business-layer half of a CRUD resource: creation,
pagination, lookup, optimistic-locking updates and soft deletion on top of a
``CRUDRepository``. Applications subclass ``CRUDService`` (or use it directly)
and override the ``_*_using_repository`` hooks when their store access needs
the request parameters, for example to scope queries to a tenant.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import structlog

from restcrud.application.mappers import CRUDMapper
from restcrud.core.exceptions import ConcurrencyInvariantViolation, CRUDErrorException
from restcrud.core.instant_provider import InstantProvider
from restcrud.core.paged import Paged
from restcrud.core.parameters import Parameters
from restcrud.infrastructure.database.repositories.base import (
    CRUDRepository,
    is_duplicate_error,
)

logger = structlog.get_logger(__name__)

I = TypeVar('I')
E = TypeVar('E')
M = TypeVar('M')
CM = TypeVar('CM')
UM = TypeVar('UM')
A = TypeVar('A')


class Mutation(str, Enum):
    """Kinds of change applied to an existing entity through a conditional update."""

    UPDATE = "update"
    MARK_DELETED = "mark_deleted"


class CRUDService(Generic[I, E, M, CM, UM]):
    """Base class for CRUD services.

    Attributes:
        type_name: Name of the managed type, used in error messages and logs
        instant_provider: Source of the current time
        repository: Store of the managed entities
        mapper: Converts between entities and models
    """

    def __init__(
        self,
        type_name: str,
        instant_provider: InstantProvider,
        repository: CRUDRepository[I, E],
        mapper: CRUDMapper[I, E, M, CM, UM],
    ):
        self.type_name = type_name
        self.instant_provider = instant_provider
        self.repository = repository
        self.mapper = mapper
        self.logger = logger.bind(service=self.__class__.__name__, type_name=type_name)

    async def _create_using_repository(self, entity: E, parameters: Parameters) -> E:
        return await self.repository.insert(entity)

    async def _list_using_repository(
        self, page: int, per_page: int, parameters: Parameters
    ) -> Paged[E]:
        return await self.repository.find_page(page, per_page)

    async def _get_using_repository(self, id: I, parameters: Parameters) -> Optional[E]:
        return await self.repository.find_by_id(id)

    async def _update_using_repository(self, entity: E, parameters: Parameters) -> int:
        return await self.repository.conditional_update(entity)

    async def create(self, create_model: CM, parameters: Parameters) -> M:
        """Create a new entity.

        Args:
            create_model: Data of the entity to create
            parameters: Request parameters

        Returns:
            Model of the created entity

        Raises:
            CRUDErrorException: If an entity with the same data already exists
        """
        self.logger.info("crud_create", parameters=parameters, data=create_model)

        entity = self.mapper.entity_to_be_created_from(create_model, self.instant_provider.now())
        self.logger.debug("crud_entity_built", entity=entity)

        saved = await self._persist(
            create_model, lambda: self._create_using_repository(entity, parameters)
        )
        self.logger.debug("crud_entity_saved", entity=saved)

        return self.mapper.entity_to_model(saved)

    async def list(self, page: int, per_page: int, parameters: Parameters) -> Paged[M]:
        """List entities that are not deleted, one 0-based page at a time."""
        self.logger.info("crud_list", page=page, per_page=per_page, parameters=parameters)

        entities = await self._list_using_repository(page, per_page, parameters)
        self.logger.debug("crud_page_found", count=len(entities.data), total_pages=entities.total_pages)

        return entities.map(self.mapper.entity_to_model)

    async def get(self, id: I, parameters: Parameters) -> Optional[M]:
        """Get an entity.

        Returns:
            Model of the entity, None if it doesn't exist or is deleted
        """
        self.logger.info("crud_get", id=str(id), parameters=parameters)

        entity = await self._get_using_repository(id, parameters)
        if entity is None:
            return None

        self.logger.debug("crud_entity_found", entity=entity)
        return self.mapper.entity_to_model(entity)

    async def update(self, id: I, update_model: UM, parameters: Parameters) -> M:
        """Update an entity.

        Raises:
            CRUDErrorException: If the entity is not found or the update duplicates
                another entity
            ConcurrencyInvariantViolation: If the entity changed after it was read
        """
        self.logger.info("crud_update", id=str(id), parameters=parameters, data=update_model)

        entity = await self._mutate(id, Mutation.UPDATE, parameters, update_model)
        return self.mapper.entity_to_model(entity)

    async def delete(self, id: I, parameters: Parameters) -> None:
        """Soft-delete an entity.

        Raises:
            CRUDErrorException: If the entity is not found
            ConcurrencyInvariantViolation: If the entity changed after it was read
        """
        self.logger.info("crud_delete", id=str(id), parameters=parameters)

        await self._mutate(id, Mutation.MARK_DELETED, parameters)
        self.logger.debug("crud_entity_deleted", id=str(id))

    async def _mutate(
        self,
        id: I,
        mutation: Mutation,
        parameters: Parameters,
        update_model: Optional[UM] = None,
    ) -> E:
        entity = await self._get_using_repository(id, parameters)
        if entity is None:
            raise CRUDErrorException.not_found(self.type_name, id)
        self.logger.debug("crud_entity_found", entity=entity, mutation=mutation.value)

        expected_version = entity.version or 0
        now = self.instant_provider.now()

        if mutation is Mutation.UPDATE:
            self.mapper.update_entity_with(entity, update_model)
            entity.updated_at = now
            log_data: Any = update_model
        else:
            entity.updated_at = now
            entity.deleted_at = now
            log_data = f"id {id}"

        async def write() -> int:
            affected = await self._update_using_repository(entity, parameters)
            self._assert_single_row_is_affected(affected, expected_version)
            return affected

        await self._persist(log_data, write)

        entity.version = expected_version + 1
        self.logger.debug("crud_entity_mutated", entity=entity, mutation=mutation.value)
        return entity

    async def _persist(self, log_data: Any, action: Callable[[], Awaitable[A]]) -> A:
        try:
            result = await action()
            await self.repository.flush()
            return result
        except Exception as e:
            if is_duplicate_error(e):
                raise CRUDErrorException.already_exists(self.type_name, log_data) from e
            raise

    def _assert_single_row_is_affected(self, affected: int, expected_version: int) -> None:
        if affected != 1:
            self.logger.error(
                "crud_version_conflict", affected=affected, expected_version=expected_version
            )
            raise ConcurrencyInvariantViolation(self.type_name, expected_version)
