"""Mapping between entities, models and DTOs.

A resource plugs its types into the generic CRUD layers through two mappers:

- ``CRUDMapper`` converts between entities and business models
- ``CRUDDTOMapper`` converts between business models and wire DTOs

``FunctionMapper`` builds a ``CRUDMapper`` out of plain functions, and
``IdentityDTOMapper`` serves resources whose DTOs are their models.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Generic, TypeVar

from restcrud.core.parameters import Parameters

I = TypeVar('I')
E = TypeVar('E')
M = TypeVar('M')
D = TypeVar('D')
CM = TypeVar('CM')
UM = TypeVar('UM')
CD = TypeVar('CD')
UD = TypeVar('UD')


class CRUDMapper(ABC, Generic[I, E, M, CM, UM]):
    """Converts between entities and business models."""

    @abstractmethod
    def entity_to_be_created_from(self, create_model: CM, now: datetime) -> E:
        """Build a new entity to insert.

        Args:
            create_model: Data of the entity to create
            now: Creation instant, used for both created_at and updated_at

        Returns:
            Entity with version 0 and no deletion timestamp
        """

    @abstractmethod
    def entity_to_model(self, entity: E) -> M:
        """Project a persisted entity to its business model."""

    @abstractmethod
    def update_entity_with(self, entity: E, update_model: UM) -> None:
        """Copy the fields of an update model onto an entity in place."""


class CRUDDTOMapper(ABC, Generic[I, M, D, CM, UM, CD, UD]):
    """Converts between business models and wire DTOs."""

    @abstractmethod
    def model_to_dto(self, model: M, parameters: Parameters) -> D:
        pass

    @abstractmethod
    def create_dto_to_create_model(self, create_dto: CD, parameters: Parameters) -> CM:
        pass

    @abstractmethod
    def update_dto_to_update_model(self, update_dto: UD, parameters: Parameters) -> UM:
        pass


class FunctionMapper(CRUDMapper[I, E, M, CM, UM]):
    """CRUDMapper assembled from explicit mapping functions."""

    def __init__(
        self,
        create: Callable[[CM, datetime], E],
        to_model: Callable[[E], M],
        update: Callable[[E, UM], None],
    ):
        self._create = create
        self._to_model = to_model
        self._update = update

    def entity_to_be_created_from(self, create_model: CM, now: datetime) -> E:
        return self._create(create_model, now)

    def entity_to_model(self, entity: E) -> M:
        return self._to_model(entity)

    def update_entity_with(self, entity: E, update_model: UM) -> None:
        self._update(entity, update_model)


class IdentityDTOMapper(CRUDDTOMapper[I, M, M, CM, UM, CM, UM]):
    """CRUDDTOMapper for resources that expose their models directly."""

    def model_to_dto(self, model: M, parameters: Parameters) -> M:
        return model

    def create_dto_to_create_model(self, create_dto: CM, parameters: Parameters) -> CM:
        return create_dto

    def update_dto_to_update_model(self, update_dto: UM, parameters: Parameters) -> UM:
        return update_dto
