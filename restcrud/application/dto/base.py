"""Base model and DTO classes for the application layer.

Models are the business-layer shape of an entity, DTOs are the shape sent
over the wire. Create and update models/DTOs are plain pydantic models holding
only domain fields; they never carry ids, versions or timestamps.
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

I = TypeVar('I')


class CRUDModel(BaseModel, Generic[I]):
    """Business-layer projection of a persisted entity."""

    model_config = ConfigDict(from_attributes=True)

    id: I = Field(..., description="Id of the entity")
    version: int = Field(..., ge=0, description="Number of changes made to the entity")
    created_at: datetime = Field(..., description="When the entity was created")
    updated_at: datetime = Field(..., description="When the entity was last changed")
    deleted_at: Optional[datetime] = Field(None, description="When the entity was deleted")


class CRUDDTO(BaseModel, Generic[I]):
    """Wire projection of a persisted entity."""

    model_config = ConfigDict(from_attributes=True)

    id: I = Field(..., description="Id of the entity")
    created_at: datetime = Field(..., description="When the entity was created")
    updated_at: datetime = Field(..., description="When the entity was last changed")
