from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field


class CRUDError(BaseModel):
    """Error body returned by CRUD endpoints"""

    code: int = Field(..., description="HTTP status code of the error")
    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="HTTP reason phrase of the status code")

    @classmethod
    def of(cls, status: HTTPStatus, message: str) -> "CRUDError":
        return cls(code=status.value, message=message, type=status.phrase)


class CRUDErrorException(Exception):
    def __init__(self, error: CRUDError):
        self.error = error
        super().__init__(error.message)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CRUDErrorException) and self.error == other.error

    def __hash__(self) -> int:
        return hash((self.error.code, self.error.message, self.error.type))

    def __repr__(self) -> str:
        return f"CRUDErrorException(error={self.error!r})"

    @classmethod
    def already_exists(cls, what: str, data: Any) -> "CRUDErrorException":
        return cls(CRUDError.of(HTTPStatus.CONFLICT, f"{what} with {data} already exists."))

    @classmethod
    def not_found(cls, what: str, id: Any) -> "CRUDErrorException":
        return cls(CRUDError.of(HTTPStatus.NOT_FOUND, f"{what} with id {id} is not found."))


class DuplicateEntityError(Exception):
    """Raised by stores that detect uniqueness violations themselves."""

    def __init__(self, type_name: str, data: Any):
        self.type_name = type_name
        self.data = data
        super().__init__(f"Duplicate {type_name}: {data}")


class ConcurrencyInvariantViolation(RuntimeError):
    """A conditional update affected no rows after the entity was just read."""

    def __init__(self, type_name: str, expected_version: int):
        self.type_name = type_name
        self.expected_version = expected_version
        super().__init__(
            f"Cannot update {type_name}Entity, entity version wasn't {expected_version}!"
        )
