"""Request parameters threaded through CRUD operations.

Services and repositories do not interpret these; applications use them for
things like tenant ids in path variables or extra filters in query parameters.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TypeVar

from starlette.requests import Request

A = TypeVar("A")


@dataclass(frozen=True)
class Parameters:
    """Path variables and query parameters of a request."""

    path: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Parameters":
        return cls()

    @classmethod
    def from_request(cls, request: Request) -> "Parameters":
        """Build parameters from a Starlette/FastAPI request.

        Args:
            request: Incoming request

        Returns:
            Parameters holding the request's path and query parameters
        """
        query: Dict[str, List[str]] = {}
        for name, value in request.query_params.multi_items():
            query.setdefault(name, []).append(value)
        path = {name: str(value) for name, value in request.path_params.items()}
        return cls(path=path, query=query)

    def path_variable(
        self, name: str, converter: Optional[Callable[[str], A]] = None
    ) -> Optional[A]:
        value = self.path.get(name)
        if value is None or converter is None:
            return value
        return _convert(value, converter, f"Cannot get '{name}' path variable, conversion failed")

    def query_parameters(self, name: str) -> List[str]:
        return list(self.query.get(name, []))

    def query_parameter(
        self, name: str, converter: Optional[Callable[[str], A]] = None
    ) -> Optional[A]:
        values = self.query.get(name)
        if not values:
            return None
        if converter is None:
            return values[0]
        return _convert(
            values[0], converter, f"Cannot get '{name}' query parameter, conversion failed"
        )


def _convert(value: str, converter: Callable[[str], A], message: str) -> A:
    try:
        return converter(value)
    except Exception as e:
        raise ValueError(message) from e
