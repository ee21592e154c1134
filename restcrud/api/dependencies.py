"""Common dependencies for CRUD routes."""

from typing import AsyncGenerator, Callable

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from restcrud.core.config import Settings
from restcrud.core.parameters import Parameters
from restcrud.infrastructure.database.connection import DatabaseConnection


def get_settings_dep() -> Settings:
    """Get application settings."""
    from restcrud.core.config import settings
    return settings


def get_parameters(request: Request) -> Parameters:
    """Get the path and query parameters of the current request."""
    return Parameters.from_request(request)


def session_dependency(
    connection: DatabaseConnection,
) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """Build a dependency yielding one transactional session per request.

    Example:
        get_session = session_dependency(connection)

        def get_foo_service(session: AsyncSession = Depends(get_session)) -> FooService:
            return FooService(InstantProvider.utc(), FooRepository(session), FooMapper())
    """

    async def get_session() -> AsyncGenerator[AsyncSession, None]:
        async with connection.get_session() as session:
            yield session

    return get_session
