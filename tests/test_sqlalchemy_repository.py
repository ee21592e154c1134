"""Tests for the SQLAlchemy CRUD repository on SQLite"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from foo_resource import CreateFoo, FooMapper, FooRepository, FooService, UpdateFoo, foo_controller
from restcrud.api.app import create_app
from restcrud.api.dependencies import session_dependency
from restcrud.core.exceptions import CRUDErrorException
from restcrud.core.instant_provider import InstantProvider
from restcrud.core.parameters import Parameters
from restcrud.infrastructure.database import Base, DatabaseConnection

NOW = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


async def connect(database_url: str) -> DatabaseConnection:
    connection = DatabaseConnection(database_url)
    await connection.connect()
    await connection.create_all(Base.metadata)
    return connection


def foo_service(session: AsyncSession) -> FooService:
    return FooService(InstantProvider.utc(), FooRepository(session), FooMapper())


class TestDatabaseConnection:
    def test_async_urls(self):
        """Test that sync URLs are switched to async drivers"""
        assert DatabaseConnection("sqlite:///./foo.db").database_url == "sqlite+aiosqlite:///./foo.db"
        assert (
            DatabaseConnection("postgresql://user:pw@host/db").database_url
            == "postgresql+asyncpg://user:pw@host/db"
        )

    @pytest.mark.asyncio
    async def test_session_requires_connection(self):
        connection = DatabaseConnection("sqlite:///./unused.db")

        with pytest.raises(RuntimeError, match="Database not connected"):
            async with connection.get_session():
                pass


class TestSQLAlchemyCRUDRepository:
    @pytest.mark.asyncio
    async def test_insert_and_find_by_id(self, database_url):
        """Test that inserted entities get an id and version 0"""
        connection = await connect(database_url)
        try:
            async with connection.get_session() as session:
                entity = FooMapper().entity_to_be_created_from(CreateFoo(foo="a", bar=1), NOW)
                saved = await FooRepository(session).insert(entity)

            assert saved.id is not None

            async with connection.get_session() as session:
                found = await FooRepository(session).find_by_id(saved.id)

            assert found is not None
            assert (found.foo, found.bar, found.version) == ("a", 1, 0)
            assert found.deleted_at is None
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_find_page(self, database_url):
        """Test that pages are ordered by creation and skip deleted entities"""
        connection = await connect(database_url)
        mapper = FooMapper()
        try:
            async with connection.get_session() as session:
                repository = FooRepository(session)
                saved = []
                for i in range(3):
                    entity = mapper.entity_to_be_created_from(
                        CreateFoo(foo=f"foo{i}", bar=i), NOW + timedelta(seconds=i)
                    )
                    saved.append(await repository.insert(entity))

                saved[1].deleted_at = NOW
                assert await repository.conditional_update(saved[1]) == 1

            async with connection.get_session() as session:
                repository = FooRepository(session)
                first = await repository.find_page(0, 1)
                second = await repository.find_page(1, 1)
                past_end = await repository.find_page(2, 1)

            assert [entity.foo for entity in first.data] == ["foo0"]
            assert [entity.foo for entity in second.data] == ["foo2"]
            assert past_end.data == []
            assert first.total_pages == second.total_pages == past_end.total_pages == 2
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_conditional_update_checks_version(self, database_url):
        """Test that a stale version affects no rows"""
        connection = await connect(database_url)
        try:
            async with connection.get_session() as session:
                entity = FooMapper().entity_to_be_created_from(CreateFoo(foo="a", bar=1), NOW)
                saved = await FooRepository(session).insert(entity)

            async with connection.get_session() as session:
                repository = FooRepository(session)
                entity = await repository.find_by_id(saved.id)
                entity.foo = "b"

                assert await repository.conditional_update(entity) == 1
                assert await repository.conditional_update(entity) == 0

            async with connection.get_session() as session:
                found = await FooRepository(session).find_by_id(saved.id)

            assert (found.foo, found.version) == ("b", 1)
        finally:
            await connection.disconnect()


class TestFooServiceOnSQLite:
    @pytest.mark.asyncio
    async def test_crud_lifecycle(self, database_url):
        """Test create, update and delete through the service"""
        connection = await connect(database_url)
        parameters = Parameters.empty()
        try:
            async with connection.get_session() as session:
                created = await foo_service(session).create(CreateFoo(foo="a", bar=1), parameters)

            assert created.version == 0

            async with connection.get_session() as session:
                updated = await foo_service(session).update(
                    created.id, UpdateFoo(foo="b", bar=2), parameters
                )

            assert (updated.foo, updated.bar, updated.version) == ("b", 2, 1)

            async with connection.get_session() as session:
                found = await foo_service(session).get(created.id, parameters)

            assert (found.foo, found.version) == ("b", 1)

            async with connection.get_session() as session:
                await foo_service(session).delete(created.id, parameters)

            async with connection.get_session() as session:
                assert await foo_service(session).get(created.id, parameters) is None
                page = await foo_service(session).list(0, 20, parameters)

            assert page.data == []
            assert page.total_pages == 0
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_unique_index_conflict(self, database_url):
        """Test that a unique index violation becomes a conflict"""
        connection = await connect(database_url)
        create_model = CreateFoo(foo="a", bar=1)
        try:
            async with connection.get_session() as session:
                await foo_service(session).create(create_model, Parameters.empty())

            with pytest.raises(CRUDErrorException) as exc_info:
                async with connection.get_session() as session:
                    await foo_service(session).create(create_model, Parameters.empty())

            assert exc_info.value == CRUDErrorException.already_exists("Foo", create_model)
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_update_conflict(self, database_url):
        """Test that updating into another live entity's data is a conflict"""
        connection = await connect(database_url)
        parameters = Parameters.empty()
        try:
            async with connection.get_session() as session:
                await foo_service(session).create(CreateFoo(foo="a", bar=1), parameters)
                other = await foo_service(session).create(CreateFoo(foo="b", bar=2), parameters)

            update_model = UpdateFoo(foo="a", bar=1)
            with pytest.raises(CRUDErrorException) as exc_info:
                async with connection.get_session() as session:
                    await foo_service(session).update(other.id, update_model, parameters)

            assert exc_info.value.error.code == 409
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_deleted_rows_do_not_block_recreation(self, database_url):
        connection = await connect(database_url)
        create_model = CreateFoo(foo="a", bar=1)
        parameters = Parameters.empty()
        try:
            async with connection.get_session() as session:
                created = await foo_service(session).create(create_model, parameters)

            async with connection.get_session() as session:
                await foo_service(session).delete(created.id, parameters)

            async with connection.get_session() as session:
                recreated = await foo_service(session).create(create_model, parameters)

            assert recreated.id != created.id
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_timestamps_keep_their_timezone(self, database_url):
        """Test that timestamps read back from SQLite are aware and comparable"""
        connection = await connect(database_url)
        parameters = Parameters.empty()
        try:
            async with connection.get_session() as session:
                created = await foo_service(session).create(CreateFoo(foo="a", bar=1), parameters)

            async with connection.get_session() as session:
                before = await foo_service(session).get(created.id, parameters)

            assert before == created
            assert before.created_at.tzinfo is not None

            async with connection.get_session() as session:
                await foo_service(session).update(created.id, UpdateFoo(foo="b", bar=2), parameters)

            async with connection.get_session() as session:
                after = await foo_service(session).get(created.id, parameters)

            assert after.created_at == before.created_at
            assert after.updated_at > before.updated_at
        finally:
            await connection.disconnect()


class TestHTTPOnSQLite:
    def test_requests_use_one_session_each(self, database_url, test_settings):
        """Test the Foo endpoints on top of per-request SQLite sessions"""
        connection = asyncio.run(connect(database_url))
        get_session = session_dependency(connection)

        def get_foo_service(session: AsyncSession = Depends(get_session)) -> FooService:
            return foo_service(session)

        app = create_app(foo_controller(get_foo_service, test_settings), settings=test_settings)
        client = TestClient(app, raise_server_exceptions=False)
        try:
            created = client.post("/foos", json={"foo": "a", "bar": 1})
            assert created.status_code == 201
            foo_id = created.json()["id"]

            assert client.post("/foos", json={"foo": "a", "bar": 1}).status_code == 409

            updated = client.put(f"/foos/{foo_id}", json={"foo": "b", "bar": 2})
            assert updated.status_code == 200
            assert updated.json()["foo"] == "b"

            assert client.delete(f"/foos/{foo_id}").status_code == 204
            assert client.get(f"/foos/{foo_id}").status_code == 404
            assert client.get("/foos").json()["total_pages"] == 0
        finally:
            asyncio.run(connection.disconnect())
