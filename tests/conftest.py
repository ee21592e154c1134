"""Pytest configuration and fixtures"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from foo_resource import FooMapper, FooService, FooTestData, foo_controller
from restcrud.api.app import create_app
from restcrud.core.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a small page size limit"""
    return Settings(default_per_page=2, max_per_page=5)


@pytest.fixture
def foo_test_data() -> FooTestData:
    """Fresh Foo test data backed by an in-memory repository"""
    return FooTestData()


@pytest.fixture
def foo_service(foo_test_data: FooTestData) -> FooService:
    return FooService(foo_test_data.instant_provider, foo_test_data.repository, FooMapper())


@pytest.fixture
def client(foo_service: FooService, test_settings: Settings) -> TestClient:
    """Client of an app serving the Foo resource from the in-memory repository"""
    app = create_app(foo_controller(lambda: foo_service, test_settings), settings=test_settings)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a throwaway SQLite database file"""
    return f"sqlite:///{tmp_path / 'restcrud_test.db'}"
