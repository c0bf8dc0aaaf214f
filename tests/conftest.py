"""Fixtures shared by the coordination tests."""

import pytest

from tests.mocks import MockApplier, MockConnectionPool, MockTenantRegistry


@pytest.fixture()
def mock_pool() -> MockConnectionPool:
    """Provide a mock pool whose backend supports advisory locks."""
    return MockConnectionPool()


@pytest.fixture()
def registry() -> MockTenantRegistry:
    """Provide an in memory registry holding the default tenant and three tenants."""
    return MockTenantRegistry(["public", "acme", "globex", "initech"])


@pytest.fixture()
def applier(registry) -> MockApplier:
    """Provide a mock applier that raises TenantNotFound for tenants missing from the registry."""
    return MockApplier(registry)


@pytest.fixture()
def sqlite_url(tmp_path) -> str:
    """Provide a SQLite URL whose directory holds the tenant database files."""
    return f"sqlite3://{tmp_path}/public.sqlite3"
