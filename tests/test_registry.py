"""Tests for the tenant registries."""

import os

from tenantry.backend import create_connection_pool
from tenantry.errors import TenantExists
from tenantry.registry import SQLiteTenantRegistry, get_tenant_registry

import pytest

from tests.mocks import MockConnectionPool


class TestSQLiteTenantRegistry:
    """Tests for the file backed registry."""

    def test_create_exists_list(self, tmp_path, sqlite_url: str):
        """Verify tenants are created as database files and listed in order."""
        cnx_pool = create_connection_pool(sqlite_url)
        registry = get_tenant_registry(cnx_pool)
        assert isinstance(registry, SQLiteTenantRegistry)
        assert registry.list() == []
        assert not registry.exists("globex")
        registry.create("globex")
        registry.create("acme")
        assert os.path.isfile(tmp_path / "acme.sqlite3")
        assert registry.exists("globex")
        assert registry.list() == ["acme", "globex"]
        cnx_pool.dispose()

    def test_main_file_not_listed(self, sqlite_url: str):
        """Verify the pool's own database file is never listed, even once it exists."""
        cnx_pool = create_connection_pool(sqlite_url)
        with cnx_pool.connection() as cnx:
            cnx.commit()
        registry = get_tenant_registry(cnx_pool)
        assert registry.exists("public")
        assert registry.list() == []
        cnx_pool.dispose()

    def test_main_file_named_otherwise(self, tmp_path):
        """Verify a main database not named after the default tenant is not mistaken for a tenant."""
        cnx_pool = create_connection_pool(f"sqlite3://{tmp_path}/app.sqlite3")
        with cnx_pool.connection() as cnx:
            cnx.commit()
        registry = get_tenant_registry(cnx_pool)
        registry.create("acme")
        assert os.path.isfile(tmp_path / "app.sqlite3")
        assert registry.list() == ["acme"]
        cnx_pool.dispose()

    def test_create_existing(self, sqlite_url: str):
        """Verify creating a tenant twice raises TenantExists."""
        cnx_pool = create_connection_pool(sqlite_url)
        registry = get_tenant_registry(cnx_pool)
        registry.create("acme")
        with pytest.raises(TenantExists, match="Tenant 'acme' already exists") as exc_info:
            registry.create("acme")
        assert exc_info.value.tenant == "acme"
        cnx_pool.dispose()

    def test_ignores_other_files(self, tmp_path, sqlite_url: str):
        """Verify files without the tenant suffix are not tenants."""
        (tmp_path / "notes.txt").write_text("not a tenant")
        (tmp_path / "backup.db").write_text("not a tenant")
        cnx_pool = create_connection_pool(sqlite_url)
        assert get_tenant_registry(cnx_pool).list() == []
        cnx_pool.dispose()


def test_unsupported_backend():
    """Verify backends without a registry are rejected."""
    with pytest.raises(ValueError, match="Unsupported backend for tenant registry: 'mock'"):
        get_tenant_registry(MockConnectionPool())
