"""Tenant registries: where tenants are created and enumerated for each backend."""

import glob
import logging
import os.path
from abc import ABC, abstractmethod
from typing import List

from tenantry.backend.base import ConnectionPool
from tenantry.backend.postgres.base import DUPLICATE_SCHEMA, error_code, quote_identifier
from tenantry.backend.sqlite import TENANT_FILE_SUFFIX
from tenantry.errors import TenantExists


class TenantRegistry(ABC):
    """Abstract base for the global list of tenants of a deployment."""

    @abstractmethod
    def create(self, tenant: str):
        """Create the tenant.

        :param tenant: the tenant name
        :raises TenantExists: if the tenant already exists
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, tenant: str) -> bool:
        """Return whether the tenant exists."""
        pass  # pragma: no cover

    @abstractmethod
    def list(self) -> List[str]:
        """Return every tenant name, sorted."""
        pass  # pragma: no cover


class PostgresTenantRegistry(TenantRegistry):
    """Tenants are PostgreSQL schemas of the pool's database."""

    SYSTEM_SCHEMA_FILTER = "schema_name NOT LIKE 'pg\\_%' AND schema_name <> 'information_schema'"

    def __init__(self, pool: ConnectionPool):
        """Construct a schema backed registry.

        :param pool: pool of the database holding the tenant schemas
        """
        self.logger = logging.getLogger(__name__)
        self._pool = pool

    def create(self, tenant: str):  # noqa: D102
        # Called from parallel workers, each call gets its own pool so the shared one is never leased concurrently
        create_pool = self._pool.reconfigure()
        try:
            with create_pool.connection() as cnx:
                try:
                    cnx.execute(f"CREATE SCHEMA {quote_identifier(tenant)}", commit=True)
                except Exception as exc:
                    cnx.rollback()
                    if error_code(exc) == DUPLICATE_SCHEMA:
                        raise TenantExists(tenant) from exc
                    raise
        finally:
            create_pool.dispose()
        self.logger.debug(f"Created schema for tenant '{tenant}'")

    def exists(self, tenant: str) -> bool:  # noqa: D102
        with self._pool.connection() as cnx:
            found = cnx.scalar("SELECT 1 FROM information_schema.schemata WHERE schema_name = %s", (tenant,))
        return found is not None

    def list(self) -> List[str]:  # noqa: D102
        sql = f"SELECT schema_name FROM information_schema.schemata WHERE {self.SYSTEM_SCHEMA_FILTER} ORDER BY 1"
        with self._pool.connection() as cnx:
            with cnx.query(sql) as results:
                tenants = [row[0] for row in results.fetchall()]
            cnx.commit()
        return tenants


class SQLiteTenantRegistry(TenantRegistry):
    """Tenants are ``{tenant}.sqlite3`` database files beside the pool's own database file, which is not listed."""

    def __init__(self, pool: ConnectionPool):
        """Construct a file backed registry.

        :param pool: a SQLite pool, its database file's directory holds the tenants
        """
        self.logger = logging.getLogger(__name__)
        self._pool = pool

    def create(self, tenant: str):  # noqa: D102
        if self.exists(tenant):
            raise TenantExists(tenant)
        tenant_pool = self._pool.for_tenant(tenant)
        with tenant_pool.connection() as cnx:
            cnx.commit()
        tenant_pool.dispose()
        self.logger.debug(f"Created database file for tenant '{tenant}'")

    def exists(self, tenant: str) -> bool:  # noqa: D102
        return os.path.isfile(self._pool.tenant_path(tenant))

    def list(self) -> List[str]:  # noqa: D102
        pattern = os.path.join(glob.escape(self._pool.tenant_directory), f"*{TENANT_FILE_SUFFIX}")
        main_file = os.path.basename(self._pool.database_path)
        names = [
            os.path.basename(path)[: -len(TENANT_FILE_SUFFIX)]
            for path in glob.glob(pattern)
            if os.path.basename(path) != main_file
        ]
        return sorted(names)


_REGISTRY_MAP = {
    "postgresql": PostgresTenantRegistry,
    "sqlite3": SQLiteTenantRegistry,
}


def get_tenant_registry(pool: ConnectionPool) -> TenantRegistry:
    """Return the tenant registry matching the pool's backend.

    :param pool: the connection pool of the deployment
    :returns: a ``TenantRegistry`` instance
    :raises ValueError: if the backend has no registry
    """
    registry_class = _REGISTRY_MAP.get(pool.backend)
    if registry_class is None:
        raise ValueError(f"Unsupported backend for tenant registry: '{pool.backend}'")
    return registry_class(pool)


__all__ = [
    "PostgresTenantRegistry",
    "SQLiteTenantRegistry",
    "TenantRegistry",
    "get_tenant_registry",
]
