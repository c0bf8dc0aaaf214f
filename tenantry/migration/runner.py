"""Applies pending migration scripts to one tenant at a time."""

import importlib.util
import logging
import traceback
from contextlib import contextmanager
from typing import List, Optional, Set

from tenantry.backend.base import Connection, ConnectionPool
from tenantry.errors import TenantNotFound
from tenantry.lock import compute_lock_key
from tenantry.migration.connection import MigrationConnection
from tenantry.migration.discovery import MigrationScript, ScriptDiscovery
from tenantry.migration.errors import MigrationInProgressError, RevisionError, ScriptValidationError
from tenantry.migration.schema import SchemaProviderBase, get_schema_provider
from tenantry.registry import get_tenant_registry


class MigrationRunner:
    """Runs migration scripts against the tenants of a database.

    Each call to ``apply_pending`` works on its own per-tenant pool derived from the runner's pool, so one runner can
    be shared by parallel workers. Every script runs within its own transaction.

    When the pool has ``advisory_locks`` enabled and the backend supports them, the runner takes a per-tenant
    advisory lock before applying scripts, so two processes never migrate the same tenant at once. A coordinator
    already holding the batch lock disables this through a pool reconfigured with ``advisory_locks=false``.
    """

    def __init__(self, pool: ConnectionPool, script_dir: str, pattern: Optional[str] = None):
        """Construct a migration runner.

        :param pool: pool of the database holding the tenants
        :param script_dir: path to the directory containing migration scripts
        :param pattern: optional regex pattern for migration filenames
        :raises DiscoveryError: if the script directory is invalid
        """
        self.logger = logging.getLogger(__name__)
        self._pool = pool
        self._discovery = ScriptDiscovery(script_dir, pattern)
        self._schema_provider = get_schema_provider(pool.backend)

    @property
    def schema_provider(self) -> SchemaProviderBase:
        """Return the schema provider for this runner's backend."""
        return self._schema_provider

    def apply_pending(self, tenant: str) -> int:
        """Apply every pending migration script to the tenant.

        :param tenant: the tenant to migrate
        :returns: the number of scripts applied
        :raises TenantNotFound: if the tenant does not exist
        :raises MigrationInProgressError: if another process is migrating the tenant
        :raises RevisionError: if a migration script fails
        """
        tenant_pool = self._pool.for_tenant(tenant)
        try:
            if not get_tenant_registry(tenant_pool).exists(tenant):
                raise TenantNotFound(tenant)
            with tenant_pool.connection() as cnx:
                return self._run_upgrade(tenant, cnx, tenant_pool)
        finally:
            tenant_pool.dispose()

    def _run_upgrade(self, tenant: str, cnx: Connection, pool: ConnectionPool) -> int:
        sp = self._schema_provider
        cnx.execute(sp.create_revisions_table(), commit=True)
        pending = self._compute_pending(self._discovery.discover(), self._get_applied_revisions(cnx))
        if not pending:
            self.logger.debug(f"Tenant '{tenant}' is up to date")
            return 0
        with self._tenant_lock(tenant, cnx, pool):
            for script in pending:
                self._apply_script(tenant, cnx, pool, script)
        return len(pending)

    @staticmethod
    @contextmanager
    def _tenant_lock(tenant: str, cnx: Connection, pool: ConnectionPool):
        if not (pool.advisory_locks and pool.supports_advisory_locks):
            yield
            return
        key = compute_lock_key(cnx.current_database(), cnx.current_schema())
        if not cnx.try_advisory_lock(key):
            raise MigrationInProgressError(f"Another migration of tenant '{tenant}' is already in progress", tenant)
        try:
            yield
        finally:
            cnx.advisory_unlock(key)

    def _get_applied_revisions(self, cnx: Connection) -> Set[str]:
        with cnx.query(self._schema_provider.select_applied_revisions()) as results:
            applied = {row[0] for row in results.fetchall()}
        cnx.commit()
        return applied

    @staticmethod
    def _compute_pending(scripts: List[MigrationScript], applied: Set[str]) -> List[MigrationScript]:
        return [s for s in scripts if s.name not in applied]

    def _apply_script(self, tenant: str, cnx: Connection, pool: ConnectionPool, script: MigrationScript):
        self.logger.debug(f"Applying {script.name} to tenant '{tenant}'")
        cnx.autocommit = False
        try:
            upgrade = self._load_upgrade(script)
            upgrade(MigrationConnection(cnx, pool.placeholder, tenant))
            self._insert_revision(cnx, script.name, "success", None, None)
            cnx.commit()
        except Exception as exc:
            cnx.rollback()
            error = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            self._insert_revision(cnx, script.name, "error", type(exc).__name__, error)
            cnx.commit()
            raise RevisionError(
                f"Migration '{script.name}' failed for tenant '{tenant}': {exc}", tenant, script.name
            ) from exc
        finally:
            cnx.autocommit = True

    @staticmethod
    def _load_upgrade(script: MigrationScript):
        spec = importlib.util.spec_from_file_location(script.name, script.path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        upgrade = getattr(module, "upgrade", None)
        if upgrade is None or not callable(upgrade):
            raise ScriptValidationError(f"Migration script '{script.name}' must define a callable 'upgrade' function")
        return upgrade

    def _insert_revision(self, cnx: Connection, name: str, status: str, error_type, error_message):
        params = (name, status, error_type, error_message)
        cnx.execute(self._schema_provider.insert_revision(), params, commit=False)
