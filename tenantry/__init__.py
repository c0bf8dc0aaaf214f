"""Coordinated, advisory locked schema migrations across every tenant of a database."""

from tenantry.config import BatchConfig, MissingTenantStrategy
from tenantry.coordinator import BatchState, Coordinator
from tenantry.errors import BatchFailedError, LockContention, TenantExists, TenantNotFound
from tenantry.lock import AdvisoryLock, LockHandle, compute_lock_key, exclusive_connection
from tenantry.migrator import MigrationOutcome, OutcomeStatus, TenantMigrator
from tenantry.parallel import ParallelRunner
from tenantry.tenants import TenantLister

__all__ = [
    "AdvisoryLock",
    "BatchConfig",
    "BatchFailedError",
    "BatchState",
    "Coordinator",
    "LockContention",
    "LockHandle",
    "MigrationOutcome",
    "MissingTenantStrategy",
    "OutcomeStatus",
    "ParallelRunner",
    "TenantExists",
    "TenantLister",
    "TenantMigrator",
    "TenantNotFound",
    "compute_lock_key",
    "exclusive_connection",
]
