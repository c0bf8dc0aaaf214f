"""Migration of a single tenant, with the configured recovery for missing tenants."""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from tenantry.config import MissingTenantStrategy
from tenantry.errors import TenantExists, TenantNotFound
from tenantry.migration.errors import MigrationError
from tenantry.registry import TenantRegistry


class OutcomeStatus(enum.Enum):
    """Result of migrating one tenant."""

    SUCCESS = "success"
    SKIPPED_MISSING = "skipped_missing"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationOutcome:
    """The outcome of one tenant within a batch.

    :param tenant: the tenant
    :param status: what happened
    :param error: the exception of a failed tenant
    :param applied: the number of scripts applied, when the applier reports it
    """

    tenant: str
    status: OutcomeStatus
    error: Optional[BaseException] = None
    applied: Optional[int] = None

    @classmethod
    def success(cls, tenant: str, applied: Optional[int] = None) -> "MigrationOutcome":  # noqa: D102
        return cls(tenant, OutcomeStatus.SUCCESS, applied=applied)

    @classmethod
    def skipped_missing(cls, tenant: str, error: TenantNotFound = None) -> "MigrationOutcome":  # noqa: D102
        return cls(tenant, OutcomeStatus.SKIPPED_MISSING, error=error)

    @classmethod
    def failed(cls, tenant: str, error: BaseException) -> "MigrationOutcome":  # noqa: D102
        return cls(tenant, OutcomeStatus.FAILED, error=error)

    @property
    def is_failure(self) -> bool:
        """Whether the tenant failed and the batch must report it."""
        return self.status is OutcomeStatus.FAILED


class TenantMigrator:
    """Applies pending migrations to one tenant.

    ``applier`` is any object with an ``apply_pending(tenant)`` method raising ``TenantNotFound`` for missing tenants
    and ``MigrationError`` for broken migrations, such as ``tenantry.migration.MigrationRunner``.
    """

    def __init__(self, registry: TenantRegistry, applier, strategy: MissingTenantStrategy):
        """Construct a tenant migrator.

        :param registry: the registry used to create missing tenants
        :param applier: the migration applier
        :param strategy: the recovery applied to tenants that do not exist
        """
        self.logger = logging.getLogger(__name__)
        self._registry = registry
        self._applier = applier
        self._strategy = strategy

    @property
    def strategy(self) -> MissingTenantStrategy:  # noqa: D102
        return self._strategy

    def create_tenant(self, tenant: str) -> bool:
        """Create the tenant, treating an already existing tenant as done.

        :param tenant: the tenant to create
        :returns: True if the tenant was created, False if it already existed
        """
        self.logger.info(f"Creating {tenant} tenant")
        try:
            self._registry.create(tenant)
        except TenantExists as e:
            self.logger.warning(f"Tried to create already existing tenant: {e}")
            return False
        return True

    def migrate(self, tenant: str) -> MigrationOutcome:
        """Migrate the tenant.

        :param tenant: the tenant to migrate
        :returns: ``SUCCESS``, ``SKIPPED_MISSING``, or ``FAILED`` carrying the ``MigrationError``
        :raises TenantNotFound: if the tenant does not exist and the strategy is ``RAISE_ERROR``
        """
        if self._strategy is MissingTenantStrategy.CREATE_TENANT:
            self.create_tenant(tenant)
        self.logger.info(f"Migrating {tenant} tenant")
        try:
            applied = self._applier.apply_pending(tenant)
        except TenantNotFound as e:
            if self._strategy is MissingTenantStrategy.RAISE_ERROR:
                raise
            self.logger.warning(str(e))
            return MigrationOutcome.skipped_missing(tenant, e)
        except MigrationError as e:
            self.logger.error(f"Migrating {tenant} tenant failed: {e}")
            return MigrationOutcome.failed(tenant, e)
        return MigrationOutcome.success(tenant, applied if isinstance(applied, int) else None)
