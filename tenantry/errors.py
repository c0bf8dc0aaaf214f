"""Errors raised while coordinating a migration batch across tenants."""

from typing import List


class LockContention(Exception):
    """Raised when another process already holds the migration advisory lock."""

    def __init__(self, key: int):
        """Construct a lock contention error.

        :param key: the advisory lock key that could not be obtained
        """
        self.key = key
        super().__init__(f"Another migration batch holds the advisory lock {key}")


class TenantError(Exception):
    """Base exception for tenant lifecycle errors."""

    def __init__(self, tenant: str, message: str):
        """Construct a tenant error.

        :param tenant: the tenant the error concerns
        :param message: the human readable description
        """
        self.tenant = tenant
        super().__init__(message)


class TenantNotFound(TenantError):
    """Raised when a tenant to migrate does not exist."""

    def __init__(self, tenant: str):  # noqa: D107
        super().__init__(tenant, f"Tenant '{tenant}' does not exist")


class TenantExists(TenantError):
    """Raised when creating a tenant that already exists."""

    def __init__(self, tenant: str):  # noqa: D107
        super().__init__(tenant, f"Tenant '{tenant}' already exists")


class BatchFailedError(Exception):
    """Raised once every tenant was attempted and at least one of them failed.

    The per-tenant outcomes are kept on the exception, the first failure is chained as its cause.
    """

    def __init__(self, outcomes: List):
        """Construct a batch failure.

        :param outcomes: every MigrationOutcome of the batch
        """
        self.outcomes = list(outcomes)
        self.failures = [outcome for outcome in self.outcomes if outcome.is_failure]
        details = ", ".join(f"{o.tenant} ({type(o.error).__name__}: {o.error})" for o in self.failures)
        super().__init__(f"Migration failed for {len(self.failures)} of {len(self.outcomes)} tenant(s): {details}")
