"""Migration-specific exception classes."""

from typing import Optional


class MigrationError(Exception):
    """Base exception for all migration errors.

    :param message: the human readable description
    :param tenant: the tenant being migrated when the error occurred, if any
    """

    def __init__(self, message: str, tenant: Optional[str] = None):  # noqa: D107
        self.tenant = tenant
        super().__init__(message)


class MigrationInProgressError(MigrationError):
    """Raised when another process already holds the migration lock of a tenant."""


class RevisionError(MigrationError):
    """Raised when a migration script fails during execution, after the failure was recorded for the tenant."""

    def __init__(self, message: str, tenant: Optional[str] = None, revision: Optional[str] = None):  # noqa: D107
        self.revision = revision
        super().__init__(message, tenant)


class DiscoveryError(MigrationError):
    """Raised when the script directory or pattern is invalid."""


class ScriptValidationError(MigrationError):
    """Raised when a migration script is missing a callable ``upgrade`` function."""
