"""Tests for the migration error hierarchy."""

from tenantry.migration.errors import (
    DiscoveryError,
    MigrationError,
    MigrationInProgressError,
    RevisionError,
    ScriptValidationError,
)

import pytest


@pytest.mark.parametrize(
    "error_class", [MigrationInProgressError, RevisionError, DiscoveryError, ScriptValidationError]
)
def test_migration_error_is_base(error_class):
    """Verify MigrationError is the base for all migration exceptions."""
    assert issubclass(error_class, MigrationError)


def test_migration_error_tenant():
    """Verify the tenant is optional and kept."""
    assert MigrationError("bad directory").tenant is None
    err = MigrationInProgressError("lock held", "acme")
    assert err.tenant == "acme"
    assert str(err) == "lock held"


def test_revision_error():
    """Verify RevisionError keeps the tenant and the failed revision."""
    err = RevisionError("script failed", "acme", "20240101_001_create_users")
    assert err.tenant == "acme"
    assert err.revision == "20240101_001_create_users"
    assert str(err) == "script failed"
    assert RevisionError("script failed").revision is None
