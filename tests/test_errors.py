"""Tests for the coordination errors."""

from tenantry.errors import BatchFailedError, LockContention, TenantError, TenantExists, TenantNotFound
from tenantry.migration.errors import RevisionError
from tenantry.migrator import MigrationOutcome


def test_lock_contention():
    """Verify the lock key is kept and reported."""
    error = LockContention(-12345)
    assert error.key == -12345
    assert str(error) == "Another migration batch holds the advisory lock -12345"


def test_tenant_errors():
    """Verify tenant errors carry their tenant."""
    missing = TenantNotFound("ghost")
    assert isinstance(missing, TenantError)
    assert missing.tenant == "ghost"
    assert str(missing) == "Tenant 'ghost' does not exist"
    assert str(TenantExists("acme")) == "Tenant 'acme' already exists"


def test_batch_failed_error():
    """Verify the failures are selected from the outcomes and summarized."""
    outcomes = [
        MigrationOutcome.success("acme", 2),
        MigrationOutcome.failed("globex", RevisionError("bad script")),
        MigrationOutcome.skipped_missing("ghost", TenantNotFound("ghost")),
    ]
    error = BatchFailedError(outcomes)
    assert error.outcomes == outcomes
    assert [o.tenant for o in error.failures] == ["globex"]
    assert str(error) == "Migration failed for 1 of 3 tenant(s): globex (RevisionError: bad script)"
