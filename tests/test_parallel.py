"""Tests for the parallel fan-out of tenant work."""

import threading
from collections import Counter

from tenantry.migrator import MigrationOutcome, OutcomeStatus
from tenantry.parallel import ParallelRunner

import pytest

TENANTS = [f"tenant_{i:02d}" for i in range(25)]


class TestParallelRunner:
    """Tests for ParallelRunner.fan_out."""

    @pytest.mark.parametrize("concurrency", [0, 1, 4, 50])
    def test_each_tenant_once(self, concurrency: int):
        """Verify every tenant is attempted exactly once."""
        calls = Counter()
        mutex = threading.Lock()

        def worker(tenant):
            with mutex:
                calls[tenant] += 1

        outcomes = ParallelRunner(concurrency).fan_out(TENANTS, worker)
        assert calls == Counter(TENANTS)
        assert sorted(o.tenant for o in outcomes) == TENANTS
        assert all(o.status is OutcomeStatus.SUCCESS for o in outcomes)

    def test_inline(self):
        """Verify concurrency 0 runs every tenant in the calling thread, in order."""
        threads = []
        outcomes = ParallelRunner(0).fan_out(TENANTS, lambda tenant: threads.append(threading.current_thread()))
        assert [o.tenant for o in outcomes] == TENANTS
        assert set(threads) == {threading.current_thread()}

    def test_worker_threads(self):
        """Verify tenants run on named worker threads bounded by the concurrency."""
        names = set()
        mutex = threading.Lock()

        def worker(tenant):
            with mutex:
                names.add(threading.current_thread().name)

        ParallelRunner(3).fan_out(TENANTS, worker)
        assert 1 <= len(names) <= 3
        assert all(name.startswith("tenantry") for name in names)

    def test_failures_collected(self):
        """Verify a failing tenant does not stop its siblings."""

        def worker(tenant):
            if tenant in ("tenant_03", "tenant_17"):
                raise RuntimeError(f"{tenant} broke")

        outcomes = ParallelRunner(4).fan_out(TENANTS, worker)
        assert len(outcomes) == len(TENANTS)
        failed = sorted(o.tenant for o in outcomes if o.is_failure)
        assert failed == ["tenant_03", "tenant_17"]
        assert all(isinstance(o.error, RuntimeError) for o in outcomes if o.is_failure)

    def test_outcomes_passed_through(self):
        """Verify outcomes returned by the worker are kept as is."""
        outcome = MigrationOutcome.skipped_missing("ghost")
        assert ParallelRunner(2).fan_out(["ghost"], lambda tenant: outcome) == [outcome]

    def test_empty(self):
        """Verify no tenants means no work and no outcomes."""
        assert ParallelRunner(4).fan_out([], lambda tenant: pytest.fail("called")) == []

    def test_concurrency_override(self):
        """Verify the per call concurrency overrides the runner's."""
        threads = []
        ParallelRunner(8).fan_out(["a", "b"], lambda tenant: threads.append(threading.current_thread()), 0)
        assert set(threads) == {threading.current_thread()}

    def test_default_concurrency(self):
        """Verify the default concurrency is at least one worker."""
        assert ParallelRunner().concurrency >= 1

    def test_negative_concurrency(self):
        """Verify negative concurrency is rejected."""
        with pytest.raises(ValueError, match="0 or greater"):
            ParallelRunner(-1)
        with pytest.raises(ValueError, match="0 or greater"):
            ParallelRunner(1).fan_out(["a"], lambda tenant: None, concurrency=-3)
