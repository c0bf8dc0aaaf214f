"""Bounded thread pool fan-out of per-tenant work."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence

from tenantry.config import default_concurrency
from tenantry.migrator import MigrationOutcome


class ParallelRunner:
    """Runs a worker once for every tenant across a bounded pool of threads.

    The runner is fail-safe: a failing tenant never cancels its siblings, every tenant is attempted exactly once and
    an exception escaping the worker is reported as a ``FAILED`` outcome. Outcomes are returned in completion order.
    The runner neither acquires nor releases the batch lock, callers run it while holding the lock.
    """

    def __init__(self, concurrency: Optional[int] = None):
        """Construct a parallel runner.

        :param concurrency: number of worker threads, 0 runs the workers inline, defaults to the CPU count
        :raises ValueError: if concurrency is negative
        """
        self.logger = logging.getLogger(__name__)
        self._concurrency = self._check_concurrency(default_concurrency() if concurrency is None else concurrency)

    @staticmethod
    def _check_concurrency(concurrency: int) -> int:
        if concurrency < 0:
            raise ValueError(f"Concurrency must be 0 or greater, got {concurrency}")
        return concurrency

    @property
    def concurrency(self) -> int:  # noqa: D102
        return self._concurrency

    def fan_out(
        self,
        tenants: Sequence[str],
        worker: Callable[[str], object],
        concurrency: Optional[int] = None,
    ) -> List[MigrationOutcome]:
        """Run worker(tenant) for every tenant.

        :param tenants: the tenants, each attempted once
        :param worker: the per-tenant callable, returning a ``MigrationOutcome`` or anything else for success
        :param concurrency: overrides the runner's concurrency for this call
        :returns: one outcome per tenant
        """
        concurrency = self._concurrency if concurrency is None else self._check_concurrency(concurrency)
        if not tenants:
            return []
        if concurrency == 0:
            return [self._attempt(worker, tenant) for tenant in tenants]
        max_workers = min(concurrency, len(tenants))
        self.logger.debug(f"Fanning out {len(tenants)} tenant(s) across {max_workers} worker(s)")
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="tenantry") as executor:
            futures = [executor.submit(self._attempt, worker, tenant) for tenant in tenants]
            return [future.result() for future in as_completed(futures)]

    def _attempt(self, worker: Callable[[str], object], tenant: str) -> MigrationOutcome:
        try:
            result = worker(tenant)
        except Exception as e:
            self.logger.error(f"Tenant {tenant} failed: {type(e).__name__}: {e}")
            return MigrationOutcome.failed(tenant, e)
        if isinstance(result, MigrationOutcome):
            return result
        return MigrationOutcome.success(tenant)
