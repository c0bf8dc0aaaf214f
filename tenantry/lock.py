"""Session level advisory lock guarding a whole migration batch.

Only one batch may run against a database at a time. The lock key is derived from the database (and schema) the
coordinating connection points at, so every process deploying against the same database computes the same key.
Acquisition never waits: contention means a concurrent deploy, which should fail loudly instead of queueing.
"""

import logging
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from tenantry.backend.base import Connection, ConnectionPool
from tenantry.errors import LockContention

MIGRATOR_SALT = 2053462845

_UINT64_MASK = (1 << 64) - 1
_INT64_LIMIT = 1 << 63


def compute_lock_key(database_name: str, schema_name: Optional[str] = None) -> int:
    """Compute the advisory lock key of a database and schema.

    :param database_name: the current database name
    :param schema_name: the current schema name, if the backend has schemas
    :returns: the CRC32 of the names scaled by the salt, wrapped to a signed 64 bit integer
    """
    checksum = zlib.crc32(f"{database_name}{schema_name or ''}".encode("utf-8"))
    key = (checksum * MIGRATOR_SALT) & _UINT64_MASK
    return key - (1 << 64) if key >= _INT64_LIMIT else key


@dataclass
class LockHandle:
    """A held (or already released) advisory lock."""

    key: int
    connection: Connection
    released: bool = False


class AdvisoryLock:
    """Acquires and releases the batch advisory lock on one dedicated connection."""

    compute_lock_key = staticmethod(compute_lock_key)

    def __init__(self, cnx: Connection):
        """Construct an advisory lock bound to a connection.

        :param cnx: the connection the lock is taken on, it must stay leased while the lock is held
        """
        self.logger = logging.getLogger(__name__)
        self._cnx = cnx

    @staticmethod
    def supports_locking(pool: ConnectionPool) -> bool:
        """Return whether connections from the pool provide advisory locks.

        When they do not, callers run without mutual exclusion and two concurrent batches may race.
        """
        return pool.supports_advisory_locks

    def acquire(self, key: int) -> LockHandle:
        """Take the lock with a single non-blocking attempt.

        :param key: the lock key
        :returns: a handle to pass to release
        :raises LockContention: if another session holds the lock
        """
        if not self._cnx.try_advisory_lock(key):
            raise LockContention(key)
        self.logger.debug(f"Acquired migration advisory lock {key}")
        return LockHandle(key=key, connection=self._cnx)

    def release(self, handle: LockHandle):
        """Release the lock held by handle; releasing the same handle twice does nothing.

        :param handle: the handle returned by acquire
        """
        if handle.released:
            return
        handle.released = True
        if not handle.connection.advisory_unlock(handle.key):
            self.logger.warning(f"Migration advisory lock {handle.key} was not held at release")
            return
        self.logger.debug(f"Released migration advisory lock {handle.key}")

    @contextmanager
    def held(self, key: int) -> Iterator[LockHandle]:
        """Hold the lock for the duration of the context, releasing it on every exit path.

        :param key: the lock key
        :raises LockContention: if another session holds the lock
        """
        handle = self.acquire(key)
        try:
            yield handle
        finally:
            self.release(handle)


@contextmanager
def exclusive_connection(pool: ConnectionPool, **options) -> Iterator[Tuple[ConnectionPool, Connection]]:
    """Dedicate a connection from a reconfigured copy of pool for the duration of the context.

    The copy is built with options overriding the pool's URL arguments and is disposed of on exit, the original pool
    is never modified. Work done inside the context should use the yielded pool, never the yielded connection.

    :param pool: the pool to derive the reconfigured pool from
    :param options: URL arguments to override, e.g. ``advisory_locks=False``
    :returns: the reconfigured pool and the dedicated connection
    """
    reconfigured = pool.reconfigure(**options)
    try:
        with reconfigured.connection() as cnx:
            yield reconfigured, cnx
    finally:
        reconfigured.dispose()
