"""Functionality abstracting the primitive database backend interface."""

from urllib.parse import urlparse

from tenantry.backend.base import Connection, ConnectionPool, ResultSet
from tenantry.backend.errors import ConfigurationError, UnsupportedBackendError
from tenantry.backend.postgres import ConnectionPoolPSQLPsycopg2, ConnectionPoolPSQLPsycopg3
from tenantry.backend.sqlite import ConnectionPoolSQLite3

ENGINE_DEFAULTS = {"postgresql": "psycopg2", "sqlite3": None}

POOL_CLASSES = {
    ("postgresql", "psycopg2"): ConnectionPoolPSQLPsycopg2,
    ("postgresql", "psycopg"): ConnectionPoolPSQLPsycopg3,
    ("sqlite3", None): ConnectionPoolSQLite3,
}


def create_connection_pool(db_url: str) -> ConnectionPool:
    """Create a connection pool for the given database connection URL.

    The db_url is expected to be in the following format::

        "{db_backend}+{driver}://{username}:{password}@{hostname}:{port}/{db_name}?{optional_args}"

    The driver may be omitted to use the backend's default one (psycopg2 for postgresql). Every backend accepts the
    ``advisory_locks`` argument, drivers support additional ones.

    :returns: A connection pool based on the given database URL.
    :raises: ConfigurationError, UnsupportedBackendError
    """
    scheme = urlparse(db_url).scheme
    if not scheme:
        raise ConfigurationError("No database backend specified")
    backend, _, engine = scheme.partition("+")
    pool_class = POOL_CLASSES.get((backend, engine or ENGINE_DEFAULTS.get(backend)))
    if pool_class is None:
        raise UnsupportedBackendError(f"The backend+engine '{scheme}' is not supported")
    return pool_class(db_url)


__all__ = ["Connection", "ConnectionPool", "ResultSet", "create_connection_pool", "errors"]
