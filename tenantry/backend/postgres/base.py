"""Shared base classes for PostgreSQL backends."""

import importlib
from typing import Optional

from tenantry.backend.base import Connection, ConnectionPool
from tenantry.backend.errors import BackendNotInstalledError, ConfigurationError

DUPLICATE_SCHEMA = "42P06"


def error_code(exc: Exception) -> Optional[str]:
    """Return the SQLSTATE carried by a psycopg2 or psycopg (v3) error, None for anything else.

    :param exc: the exception raised by the driver
    :returns: the five character SQLSTATE code or None
    """
    return getattr(exc, "pgcode", None) or getattr(exc, "sqlstate", None)


def quote_identifier(name: str) -> str:
    """Quote a schema or table name for direct inclusion in PostgreSQL DDL."""
    return '"' + name.replace('"', '""') + '"'


class ConnectionPSQL(Connection):
    """Shared Connection implementation for PostgreSQL backends."""

    def _execute(self, cursor, sql: str, params: tuple = None):
        """Execute SQL on the given cursor with positional parameters."""
        cursor.execute(sql, params)

    def current_database(self) -> str:  # noqa: D102
        return self.scalar("SELECT current_database()")

    def current_schema(self) -> Optional[str]:  # noqa: D102
        return self.scalar("SELECT current_schema()")

    def try_advisory_lock(self, key: int) -> bool:  # noqa: D102
        return bool(self.scalar("SELECT pg_try_advisory_lock(%s)", (key,)))

    def advisory_unlock(self, key: int) -> bool:  # noqa: D102
        return bool(self.scalar("SELECT pg_advisory_unlock(%s)", (key,)))


class ConnectionPoolPSQL(ConnectionPool):
    """Shared ConnectionPool base for PostgreSQL backends.

    Handles URL parameter parsing and validation common to all PostgreSQL drivers.
    """

    backend = "postgresql"

    def __init__(self, db_url: str):
        """Construct a connection pool base for the given connection URL.

        The db_url is expected to be in the following format::

            "postgresql+{driver}://{username}:{password}@{hostname}:{port}/{db_name}?{optional_args}"

        Supported `optional_args` common to all PostgreSQL drivers:

            * schema, a list of strings that sets the search path of the connections, defaults to "public"
            * pool_min_conn, an integer specifying the minimum connections to keep in the pool, defaults to 1
            * pool_max_conn, an integer specifying the maximum connections to keep in the pool, defaults to 1
            * sslmode, a string ("prefer", "verify-full", etc ...) specifying ssl mode for connections, defaults to None
            * sslrootcert, a string specifying a path to a root CA to use for ssl verification, defaults to None
            * advisory_locks, see ConnectionPool

        :param db_url: a url with the described format
        :raises: ConfigurationError
        """
        super().__init__(db_url)
        self._cnx_kwargs = self._make_cnx_kwargs()
        self._pool = None

    @staticmethod
    def _import_driver(module: str, distribution: str):
        try:
            return importlib.import_module(module)
        except ModuleNotFoundError as x:  # pragma: no cover
            raise BackendNotInstalledError(f"Module {distribution} not installed, cannot create connection pool") from x

    def _make_cnx_kwargs(self):
        dbname = self._db_url.path.strip("/")
        if not dbname:
            raise ConfigurationError("Database name is required but missing")
        self._schemas = self._get_arg("schema", list, ["public"])
        self._pool_min_conn = self._get_arg("pool_min_conn", int, 1)
        self._pool_max_conn = self._get_arg("pool_max_conn", int, self._pool_min_conn)
        if self._pool_min_conn <= 0 or self._pool_max_conn <= 0:
            raise ConfigurationError("The pool_max_conn and pool_min_conn must be greater than 0")
        if self._pool_max_conn < self._pool_min_conn:
            raise ConfigurationError("The argument pool_max_conn must be greater or equal to pool_min_conn")
        ssl_mode = self._get_arg("sslmode", str, None)
        ssl_root_cert = self._get_arg("sslrootcert", str, None)
        kwargs = {
            "dbname": dbname,
            "user": self._db_url.username,
            "password": self._db_url.password,
            "host": self._db_url.hostname,
            "port": self._db_url.port,
            "options": f"-c search_path={','.join(self._schemas)}",
        }
        if ssl_mode:
            kwargs["sslmode"] = ssl_mode
        if ssl_root_cert:
            kwargs["sslrootcert"] = ssl_root_cert
        return kwargs

    @property
    def schemas(self):
        """Return the search path of connections leased from this pool."""
        return list(self._schemas)

    @property
    def supports_advisory_locks(self) -> bool:  # noqa: D102
        return True

    def for_tenant(self, tenant: str) -> ConnectionPool:
        """Construct a pool whose search path is the tenant's schema.

        :param tenant: the tenant (schema) name
        :returns: a new pool of the same driver
        """
        return self.reconfigure(schema=tenant)

    @property
    def placeholder(self) -> str:  # noqa: D102
        return "%s"

    def lease(self) -> Connection:  # noqa: D102
        return ConnectionPSQL(self._pool.getconn())

    def release(self, cnx: Connection):  # noqa: D102
        self._pool.putconn(cnx._cnx)
