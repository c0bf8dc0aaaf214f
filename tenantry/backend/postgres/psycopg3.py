"""Implementation of PostgreSQL backend using psycopg (v3)."""

from tenantry.backend.errors import ConfigurationError
from tenantry.backend.postgres.base import ConnectionPoolPSQL


class ConnectionPoolPSQLPsycopg3(ConnectionPoolPSQL):
    """Implementation of ConnectionPool for psycopg (v3).

    The psycopg_pool pool is thread safe and blocks when exhausted, so it can be shared by parallel tenant workers.
    """

    def __init__(self, db_url: str):
        """Construct a connection pool for the given connection URL.

        The db_url is expected to be in the following format::

            "postgresql+psycopg://{username}:{password}@{hostname}:{port}/{db_name}?{optional_args}"

        In addition to common PostgreSQL optional_args, psycopg supports:

            * pool_timeout, a float specifying how many seconds lease waits for a free connection, defaults to 30

        :param db_url: a url with the described format
        :raises: ConfigurationError, BackendNotInstalledError
        """
        super().__init__(db_url)
        self._timeout = self._get_arg("pool_timeout", float, 30.0)
        if self._timeout <= 0:
            raise ConfigurationError("The argument pool_timeout must be greater than 0")
        self._raise_for_unexpected_args()
        psycopg_pool = self._import_driver("psycopg_pool", "psycopg-pool")
        self._pool = psycopg_pool.ConnectionPool(
            min_size=self._pool_min_conn,
            max_size=self._pool_max_conn,
            kwargs=self._cnx_kwargs,
            timeout=self._timeout,
            open=True,
        )

    def dispose(self):  # noqa: D102
        if not self._pool.closed:
            self._pool.close()
