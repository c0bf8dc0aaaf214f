"""Implementation of PostgreSQL backend using psycopg2."""

from tenantry.backend.postgres.base import ConnectionPoolPSQL


class ConnectionPoolPSQLPsycopg2(ConnectionPoolPSQL):
    """Implementation of ConnectionPool for psycopg2.

    psycopg2 pools raise instead of waiting when every connection is leased. A pool leased from several threads at
    once should be threaded, with pool_max_conn at least the number of threads.
    """

    def __init__(self, db_url: str):
        """Construct a connection pool for the given connection URL.

        The db_url is expected to be in the following format::

            "postgresql+psycopg2://{username}:{password}@{hostname}:{port}/{db_name}?{optional_args}"

        In addition to common PostgreSQL optional_args, psycopg2 supports:

            * pool_threaded, a boolean specifying a threaded pool should be used, defaults to False

        :param db_url: a url with the described format
        :raises: ConfigurationError, BackendNotInstalledError
        """
        super().__init__(db_url)
        self._threaded = self._get_arg("pool_threaded", bool, False)
        self._raise_for_unexpected_args()
        pools = self._import_driver("psycopg2.pool", "psycopg2")
        pool_class = pools.ThreadedConnectionPool if self._threaded else pools.SimpleConnectionPool
        self._pool = pool_class(minconn=self._pool_min_conn, maxconn=self._pool_max_conn, **self._cnx_kwargs)
        self.logger.debug(f"Opened {pool_class.__name__} of at most {self._pool_max_conn} connection(s)")

    @property
    def threaded(self) -> bool:
        """Whether the underlying pool may be shared between threads."""
        return self._threaded

    def dispose(self):  # noqa: D102
        if not self._pool.closed:
            self._pool.closeall()
