"""Implementation of the SQLite backend, where every tenant is a database file."""

import os.path
import sqlite3
from typing import Optional

from tenantry.backend.base import Connection, ConnectionPool

TENANT_FILE_SUFFIX = ".sqlite3"


class ConnectionSQLite3(Connection):
    """Implementation of Connection for Sqlite3."""

    def _execute(self, cursor, sql: str, params: tuple = None):
        """Execute SQL on the given cursor with optional parameters."""
        if params:
            cursor.execute(sql, params)
            return
        cursor.execute(sql)

    def current_database(self) -> str:
        """Return the file backing the main database of this connection."""
        with self.query("PRAGMA database_list") as results:
            for _seq, name, file_path in results.fetchall():
                if name == "main":
                    return file_path
        return ""  # pragma: no cover

    def current_schema(self) -> Optional[str]:  # noqa: D102
        return None


class ConnectionPoolSQLite3(ConnectionPool):
    """Implementation of ConnectionPool for SQLite3."""

    backend = "sqlite3"

    def __init__(self, db_url: str):
        """Construct a connection pool for the given connection URL.

        The db_url is expected to be in the following format::

            "sqlite3://{filename}"

        Obviously, this is not a real "pool", all connections given out by lease will be new connections. Tenants
        live in ``{tenant}.sqlite3`` files in the same directory as ``filename``.

        :param db_url: a url with the described format
        :raises: ConfigurationError
        """
        super().__init__(db_url)
        self._cnx_kwargs = self._url_to_cnx_kwargs()
        self._raise_for_unexpected_args()

    def _url_to_cnx_kwargs(self):
        # Relative URLs such as sqlite3://test.db put the file name in the netloc.
        raw_path = f"{self._db_url.netloc}{self._db_url.path}"
        file_path = os.path.abspath(os.path.expanduser(raw_path))
        return {"database": file_path}

    @property
    def database_path(self) -> str:
        """Return the absolute path of the database file this pool connects to."""
        return self._cnx_kwargs["database"]

    @property
    def tenant_directory(self) -> str:
        """Return the directory holding the tenant database files."""
        return os.path.dirname(self.database_path)

    def tenant_path(self, tenant: str) -> str:
        """Return the database file of the given tenant."""
        return os.path.join(self.tenant_directory, f"{tenant}{TENANT_FILE_SUFFIX}")

    def for_tenant(self, tenant: str) -> ConnectionPool:
        """Construct a pool connecting to the tenant's database file.

        :param tenant: the tenant name
        :returns: a new SQLite pool
        """
        db_url = f"{self._db_url.scheme}://{self.tenant_path(tenant)}"
        if self._db_url.query:
            db_url = f"{db_url}?{self._db_url.query}"
        return self._with_url(db_url)

    def lease(self) -> Connection:  # noqa: D102
        inner_cnx = sqlite3.connect(**self._cnx_kwargs)
        return ConnectionSQLite3(inner_cnx)

    def release(self, cnx: Connection):  # noqa: D102
        cnx._cnx.close()

    def dispose(self):  # noqa: D102
        return

    @property
    def placeholder(self) -> str:  # noqa: D102
        return "?"
