"""Connection wrapper handed to the ``upgrade`` function of migration scripts."""

from typing import List

from tenantry.backend.base import Connection


class MigrationConnection:
    """Wraps a tenant ``Connection`` for migration scripts.

    Statements are never committed individually: the runner commits once the whole script succeeded, or rolls back.
    Parameters use the backend's placeholder, available as ``placeholder`` for scripts that target several backends.
    """

    def __init__(self, cnx: Connection, placeholder: str, tenant: str):
        """Construct a migration connection.

        :param cnx: the underlying tenant connection
        :param placeholder: the parameter placeholder of the backend
        :param tenant: the tenant being migrated
        """
        self._cnx = cnx
        self._placeholder = placeholder
        self._tenant = tenant

    @property
    def connection(self) -> Connection:
        """Return the underlying database connection."""
        return self._cnx

    @property
    def placeholder(self) -> str:
        """Return the parameter placeholder of the backend, ``%s`` or ``?``."""
        return self._placeholder

    @property
    def tenant(self) -> str:
        """Return the name of the tenant being migrated."""
        return self._tenant

    def execute(self, sql: str, params: tuple = None) -> int:
        """Execute a statement within the script's transaction, returning the affected row count.

        :param sql: the SQL statement
        :param params: the values to bind
        :returns: number of rows affected
        """
        return self._cnx.execute(sql, params, commit=False)

    def query(self, sql: str, params: tuple = None) -> List[dict]:
        """Execute a query, returning results as a list of dicts keyed by column name.

        :param sql: the SQL query
        :param params: the values to bind
        :returns: list of dictionaries mapping column names to values
        """
        with self._cnx.query(sql, params) as results:
            columns = [column.name for column in results.description]
            return [dict(zip(columns, row)) for row in results.fetchall()]
