"""Abstract base class for per-dialect revision tracking providers."""

from abc import ABC, abstractmethod

REVISIONS_TABLE = "tenantry_schema_revisions"


class SchemaProviderBase(ABC):
    """Abstract base providing the DDL and DML of the per-tenant revision tracking table.

    Every tenant carries its own tracking table, created in the tenant's schema (or database file) the first time
    the tenant is migrated.
    """

    placeholder: str = None

    @abstractmethod
    def create_revisions_table(self) -> str:
        """Return DDL to create the revisions table if it does not exist.

        :returns: a DDL statement string
        """
        pass  # pragma: no cover

    def select_applied_revisions(self) -> str:
        """Return DML to select the names of successfully applied revisions.

        :returns: a SELECT statement string
        """
        return f"SELECT revision_name FROM {REVISIONS_TABLE} WHERE status = 'success'"

    def insert_revision(self) -> str:
        """Return DML inserting a revision record.

        The statement binds, in order, the revision name, status, error type and error message.

        :returns: an INSERT statement string
        """
        p = self.placeholder
        return (
            f"INSERT INTO {REVISIONS_TABLE} (revision_name, status, error_type, error_message) "
            f"VALUES ({p}, {p}, {p}, {p})"
        )
