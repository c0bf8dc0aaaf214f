"""SQLite-specific revision tracking provider."""

from tenantry.migration.schema.base import REVISIONS_TABLE, SchemaProviderBase


class SQLiteSchemaProvider(SchemaProviderBase):
    """Provides SQLite-dialect DDL and DML for the revisions table."""

    placeholder = "?"

    def create_revisions_table(self) -> str:  # noqa: D102
        return (
            f"CREATE TABLE IF NOT EXISTS {REVISIONS_TABLE} ("
            "revision_name TEXT NOT NULL, "
            "applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')), "
            "status TEXT NOT NULL, "
            "error_type TEXT, "
            "error_message TEXT)"
        )
