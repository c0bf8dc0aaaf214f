"""PostgreSQL-specific revision tracking provider."""

from tenantry.migration.schema.base import REVISIONS_TABLE, SchemaProviderBase


class PostgresSchemaProvider(SchemaProviderBase):
    """Provides PostgreSQL-dialect DDL and DML for the revisions table."""

    placeholder = "%s"

    def create_revisions_table(self) -> str:  # noqa: D102
        return (
            f"CREATE TABLE IF NOT EXISTS {REVISIONS_TABLE} ("
            "revision_name VARCHAR(255) NOT NULL, "
            "applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW(), "
            "status VARCHAR(20) NOT NULL, "
            "error_type VARCHAR(255), "
            "error_message TEXT)"
        )
