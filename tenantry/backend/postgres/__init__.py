"""Implementation of PostgreSQL backends."""

from tenantry.backend.postgres.base import ConnectionPSQL, ConnectionPoolPSQL, error_code, quote_identifier
from tenantry.backend.postgres.psycopg2 import ConnectionPoolPSQLPsycopg2
from tenantry.backend.postgres.psycopg3 import ConnectionPoolPSQLPsycopg3

__all__ = [
    "ConnectionPSQL",
    "ConnectionPoolPSQL",
    "ConnectionPoolPSQLPsycopg2",
    "ConnectionPoolPSQLPsycopg3",
    "error_code",
    "quote_identifier",
]
