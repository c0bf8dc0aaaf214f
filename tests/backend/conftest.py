"""Helpful fixtures for testing tenantry against a real PostgreSQL server."""

import os
import uuid

import pytest


@pytest.fixture()
def rand_db_name() -> str:
    """Generate a random database name."""
    return f"test_{str(uuid.uuid4()).replace('-', '')}"


@pytest.fixture()
def tmp_psql_db_url(rand_db_name) -> str:
    """Provide a DB Connection Pool URL for a fresh database on the test postgres instance.

    The test is skipped when psycopg2 is missing or the instance cannot be reached.
    """
    psycopg2 = pytest.importorskip("psycopg2")
    from tests.backend import postgres_test_sql as test_sql

    database = os.environ.get("TENANTRY_TEST_PSQL_DB", "postgres")
    hostname = os.environ.get("TENANTRY_TEST_PSQL_HOST", "localhost")
    username = os.environ.get("TENANTRY_TEST_PSQL_USER", "psql_test_user")
    password = os.environ.get("TENANTRY_TEST_PSQL_PASS", "psql_test_pass")
    port = int(os.getenv("TENANTRY_TEST_PSQL_PORT", 15432))
    try:
        cnx = psycopg2.connect(dbname=database, user=username, password=password, host=hostname, port=port)
    except psycopg2.OperationalError as x:
        pytest.skip(f"Test postgres instance unavailable: {x}")
    cnx.autocommit = True
    cursor = cnx.cursor()
    cursor.execute(f"CREATE DATABASE {rand_db_name}")
    yield f"postgresql+psycopg2://{username}:{password}@{hostname}:{port}/{rand_db_name}"
    cursor.execute(test_sql.TERMINATE_DB_CONNS, (rand_db_name,))
    cursor.execute(f"DROP DATABASE {rand_db_name}")
    cursor.close()
    cnx.close()
