"""Tests for the connection handed to migration scripts."""

from tenantry.backend import create_connection_pool
from tenantry.migration.connection import MigrationConnection

import pytest


@pytest.fixture()
def tenant_cnx(sqlite_url: str):
    """Provide a migration connection to a SQLite tenant with a table."""
    cnx_pool = create_connection_pool(sqlite_url).for_tenant("acme")
    cnx = cnx_pool.lease()
    cnx.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, label TEXT)", commit=True)
    yield MigrationConnection(cnx, cnx_pool.placeholder, "acme")
    cnx_pool.release(cnx)


def test_properties(tenant_cnx: MigrationConnection):
    """Verify the tenant and placeholder are exposed to scripts."""
    assert tenant_cnx.tenant == "acme"
    assert tenant_cnx.placeholder == "?"
    assert tenant_cnx.connection is not None


def test_execute_and_query(tenant_cnx: MigrationConnection):
    """Verify statements run with parameters and queries return dicts."""
    assert tenant_cnx.execute("INSERT INTO items (label) VALUES (?)", ("first",)) == 1
    tenant_cnx.execute("INSERT INTO items (label) VALUES (?)", ("second",))
    rows = tenant_cnx.query("SELECT id, label FROM items WHERE label = ?", ("second",))
    assert rows == [{"id": 2, "label": "second"}]


def test_execute_does_not_commit(tenant_cnx: MigrationConnection):
    """Verify statements stay in the script's transaction until the runner decides."""
    tenant_cnx.connection.autocommit = False
    tenant_cnx.execute("INSERT INTO items (label) VALUES (?)", ("pending",))
    tenant_cnx.connection.rollback()
    assert tenant_cnx.query("SELECT label FROM items") == []
