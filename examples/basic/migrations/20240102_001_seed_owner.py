"""Seed every tenant with an account named after the tenant."""


def upgrade(cnx):
    """Insert the owner account."""
    p = cnx.placeholder
    cnx.execute(f"INSERT INTO accounts (id, name) VALUES ({p}, {p})", (1, f"{cnx.tenant} owner"))
