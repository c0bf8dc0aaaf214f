"""Create the accounts table of a tenant."""


def upgrade(cnx):
    """Create the accounts table with name and balance columns."""
    cnx.execute(
        "CREATE TABLE IF NOT EXISTS accounts ("
        "  id INTEGER PRIMARY KEY,"
        "  name VARCHAR(256) NOT NULL,"
        "  balance INTEGER DEFAULT 0"
        ")"
    )
