import logging
import os

from tenantry import BatchConfig, Coordinator, MissingTenantStrategy
from tenantry.backend import create_connection_pool

MIGRATIONS = os.path.join(os.path.dirname(__file__), "migrations")

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(threadName)s %(name)s: %(message)s")
    os.makedirs("/tmp/tenantry_example", exist_ok=True)
    db_pool = create_connection_pool("sqlite3:///tmp/tenantry_example/public.sqlite3")
    config = BatchConfig(
        tenant_override="acme, globex, initech",
        missing_tenant_strategy=MissingTenantStrategy.CREATE_TENANT,
        concurrency=2,
    )
    coordinator = Coordinator.for_scripts(db_pool, MIGRATIONS, config)
    for outcome in coordinator.run_migration_batch():
        print(f"{outcome.tenant}: {outcome.status.value}, {outcome.applied} script(s) applied")
    db_pool.dispose()
