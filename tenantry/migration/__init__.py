"""Sequential script migrations applied per tenant."""

from tenantry.migration.connection import MigrationConnection
from tenantry.migration.discovery import MigrationScript, ScriptDiscovery
from tenantry.migration.runner import MigrationRunner

__all__ = [
    "MigrationConnection",
    "MigrationRunner",
    "MigrationScript",
    "ScriptDiscovery",
]
