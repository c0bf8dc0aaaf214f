"""Configuration of a migration batch."""

import enum
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from tenantry.backend.errors import ConfigurationError

ENV_TENANTS = "TENANTRY_TENANTS"
ENV_DEFAULT_TENANT = "TENANTRY_DEFAULT_TENANT"
ENV_MISSING_TENANT_STRATEGY = "TENANTRY_MISSING_TENANT_STRATEGY"
ENV_MIGRATION_THREADS = "TENANTRY_MIGRATION_THREADS"
ENV_IGNORE_EMPTY_TENANTS = "TENANTRY_IGNORE_EMPTY_TENANTS"


class MissingTenantStrategy(enum.Enum):
    """What to do when a tenant to migrate does not exist."""

    CREATE_TENANT = "create_tenant"
    RAISE_ERROR = "raise_error"
    IGNORE = "ignore"


# Alternate spellings accepted from the environment
STRATEGY_ALIASES = {"raise_exception": MissingTenantStrategy.RAISE_ERROR}


def default_concurrency() -> int:
    """Return the default number of parallel tenant workers, one per available CPU."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class BatchConfig:
    """Immutable settings injected into a ``Coordinator``.

    :param default_tenant: the shared tenant that is never migrated per tenant
    :param tenant_override: comma separated tenants to migrate instead of every registered tenant
    :param missing_tenant_strategy: the recovery applied to tenants that do not exist
    :param concurrency: number of parallel workers, 0 migrates tenants one after the other in the calling thread
    :param ignore_empty_tenants: suppress the warning logged when there is no tenant to migrate
    """

    default_tenant: str = "public"
    tenant_override: Optional[str] = None
    missing_tenant_strategy: MissingTenantStrategy = MissingTenantStrategy.IGNORE
    concurrency: int = field(default_factory=default_concurrency)
    ignore_empty_tenants: bool = False

    def __post_init__(self):
        """Validate the settings."""
        if not isinstance(self.missing_tenant_strategy, MissingTenantStrategy):
            raise ConfigurationError(f"Invalid missing tenant strategy: {self.missing_tenant_strategy!r}")
        if self.concurrency < 0:
            raise ConfigurationError("The migration concurrency must be 0 or greater")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "BatchConfig":
        """Build a configuration from ``TENANTRY_*`` environment variables, unset variables keep their defaults.

        :param environ: the environment to read, defaults to ``os.environ``
        :returns: a new configuration
        :raises: ConfigurationError
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        if environ.get(ENV_TENANTS):
            kwargs["tenant_override"] = environ[ENV_TENANTS]
        if environ.get(ENV_DEFAULT_TENANT):
            kwargs["default_tenant"] = environ[ENV_DEFAULT_TENANT].strip()
        if environ.get(ENV_MISSING_TENANT_STRATEGY):
            kwargs["missing_tenant_strategy"] = _parse_strategy(environ[ENV_MISSING_TENANT_STRATEGY])
        if environ.get(ENV_MIGRATION_THREADS):
            kwargs["concurrency"] = _parse_int(ENV_MIGRATION_THREADS, environ[ENV_MIGRATION_THREADS])
        if environ.get(ENV_IGNORE_EMPTY_TENANTS):
            kwargs["ignore_empty_tenants"] = _parse_bool(ENV_IGNORE_EMPTY_TENANTS, environ[ENV_IGNORE_EMPTY_TENANTS])
        return cls(**kwargs)


def _parse_strategy(value: str) -> MissingTenantStrategy:
    normalized = value.strip().lower()
    if normalized in STRATEGY_ALIASES:
        return STRATEGY_ALIASES[normalized]
    try:
        return MissingTenantStrategy(normalized)
    except ValueError as x:
        choices = ", ".join(s.value for s in MissingTenantStrategy)
        raise ConfigurationError(f"Invalid {ENV_MISSING_TENANT_STRATEGY} '{value}': must be one of {choices}") from x


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as x:
        raise ConfigurationError(f"Invalid {name} '{value}': must be int") from x


def _parse_bool(name: str, value: str) -> bool:
    if value.strip().lower() not in ["true", "false"]:
        raise ConfigurationError(f"Invalid {name} '{value}': must be bool")
    return value.strip().lower() == "true"
