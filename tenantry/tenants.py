"""Resolution of the set of tenants a batch operates on."""

import logging
from typing import List, Optional

from tenantry.registry import TenantRegistry

EMPTY_TENANTS_WARNING = """[WARNING] - The list of tenants to migrate appears to be empty. This could mean a few things:

  1. You may not have created any, in which case you can ignore this message
  2. The tenant override only named the default tenant, which is never migrated per tenant

Note that your tenants currently haven't been migrated. Set TENANTRY_IGNORE_EMPTY_TENANTS=true to silence this."""


class TenantLister:
    """Lists tenants from an override or the registry, never including the default tenant."""

    def __init__(
        self,
        registry: TenantRegistry,
        default_tenant: str = "public",
        override: Optional[str] = None,
        ignore_empty: bool = False,
    ):
        """Construct a tenant lister.

        :param registry: the global tenant registry, read when there is no override
        :param default_tenant: the shared tenant excluded from every listing
        :param override: comma separated tenant names used instead of the registry
        :param ignore_empty: do not warn about empty tenant sets
        """
        self.logger = logging.getLogger(__name__)
        self._registry = registry
        self._default_tenant = default_tenant
        self._override = override
        self._ignore_empty = ignore_empty

    @property
    def default_tenant(self) -> str:
        """Return the tenant never included in listings."""
        return self._default_tenant

    @staticmethod
    def parse_override(raw: str) -> List[str]:
        """Split a comma separated tenant list, trimming names and dropping blanks and repeats.

        :param raw: e.g. ``"acme, globex , initech"``
        :returns: the names in their original order
        """
        tenants = []
        for name in (part.strip() for part in raw.split(",")):
            if name and name not in tenants:
                tenants.append(name)
        return tenants

    def list_tenants(self) -> List[str]:
        """Return the override tenants when an override is set, otherwise every registered tenant."""
        if self._override is not None:
            return self.parse_override(self._override)
        return list(self._registry.list() or [])

    def tenants_excluding_default(self) -> List[str]:
        """Return ``list_tenants()`` without the default tenant."""
        return [tenant for tenant in self.list_tenants() if tenant != self._default_tenant]

    def warn_if_empty(self, tenants: Optional[List[str]] = None) -> bool:
        """Log a warning when there is no tenant to operate on, unless warnings are suppressed.

        :param tenants: the resolved tenant set, defaults to ``tenants_excluding_default()``
        :returns: whether the warning was logged
        """
        if self._ignore_empty:
            return False
        tenants = self.tenants_excluding_default() if tenants is None else tenants
        if tenants:
            return False
        self.logger.warning(EMPTY_TENANTS_WARNING)
        return True
