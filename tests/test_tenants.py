"""Tests for tenant set resolution."""

from tenantry.tenants import EMPTY_TENANTS_WARNING, TenantLister

import pytest

from tests.mocks import MockTenantRegistry


class TestParseOverride:
    """Tests for comma separated override parsing."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("acme, globex , initech", ["acme", "globex", "initech"]),
            ("acme", ["acme"]),
            ("acme,,globex,", ["acme", "globex"]),
            (" , ", []),
            ("", []),
            ("globex,acme,globex", ["globex", "acme"]),
        ],
    )
    def test_parse(self, raw: str, expected: list):
        """Verify names are trimmed, blanks and repeats dropped, and order kept."""
        assert TenantLister.parse_override(raw) == expected


class TestTenantLister:
    """Tests for listing tenants from the override or the registry."""

    def test_override_wins(self, registry: MockTenantRegistry):
        """Verify the override is used without reading the registry."""
        lister = TenantLister(registry, override="acme, globex , initech")
        assert lister.list_tenants() == ["acme", "globex", "initech"]
        assert registry.list_calls == 0

    def test_registry_without_override(self, registry: MockTenantRegistry):
        """Verify the registry is read when there is no override."""
        lister = TenantLister(registry)
        assert lister.list_tenants() == ["acme", "globex", "initech", "public"]
        assert registry.list_calls == 1

    def test_excludes_default(self, registry: MockTenantRegistry):
        """Verify the default tenant is never part of the per tenant set."""
        assert TenantLister(registry).tenants_excluding_default() == ["acme", "globex", "initech"]

    def test_excludes_default_from_override(self, registry: MockTenantRegistry):
        """Verify the default tenant is dropped even when the override names it."""
        lister = TenantLister(registry, override="public, acme")
        assert lister.tenants_excluding_default() == ["acme"]

    def test_custom_default(self, registry: MockTenantRegistry):
        """Verify a different default tenant is excluded instead."""
        lister = TenantLister(registry, default_tenant="acme")
        assert lister.default_tenant == "acme"
        assert lister.tenants_excluding_default() == ["globex", "initech", "public"]

    def test_empty_override_string(self, registry: MockTenantRegistry):
        """Verify an override of only separators yields no tenants instead of the registry."""
        lister = TenantLister(registry, override=" , ")
        assert lister.tenants_excluding_default() == []
        assert registry.list_calls == 0


class TestWarnIfEmpty:
    """Tests for the empty tenant set warning."""

    def test_warns(self, caplog):
        """Verify the warning is logged when only the default tenant exists."""
        lister = TenantLister(MockTenantRegistry(["public"]))
        assert lister.warn_if_empty()
        assert EMPTY_TENANTS_WARNING in caplog.text

    def test_no_warning_with_tenants(self, registry: MockTenantRegistry, caplog):
        """Verify nothing is logged when there are tenants."""
        assert not TenantLister(registry).warn_if_empty()
        assert caplog.text == ""

    def test_ignored(self, caplog):
        """Verify the warning can be suppressed."""
        lister = TenantLister(MockTenantRegistry(), ignore_empty=True)
        assert not lister.warn_if_empty()
        assert caplog.text == ""

    def test_given_tenants(self, registry: MockTenantRegistry, caplog):
        """Verify an explicitly given empty set warns without listing again."""
        lister = TenantLister(registry)
        assert lister.warn_if_empty([])
        assert registry.list_calls == 0
