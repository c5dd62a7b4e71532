# ============================================================================
# BYPASS REGISTRY TESTS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Tests - Handler suppression
# PURPOSE: Verify bypass, global bypass, snapshots and restore
# CREATED: 19 OCT 2026
# ============================================================================
"""
Bypass Registry Tests

Covers:
1. Per-identity bypass / clear
2. Global bypass independence from per-identity state
3. clear_all_bypasses
4. bypass_list ordering and the "bypassAll" token
5. Snapshot/restore via set_bypass, restore and suppressed()
6. Identity validation

Run with:
    pytest tests/test_bypass_registry.py -v
"""

import pytest

from handlers.bypass import BYPASS_ALL, BypassRegistry
from handlers.errors import HandlerConfigurationError


@pytest.fixture
def registry():
    return BypassRegistry()


# ============================================================================
# PER-IDENTITY
# ============================================================================


class TestBypass:
    def test_new_registry_is_empty(self, registry):
        assert registry.bypass_list() == []
        assert len(registry) == 0
        assert not registry.is_globally_bypassed

    @pytest.mark.parametrize("identity", ["A", "AccountHandler", "ns.OrderHandler"])
    def test_bypass_then_clear(self, registry, identity):
        registry.bypass(identity)
        assert registry.is_bypassed(identity)
        registry.clear_bypass(identity)
        assert not registry.is_bypassed(identity)

    def test_bypass_is_idempotent(self, registry):
        registry.bypass("A")
        registry.bypass("A")
        assert registry.bypass_list() == ["A"]

    def test_clear_unknown_is_noop(self, registry):
        registry.clear_bypass("never-bypassed")
        assert registry.bypass_list() == []

    def test_bypass_only_affects_named_identity(self, registry):
        registry.bypass("A")
        assert not registry.is_bypassed("B")

    def test_contains(self, registry):
        registry.bypass("A")
        assert "A" in registry
        assert "B" not in registry
        assert 42 not in registry

    @pytest.mark.parametrize("identity", ["", "   ", None, 3])
    def test_is_bypassed_rejects_invalid_identity(self, registry, identity):
        with pytest.raises(HandlerConfigurationError):
            registry.is_bypassed(identity)

    def test_is_bypassed_rejects_invalid_identity_under_global_bypass(self, registry):
        registry.set_global_bypass()
        with pytest.raises(HandlerConfigurationError):
            registry.is_bypassed(3)

    def test_contains_ignores_blank_identity(self, registry):
        registry.set_global_bypass()
        assert "" not in registry
        assert "  " not in registry

    def test_identity_whitespace_is_stripped(self, registry):
        registry.bypass("  A ")
        assert registry.is_bypassed("A")
        assert registry.bypass_list() == ["A"]

    @pytest.mark.parametrize("identity", ["", "   ", None, 3])
    def test_invalid_identity_rejected(self, registry, identity):
        with pytest.raises(HandlerConfigurationError):
            registry.bypass(identity)

    def test_reserved_token_rejected(self, registry):
        with pytest.raises(HandlerConfigurationError, match="reserved"):
            registry.bypass(BYPASS_ALL)


# ============================================================================
# GLOBAL BYPASS
# ============================================================================


class TestGlobalBypass:
    def test_global_bypass_suppresses_everything(self, registry):
        registry.set_global_bypass()
        for identity in ("A", "B", "anything"):
            assert registry.is_bypassed(identity)

    def test_clear_global_restores_per_identity_state(self, registry):
        registry.bypass("A")
        registry.set_global_bypass()
        registry.clear_global_bypass()
        assert registry.is_bypassed("A")
        assert not registry.is_bypassed("B")

    def test_global_does_not_touch_set(self, registry):
        registry.bypass("A")
        registry.set_global_bypass()
        assert len(registry) == 1
        registry.clear_global_bypass()
        assert registry.bypass_list() == ["A"]

    def test_bypass_all_is_global_bypass(self, registry):
        registry.bypass_all()
        assert registry.is_globally_bypassed
        assert registry.is_bypassed("Z")

    def test_clear_bypass_under_global_still_bypassed(self, registry):
        registry.bypass("A")
        registry.set_global_bypass()
        registry.clear_bypass("A")
        assert registry.is_bypassed("A")
        registry.clear_global_bypass()
        assert not registry.is_bypassed("A")


# ============================================================================
# CLEAR ALL
# ============================================================================


class TestClearAll:
    def test_clears_set_and_flag(self, registry):
        registry.bypass("X")
        registry.bypass("Y")
        registry.set_global_bypass()
        registry.clear_all_bypasses()
        assert registry.bypass_list() == []
        assert not registry.is_bypassed("X")
        assert not registry.is_globally_bypassed

    def test_equivalent_to_individual_clears(self):
        a, b = BypassRegistry(), BypassRegistry()
        for reg in (a, b):
            reg.bypass("X")
            reg.bypass("Y")
            reg.set_global_bypass()

        a.clear_all_bypasses()

        b.clear_global_bypass()
        for identity in b.bypass_list():
            b.clear_bypass(identity)

        assert a.bypass_list() == b.bypass_list() == []
        for identity in ("X", "Y", "Z"):
            assert a.is_bypassed(identity) == b.is_bypassed(identity)


# ============================================================================
# BYPASS LIST
# ============================================================================


class TestBypassList:
    def test_contains_identities_and_token(self, registry):
        registry.bypass("X")
        registry.bypass("Y")
        registry.set_global_bypass()
        entries = registry.bypass_list()
        assert "X" in entries
        assert "Y" in entries
        assert BYPASS_ALL in entries
        assert BYPASS_ALL == "bypassAll"

    def test_insertion_order_with_token_last(self, registry):
        registry.bypass("Y")
        registry.bypass("X")
        registry.set_global_bypass()
        registry.bypass("W")
        assert registry.bypass_list() == ["Y", "X", "W", "bypassAll"]

    def test_reproducible(self):
        def build():
            reg = BypassRegistry()
            reg.bypass("C")
            reg.bypass("A")
            reg.clear_bypass("C")
            reg.bypass("B")
            reg.bypass("C")
            return reg.bypass_list()

        assert build() == build() == ["A", "B", "C"]

    def test_returns_copy(self, registry):
        registry.bypass("A")
        entries = registry.bypass_list()
        entries.append("B")
        assert registry.bypass_list() == ["A"]

    def test_no_token_without_global(self, registry):
        registry.bypass("A")
        assert BYPASS_ALL not in registry.bypass_list()


# ============================================================================
# SNAPSHOT / RESTORE
# ============================================================================


class TestSnapshotRestore:
    @pytest.mark.parametrize("initially_bypassed", [True, False])
    def test_set_bypass_restores_prior_state(self, registry, initially_bypassed):
        if initially_bypassed:
            registry.bypass("A")

        was_bypassed = registry.is_bypassed("A")
        registry.bypass("A")
        assert registry.is_bypassed("A")
        registry.set_bypass("A", was_bypassed)

        assert registry.is_bypassed("A") == initially_bypassed

    def test_restore_replaces_state(self, registry):
        registry.bypass("A")
        snapshot = registry.bypass_list()

        registry.bypass("B")
        registry.set_global_bypass()
        registry.restore(snapshot)

        assert registry.bypass_list() == ["A"]
        assert not registry.is_globally_bypassed

    def test_restore_reapplies_global_token(self, registry):
        registry.set_global_bypass()
        snapshot = registry.bypass_list()
        registry.clear_all_bypasses()
        registry.restore(snapshot)
        assert registry.is_globally_bypassed

    def test_clear_bypass_list_undoes_captured_entries(self, registry):
        registry.bypass("Keep")
        registry.bypass("X")
        registry.set_global_bypass()

        registry.clear_bypass_list(["X", BYPASS_ALL])

        assert registry.bypass_list() == ["Keep"]

    def test_suppressed_named(self, registry):
        registry.bypass("Already")
        with registry.suppressed("A", "B"):
            assert registry.is_bypassed("A")
            assert registry.is_bypassed("B")
            assert not registry.is_bypassed("C")
        assert registry.bypass_list() == ["Already"]

    def test_suppressed_everything(self, registry):
        with registry.suppressed():
            assert registry.is_bypassed("anything")
        assert not registry.is_globally_bypassed

    def test_suppressed_restores_on_error(self, registry):
        with pytest.raises(RuntimeError):
            with registry.suppressed("A"):
                raise RuntimeError("boom")
        assert not registry.is_bypassed("A")

    def test_suppressed_keeps_prior_bypass(self, registry):
        registry.bypass("A")
        with registry.suppressed("A"):
            pass
        assert registry.is_bypassed("A")

    def test_bypass_set_inside_suppressed_survives(self, registry):
        with registry.suppressed("A"):
            registry.bypass("Z")
        assert registry.bypass_list() == ["Z"]

    def test_clear_inside_suppressed_survives(self, registry):
        registry.bypass("Other")
        with registry.suppressed("A"):
            registry.clear_bypass("Other")
        assert registry.bypass_list() == []

    def test_global_bypass_set_inside_named_suppressed_survives(self, registry):
        with registry.suppressed("A"):
            registry.set_global_bypass()
        assert registry.is_globally_bypassed
        assert registry.bypass_list() == [BYPASS_ALL]

    def test_suppressed_everything_keeps_prior_global_bypass(self, registry):
        registry.set_global_bypass()
        with registry.suppressed():
            pass
        assert registry.is_globally_bypassed

    def test_suppressed_everything_keeps_bypass_set_inside(self, registry):
        with registry.suppressed():
            registry.bypass("Z")
        assert registry.bypass_list() == ["Z"]
