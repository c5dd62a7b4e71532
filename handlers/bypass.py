# ============================================================================
# BYPASS REGISTRY
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Handler suppression
# PURPOSE: Suppress named handlers (or all handlers) for a unit of work
# CREATED: 19 OCT 2026
# ============================================================================
"""
Bypass Registry

Tracks which handler identities are suppressed for the remainder of a unit
of work, plus one global suppress-all flag.

Design:
- Insertion-ordered set (dict keys) so bypass_list() is reproducible
- Global flag is independent of the per-identity set
- bypass_list() includes the synthetic "bypassAll" token (last) when the
  global flag is set, so a captured list can be restored later

Usage:
    snapshot = registry.bypass_list()
    registry.bypass("AccountHandler")
    ...  # DML that would otherwise re-fire AccountHandler
    registry.restore(snapshot)

    # or
    with registry.suppressed("AccountHandler"):
        ...
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List

from handlers.errors import HandlerConfigurationError, validate_identity

logger = logging.getLogger(__name__)

BYPASS_ALL = "bypassAll"


class BypassRegistry:
    """
    Suppressed handler identities for one unit of work.
    """

    def __init__(self):
        self._bypassed: Dict[str, None] = {}
        self._global_bypass = False

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str) or not identity.strip():
            return False
        return self.is_bypassed(identity)

    def __len__(self) -> int:
        return len(self._bypassed)

    def __repr__(self) -> str:
        return f"BypassRegistry({self.bypass_list()!r})"

    # ------------------------------------------------------------------
    # Per-identity
    # ------------------------------------------------------------------

    def bypass(self, identity: str) -> None:
        """Suppress a handler. Idempotent."""
        identity = self._check(identity)
        self._bypassed[identity] = None
        logger.debug(f"Bypassing handler: {identity}")

    def clear_bypass(self, identity: str) -> None:
        """Stop suppressing a handler. No error if it was not suppressed."""
        identity = self._check(identity)
        if identity in self._bypassed:
            del self._bypassed[identity]
            logger.debug(f"Cleared bypass: {identity}")

    def is_bypassed(self, identity: str) -> bool:
        """True if the handler is suppressed, or everything is."""
        identity = validate_identity(identity)
        return self._global_bypass or identity in self._bypassed

    def set_bypass(self, identity: str, bypassed: bool) -> None:
        """
        Set a handler's suppression to an explicit value.

        Pairs with is_bypassed() to restore a single identity's prior state:

            was_bypassed = registry.is_bypassed(name)
            registry.bypass(name)
            ...
            registry.set_bypass(name, was_bypassed)
        """
        if bypassed:
            self.bypass(identity)
        else:
            self.clear_bypass(identity)

    # ------------------------------------------------------------------
    # Global
    # ------------------------------------------------------------------

    @property
    def is_globally_bypassed(self) -> bool:
        return self._global_bypass

    def set_global_bypass(self) -> None:
        """Suppress every handler. Per-identity entries are left untouched."""
        self._global_bypass = True
        logger.debug("Global bypass set")

    def clear_global_bypass(self) -> None:
        self._global_bypass = False
        logger.debug("Global bypass cleared")

    def bypass_all(self) -> None:
        """Alias for set_global_bypass()."""
        self.set_global_bypass()

    def clear_all_bypasses(self) -> None:
        """Clear every per-identity entry and the global flag."""
        self._bypassed.clear()
        self._global_bypass = False
        logger.debug("Cleared all bypasses")

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def bypass_list(self) -> List[str]:
        """
        Currently suppressed identities in insertion order.

        "bypassAll" is appended when the global flag is set. The returned
        list is a copy.
        """
        entries = list(self._bypassed)
        if self._global_bypass:
            entries.append(BYPASS_ALL)
        return entries

    def clear_bypass_list(self, entries: Iterable[str]) -> None:
        """
        Clear exactly the listed entries.

        "bypassAll" in the list clears the global flag.
        """
        for entry in entries:
            if entry == BYPASS_ALL:
                self.clear_global_bypass()
            else:
                self.clear_bypass(entry)

    def restore(self, snapshot: Iterable[str]) -> None:
        """Replace the registry state with a list captured by bypass_list()."""
        self.clear_all_bypasses()
        for entry in snapshot:
            if entry == BYPASS_ALL:
                self.set_global_bypass()
            else:
                self.bypass(entry)

    @contextmanager
    def suppressed(self, *identities: str) -> Iterator["BypassRegistry"]:
        """
        Suppress handlers for the duration of a block.

        With no identities, every handler is suppressed. On exit only what
        the block itself suppressed is put back, including when the block
        raises; bypasses set or cleared for other handlers inside the block
        are kept for the rest of the unit of work.
        """
        names = [self._check(identity) for identity in identities]
        prior: Dict[str, bool] = {name: name in self._bypassed for name in names}
        set_global = not names and not self._global_bypass

        for name in names:
            self.bypass(name)
        if set_global:
            self.set_global_bypass()
        try:
            yield self
        finally:
            for name, was_bypassed in prior.items():
                self.set_bypass(name, was_bypassed)
            if set_global:
                self.clear_global_bypass()

    # ------------------------------------------------------------------

    @staticmethod
    def _check(identity: str) -> str:
        identity = validate_identity(identity)
        if identity == BYPASS_ALL:
            raise HandlerConfigurationError(
                f"'{BYPASS_ALL}' is reserved; use set_global_bypass()"
            )
        return identity


__all__ = [
    "BYPASS_ALL",
    "BypassRegistry",
]
