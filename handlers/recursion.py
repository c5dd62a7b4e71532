# ============================================================================
# RECURSION GUARD
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Per-handler loop counters
# PURPOSE: Count re-entrant handler runs within one unit of work
# CREATED: 19 OCT 2026
# ============================================================================
"""
Recursion Guard

Each handler identity owns one LoopCount per unit of work. Counters are only
ever incremented and compared against the configured max; they are never
decremented. A max of 0 disables the limit.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from handlers.errors import HandlerConfigurationError, validate_identity

logger = logging.getLogger(__name__)


@dataclass
class LoopCount:
    """Run count and limit for one handler identity."""
    count: int = 0
    max: int = 0

    @property
    def is_limited(self) -> bool:
        return self.max > 0

    def increment(self) -> bool:
        """Add one run. Returns True if the limit is now exceeded."""
        self.count += 1
        return self.exceeded()

    def exceeded(self) -> bool:
        return self.is_limited and self.count > self.max


def _check_max(max_loop_count: int) -> int:
    if isinstance(max_loop_count, bool) or not isinstance(max_loop_count, int):
        raise HandlerConfigurationError(
            f"Max loop count must be an integer, got {max_loop_count!r}"
        )
    if max_loop_count < 0:
        raise HandlerConfigurationError(
            f"Max loop count must be >= 0, got {max_loop_count}"
        )
    return max_loop_count


class RecursionCounters:
    """
    Loop counters keyed by handler identity.
    """

    def __init__(self):
        self._counts: Dict[str, LoopCount] = {}

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str):
            return False
        return identity.strip() in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def entry(self, identity: str) -> LoopCount:
        """Get the counter for a handler, creating an unlimited one if missing."""
        identity = validate_identity(identity)
        loop_count = self._counts.get(identity)
        if loop_count is None:
            loop_count = LoopCount()
            self._counts[identity] = loop_count
        return loop_count

    def get(self, identity: str) -> Optional[LoopCount]:
        return self._counts.get(validate_identity(identity))

    def count(self, identity: str) -> int:
        """Current run count for a handler (0 if it never ran)."""
        loop_count = self.get(identity)
        return loop_count.count if loop_count else 0

    def set_max(self, identity: str, max_loop_count: int) -> None:
        """Set the limit for a handler. The current count is kept."""
        self.entry(identity).max = _check_max(max_loop_count)
        logger.debug(f"Max loop count for {identity} set to {max_loop_count}")

    def clear_max(self, identity: str) -> None:
        """Remove the limit for a handler. The current count is kept."""
        loop_count = self.get(identity)
        if loop_count is not None:
            loop_count.max = 0

    def increment(self, identity: str) -> LoopCount:
        """Add one run for a handler and return its counter."""
        loop_count = self.entry(identity)
        loop_count.increment()
        return loop_count

    def reset(self) -> None:
        self._counts.clear()

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Plain-dict view of all counters, for logging and diagnostics."""
        return {
            identity: {"count": lc.count, "max": lc.max}
            for identity, lc in self._counts.items()
        }


__all__ = [
    "LoopCount",
    "RecursionCounters",
]
