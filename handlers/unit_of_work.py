# ============================================================================
# UNIT OF WORK
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Scope for bypass and recursion state
# PURPOSE: Isolate registry and counters per externally defined transaction
# CREATED: 19 OCT 2026
# ============================================================================
"""
Unit of Work

Bypass state and loop counters live for exactly one unit of work (one
platform transaction). A UnitOfWork bundles both and is passed by reference
to every supervisor constructed during that transaction.

Two ways to supply it:
- explicitly: HandlerSupervisor("AccountHandler", unit_of_work=uow)
- scoped: inside `with begin_unit_of_work() as uow:` supervisors pick up the
  innermost active unit from a thread-local stack

Nothing is shared between units, and threads never see each other's units.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional

from core.contracts import LimitUsage
from handlers.bypass import BypassRegistry
from handlers.errors import HandlerConfigurationError
from handlers.recursion import RecursionCounters

logger = logging.getLogger(__name__)

# Supplied by the host platform; returns its current resource counters
LimitsProvider = Callable[[], Iterable[LimitUsage]]


def _new_unit_id() -> str:
    return f"uow-{uuid.uuid4().hex[:12]}"


@dataclass
class UnitOfWork:
    """Bypass registry and recursion counters for one transaction."""
    bypass_registry: BypassRegistry = field(default_factory=BypassRegistry)
    recursion_counters: RecursionCounters = field(default_factory=RecursionCounters)
    unit_id: str = field(default_factory=_new_unit_id)
    limits_provider: Optional[LimitsProvider] = None

    def reset(self) -> None:
        """Clear all bypasses and loop counters."""
        self.bypass_registry.clear_all_bypasses()
        self.recursion_counters.reset()
        logger.debug(f"Unit of work {self.unit_id} reset")


# Thread-local stack of active units
_active = threading.local()


def _get_stack() -> list:
    if not hasattr(_active, "stack"):
        _active.stack = []
    return _active.stack


def current_unit_of_work() -> UnitOfWork:
    """
    Get the innermost active unit of work.

    Raises:
        HandlerConfigurationError if no unit of work is active on this thread
    """
    stack = _get_stack()
    if not stack:
        raise HandlerConfigurationError(
            "No active unit of work; use begin_unit_of_work() or pass unit_of_work="
        )
    return stack[-1]


def has_active_unit_of_work() -> bool:
    return bool(_get_stack())


@contextmanager
def begin_unit_of_work(
    limits_provider: Optional[LimitsProvider] = None,
    unit_id: Optional[str] = None,
) -> Iterator[UnitOfWork]:
    """
    Start a fresh unit of work for the duration of a block.

    Nested calls start independent units; the outer one becomes active
    again when the inner block exits.

    Args:
        limits_provider: Optional platform callback for the limits report
        unit_id: Optional identifier (generated if omitted)
    """
    uow = UnitOfWork(limits_provider=limits_provider)
    if unit_id:
        uow.unit_id = unit_id

    stack = _get_stack()
    stack.append(uow)
    logger.debug(f"Unit of work {uow.unit_id} started")
    try:
        yield uow
    finally:
        stack.pop()
        logger.debug(f"Unit of work {uow.unit_id} ended")


__all__ = [
    "LimitsProvider",
    "UnitOfWork",
    "begin_unit_of_work",
    "current_unit_of_work",
    "has_active_unit_of_work",
]
