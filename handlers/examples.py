# ============================================================================
# EXAMPLE HANDLERS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Examples - Sample handler implementations
# PURPOSE: Demonstrate overriding callbacks, bypassing and recursion limits
# CREATED: 19 OCT 2026
# ============================================================================
"""
Example Handlers

Sample implementations showing how to build handlers on the supervisor.
These can be used for testing and as templates for real handlers.

The host platform is simulated with a `fire` callable: calling it stands in
for a DML statement that makes the platform invoke triggers again within
the same unit of work.
"""

import logging
from typing import Callable, List, Optional, Tuple

from core.contracts import EventContext, Phase
from handlers.supervisor import HandlerSupervisor

logger = logging.getLogger(__name__)

# Simulated DML: re-enters trigger execution with a new event
FireFunc = Callable[[EventContext], None]


# ============================================================================
# BASIC HANDLERS
# ============================================================================

class EchoHandler(HandlerSupervisor):
    """
    Records every callback it receives.

    Each entry is (phase, record count).
    """
    handler_name = "EchoHandler"

    def __init__(self, name: Optional[str] = None, **kwargs):
        super().__init__(name, **kwargs)
        self.calls: List[Tuple[Phase, int]] = []

    def _record(self, phase: Phase) -> None:
        logger.info(f"{self.identity} {phase.value}: {self.context.size} record(s)")
        self.calls.append((phase, self.context.size))

    def before_insert(self) -> None:
        self._record(Phase.BEFORE_INSERT)

    def before_update(self) -> None:
        self._record(Phase.BEFORE_UPDATE)

    def before_delete(self) -> None:
        self._record(Phase.BEFORE_DELETE)

    def after_insert(self) -> None:
        self._record(Phase.AFTER_INSERT)

    def after_update(self) -> None:
        self._record(Phase.AFTER_UPDATE)

    def after_delete(self) -> None:
        self._record(Phase.AFTER_DELETE)

    def after_undelete(self) -> None:
        self._record(Phase.AFTER_UNDELETE)


# ============================================================================
# RE-ENTRANT HANDLERS
# ============================================================================

class CascadingHandler(HandlerSupervisor):
    """
    Updates its own records again in after_update.

    Without a max loop count this would re-enter until `depth` runs out;
    with one, the recursion guard stops it.
    """
    handler_name = "CascadingHandler"

    def __init__(self, fire: FireFunc, depth: int = 10, **kwargs):
        super().__init__(**kwargs)
        self.fire = fire
        self.depth = depth
        self.runs = 0

    def after_update(self) -> None:
        self.runs += 1
        if self.runs < self.depth:
            self.fire(EventContext(
                phase=Phase.AFTER_UPDATE,
                is_outer=False,
                new_records=self.context.new_records,
                old_records=self.context.new_records,
            ))


class RollupHandler(HandlerSupervisor):
    """
    Writes rollup values to parent records after an insert.

    The write would re-fire `suppress` handlers on the parents, so they are
    bypassed for the nested DML and restored afterwards. An empty tuple
    suppresses every handler.
    """
    handler_name = "RollupHandler"

    def __init__(self, fire: FireFunc, suppress: Tuple[str, ...], **kwargs):
        super().__init__(**kwargs)
        self.fire = fire
        self.suppress = suppress

    def after_insert(self) -> None:
        parents = list(self.context.new_records)
        with self.bypass_registry.suppressed(*self.suppress):
            self.fire(EventContext(
                phase=Phase.AFTER_UPDATE,
                is_outer=False,
                new_records=parents,
                old_records=parents,
            ))


__all__ = [
    "FireFunc",
    "EchoHandler",
    "CascadingHandler",
    "RollupHandler",
]
