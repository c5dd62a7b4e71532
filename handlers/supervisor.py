# ============================================================================
# HANDLER SUPERVISOR
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Phase dispatch with bypass and recursion guard
# PURPOSE: Route one trigger event to the matching handler callback
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handler Supervisor

Base class for trigger handlers. The trigger entry point constructs one
supervisor per invocation and calls run(ctx); run() then:

1. returns silently if the handler is bypassed
2. increments the handler's loop counter
3. raises RecursionLimitExceeded if the counter is over the max
4. calls exactly one of the seven phase callbacks
5. logs the platform limits report when diagnostics are enabled

Concrete handlers override only the callbacks they need:

    class AccountHandler(HandlerSupervisor):
        handler_name = "AccountHandler"

        def after_update(self):
            for account in self.context.new_records:
                ...

    with begin_unit_of_work():
        AccountHandler(max_loop_count=2).run(
            EventContext(phase=Phase.AFTER_UPDATE, new_records=accounts)
        )
"""

from typing import Dict, Optional

from core.config import Defaults, get_defaults
from core.contracts import EventContext, Phase
from core.logging import ComponentType, get_logger, log_context
from core.observability import get_metrics, track_metric
from handlers.bypass import BypassRegistry
from handlers.diagnostics import emit_limits_report
from handlers.errors import (
    HandlerConfigurationError,
    RecursionLimitExceeded,
    validate_identity,
)
from handlers.recursion import RecursionCounters
from handlers.unit_of_work import UnitOfWork, current_unit_of_work

logger = get_logger(__name__, ComponentType.SUPERVISOR)


class HandlerSupervisor:
    """
    Dispatches trigger events to phase callbacks.

    Subclasses supply an identity either as the class attribute
    `handler_name` or the `name` constructor argument. The identity keys
    both the bypass registry and the loop counters, so two handler types
    must never share one.
    """

    handler_name: Optional[str] = None

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        max_loop_count: Optional[int] = None,
        unit_of_work: Optional[UnitOfWork] = None,
        show_limits: Optional[bool] = None,
        defaults: Optional[Defaults] = None,
    ):
        """
        Initialize supervisor.

        Args:
            name: Handler identity (overrides the class attribute)
            max_loop_count: Recursion limit for this identity, 0 = unbounded.
                When omitted, an existing limit for the identity is kept and
                otherwise the configured default applies.
            unit_of_work: Scope for bypass and loop state (defaults to the
                active one)
            show_limits: Emit the limits report after each dispatch

        Raises:
            HandlerConfigurationError on a missing/empty identity, a negative
            max, or no unit of work
        """
        identity = name if name is not None else self.handler_name
        if identity is None:
            raise HandlerConfigurationError(
                f"{type(self).__name__} has no handler identity; "
                f"pass name= or set handler_name"
            )
        self.identity = validate_identity(identity)

        self.unit_of_work = unit_of_work if unit_of_work is not None else current_unit_of_work()
        self._defaults = defaults or get_defaults()
        self.show_limits = (
            self._defaults.diagnostics.show_limits if show_limits is None else show_limits
        )
        self.context: Optional[EventContext] = None

        if max_loop_count is not None:
            self.set_max_loop_count(max_loop_count)
        else:
            entry = self.recursion_counters.entry(self.identity)
            if not entry.is_limited:
                configured = self._defaults.supervisor.get_max_loop_count(self.identity)
                if configured:
                    self.set_max_loop_count(configured)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identity!r})"

    # ========================================================================
    # STATE ACCESS
    # ========================================================================

    @property
    def bypass_registry(self) -> BypassRegistry:
        return self.unit_of_work.bypass_registry

    @property
    def recursion_counters(self) -> RecursionCounters:
        return self.unit_of_work.recursion_counters

    @property
    def is_bypassed(self) -> bool:
        return self.bypass_registry.is_bypassed(self.identity)

    @property
    def loop_count(self) -> int:
        return self.recursion_counters.count(self.identity)

    @property
    def max_loop_count(self) -> int:
        return self.recursion_counters.entry(self.identity).max

    def set_max_loop_count(self, max_loop_count: int) -> None:
        """Limit how many times this identity may run in the unit of work."""
        self.recursion_counters.set_max(self.identity, max_loop_count)

    def clear_max_loop_count(self) -> None:
        self.recursion_counters.clear_max(self.identity)

    # ========================================================================
    # ENTRY POINT
    # ========================================================================

    def run(self, ctx: EventContext) -> None:
        """
        Dispatch one trigger event.

        Args:
            ctx: The event (phase, outer flag, records)

        Raises:
            HandlerConfigurationError if ctx is not an EventContext
            RecursionLimitExceeded if the loop count is over the max
        """
        if not isinstance(ctx, EventContext):
            raise HandlerConfigurationError(
                f"{self.identity}.run() called outside of trigger execution"
            )

        if self.bypass_registry.is_bypassed(self.identity):
            return

        phase = ctx.phase
        loop_count = self.recursion_counters.increment(self.identity)
        if loop_count.exceeded():
            track_metric(
                "handler.recursion_limit_exceeded",
                tags={"handler": self.identity, "phase": phase.value},
            )
            logger.error(
                f"Handler {self.identity} exceeded max loop count "
                f"{loop_count.max} in {phase.value} (count={loop_count.count})"
            )
            raise RecursionLimitExceeded(self.identity, phase, loop_count.max)

        with log_context(
            unit_id=self.unit_of_work.unit_id,
            handler=self.identity,
            phase=phase.value,
            outer=ctx.is_outer,
        ):
            self._dispatch(ctx)

            if self.show_limits:
                self._report_limits(phase, loop_count.count)

    # ========================================================================
    # DISPATCH
    # ========================================================================

    def _dispatch(self, ctx: EventContext) -> None:
        phase = ctx.phase
        callback = getattr(self, phase.callback_name)
        tags: Dict[str, str] = {"handler": self.identity, "phase": phase.value}

        logger.debug(
            f"Dispatching {self.identity}.{phase.callback_name} "
            f"(records={ctx.size}, outer={ctx.is_outer})"
        )
        track_metric("handler.dispatched", tags=tags)

        # Re-entrant runs of the same instance restore the outer event
        previous = self.context
        self.context = ctx
        try:
            with get_metrics().timer("handler.dispatch_ms", tags=tags):
                callback()
        finally:
            self.context = previous

    def _report_limits(self, phase: Phase, loop_count: int) -> None:
        provider = self.unit_of_work.limits_provider
        if provider is None:
            logger.debug(f"Limits report skipped for {self.identity}: no limits provider")
            return
        emit_limits_report(
            self.identity,
            phase,
            provider(),
            warn_percent=self._defaults.diagnostics.warn_percent,
            loop_count=loop_count,
        )

    # ========================================================================
    # PHASE CALLBACKS
    # ========================================================================
    # No-ops by default. self.context holds the event being dispatched.

    def before_insert(self) -> None:
        pass

    def before_update(self) -> None:
        pass

    def before_delete(self) -> None:
        pass

    def after_insert(self) -> None:
        pass

    def after_update(self) -> None:
        pass

    def after_delete(self) -> None:
        pass

    def after_undelete(self) -> None:
        pass


__all__ = [
    "HandlerSupervisor",
]
