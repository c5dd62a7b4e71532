# ============================================================================
# HANDLERS MODULE
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Handler supervision components
# PURPOSE: Supervisor base class, bypass registry, recursion guard
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handlers Module

Components for supervising trigger handlers:
- errors: Error taxonomy
- bypass: Per-unit-of-work handler suppression
- recursion: Per-handler loop counters
- unit_of_work: Scope object bundling bypass and loop state
- diagnostics: Post-run limits report
- supervisor: HandlerSupervisor base class
- examples: Sample handlers

Usage:
    from handlers import HandlerSupervisor, begin_unit_of_work
    from core.contracts import EventContext, Phase

    class AccountHandler(HandlerSupervisor):
        handler_name = "AccountHandler"

        def before_insert(self):
            ...

    with begin_unit_of_work() as uow:
        uow.bypass_registry.bypass("OpportunityHandler")
        AccountHandler().run(EventContext(phase=Phase.BEFORE_INSERT))
"""

from handlers.errors import (
    HandlerError,
    HandlerConfigurationError,
    RecursionLimitExceeded,
)
from handlers.bypass import BYPASS_ALL, BypassRegistry
from handlers.recursion import LoopCount, RecursionCounters
from handlers.unit_of_work import (
    LimitsProvider,
    UnitOfWork,
    begin_unit_of_work,
    current_unit_of_work,
    has_active_unit_of_work,
)
from handlers.diagnostics import build_limits_report, emit_limits_report
from handlers.supervisor import HandlerSupervisor

__all__ = [
    # Errors
    "HandlerError",
    "HandlerConfigurationError",
    "RecursionLimitExceeded",
    # Bypass
    "BYPASS_ALL",
    "BypassRegistry",
    # Recursion
    "LoopCount",
    "RecursionCounters",
    # Unit of work
    "LimitsProvider",
    "UnitOfWork",
    "begin_unit_of_work",
    "current_unit_of_work",
    "has_active_unit_of_work",
    # Diagnostics
    "build_limits_report",
    "emit_limits_report",
    # Supervisor
    "HandlerSupervisor",
]
