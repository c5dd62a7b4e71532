# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Foundation - Phase enum and event contracts
# PURPOSE: Define the values that cross the trigger/handler boundary
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Phase, EventContext, LimitUsage
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the handler supervisor.

These are the only values that cross the boundary between the host
platform's trigger entry point and the supervisor:
- Phase: which lifecycle moment fired
- EventContext: the phase plus the opaque changed-record set
- LimitUsage: resource counters forwarded by the platform for diagnostics

The supervisor never inspects record contents.
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field


# ============================================================================
# PHASE ENUM
# ============================================================================

class Phase(str, Enum):
    """
    Trigger lifecycle phases.

    before/after x insert/update/delete, plus after-undelete.
    """
    BEFORE_INSERT = "before_insert"
    BEFORE_UPDATE = "before_update"
    BEFORE_DELETE = "before_delete"
    AFTER_INSERT = "after_insert"
    AFTER_UPDATE = "after_update"
    AFTER_DELETE = "after_delete"
    AFTER_UNDELETE = "after_undelete"

    @property
    def is_before(self) -> bool:
        return self.value.startswith("before_")

    @property
    def is_after(self) -> bool:
        return self.value.startswith("after_")

    @property
    def operation(self) -> str:
        """DML operation part of the phase (insert, update, delete, undelete)."""
        return self.value.split("_", 1)[1]

    @property
    def callback_name(self) -> str:
        """Name of the supervisor method this phase dispatches to."""
        return self.value

    @classmethod
    def from_parts(cls, timing: str, operation: str) -> "Phase":
        """
        Build a phase from separate timing and operation flags.

        Host platforms usually expose isBefore/isAfter and isInsert/isUpdate
        style booleans rather than a single value.

        Args:
            timing: "before" or "after"
            operation: "insert", "update", "delete" or "undelete"

        Returns:
            Phase

        Raises:
            ValueError if the combination is not a known phase
        """
        key = f"{timing.strip().lower()}_{operation.strip().lower()}"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown trigger phase: {timing}/{operation}") from None


# ============================================================================
# EVENT CONTRACTS
# ============================================================================

class EventContext(BaseModel):
    """
    The event a supervisor is asked to dispatch.

    Owned by the caller and read-only to the supervisor. The record
    sequences are forwarded to handler overrides untouched.
    """
    phase: Phase = Field(..., description="Lifecycle phase that fired")
    is_outer: bool = Field(
        default=True,
        description="True when this is the outermost invocation in the unit of work",
    )
    new_records: List[Any] = Field(default_factory=list)
    old_records: List[Any] = Field(default_factory=list)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def size(self) -> int:
        """Number of records in the event."""
        return max(len(self.new_records), len(self.old_records))


class LimitUsage(BaseModel):
    """
    One platform resource counter (e.g. queries issued vs. allowed).
    """
    name: str = Field(..., min_length=1)
    used: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @property
    def percent_used(self) -> float:
        if self.limit == 0:
            return 0.0
        return round(self.used * 100.0 / self.limit, 1)


__all__ = [
    "Phase",
    "EventContext",
    "LimitUsage",
]
