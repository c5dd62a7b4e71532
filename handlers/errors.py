# ============================================================================
# HANDLER ERRORS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Error taxonomy
# PURPOSE: Exceptions raised by the supervisor, registry and recursion guard
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handler Errors

- HandlerError: base class
- HandlerConfigurationError: misuse detected at construction or call time
- RecursionLimitExceeded: a handler re-entered more often than allowed

Bypassed runs and unset callbacks are not errors and raise nothing.
"""

from typing import Any

from core.contracts import Phase


class HandlerError(Exception):
    """Base exception for handler errors."""
    pass


class HandlerConfigurationError(HandlerError):
    """Raised when a handler or registry is used incorrectly."""
    pass


class RecursionLimitExceeded(HandlerError):
    """
    Raised when a handler exceeds its max loop count within one unit of work.

    Fatal to the unit of work: callers must let it propagate.
    """
    def __init__(self, identity: str, phase: Phase, max_loop_count: int):
        self.identity = identity
        self.phase = phase
        self.max_loop_count = max_loop_count
        super().__init__(
            f"Maximum loop count of {max_loop_count} reached in {identity} "
            f"({phase.value})"
        )


def validate_identity(identity: Any) -> str:
    """
    Normalize a handler identity.

    Returns:
        The identity with surrounding whitespace removed

    Raises:
        HandlerConfigurationError if identity is not a non-empty string
    """
    if not isinstance(identity, str):
        raise HandlerConfigurationError(
            f"Handler identity must be a string, got {type(identity).__name__}"
        )
    identity = identity.strip()
    if not identity:
        raise HandlerConfigurationError("Handler identity must not be empty")
    return identity


__all__ = [
    "HandlerError",
    "HandlerConfigurationError",
    "RecursionLimitExceeded",
    "validate_identity",
]
