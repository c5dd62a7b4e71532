# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Log context for handler dispatch
# PURPOSE: Attach unit/handler/phase fields to every supervisor log record
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Log records emitted while a handler is dispatching carry the unit of work,
handler identity, phase and outer flag in `record.extra`, so whatever
handler/formatter the host application installs can render or ship them.
Output configuration is left to the host.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger(__name__, ComponentType.SUPERVISOR)

    with log_context(handler="AccountHandler", phase="after_update"):
        logger.info("Dispatching", extra={"records": 5})
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


class ComponentType(str, Enum):
    """Component tag added to records from get_logger()."""
    SUPERVISOR = "supervisor"


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass
class LogContext:
    """Fields attached to records logged inside a log_context() block."""
    unit_id: Optional[str] = None
    handler: Optional[str] = None
    phase: Optional[str] = None
    outer: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with `extra` flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_local = threading.local()


def _stack() -> List[LogContext]:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    """Innermost context on this thread (empty outside any block)."""
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Push logging context for the duration of a block.

    Unset fields are inherited from the enclosing block; `extra` dicts are
    merged.

    Example:
        with log_context(unit_id="uow-1", handler="AccountHandler"):
            logger.info("Running handler")
    """
    parent = get_current_context()
    context = LogContext(
        unit_id=kwargs.get("unit_id", parent.unit_id),
        handler=kwargs.get("handler", parent.handler),
        phase=kwargs.get("phase", parent.phase),
        outer=kwargs.get("outer", parent.outer),
        extra={**parent.extra, **kwargs.get("extra", {})},
    )

    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that copies the current log context into `record.extra`.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra", {}))
        extra.update(get_current_context().to_dict())
        component = self.extra.get("component") if self.extra else None
        if component:
            extra.setdefault("component", component)

        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (e.g., "handlers.supervisor")
        component: Optional component tag
    """
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    level: int = logging.INFO,
) -> None:
    """
    Log a named checkpoint.

    The record message is "CHECKPOINT: <name>"; `record.extra` holds the
    name, a UTC timestamp, the unit/handler/phase from the current context
    and `data`.

    Args:
        name: Checkpoint name (e.g., "handler_limits")
        data: Optional checkpoint payload
        logger: Logger to use (defaults to the "checkpoint" logger)
        level: Log level for the record
    """
    if logger is None:
        logger = logging.getLogger("checkpoint")

    checkpoint_data: Dict[str, Any] = {
        "checkpoint": name,
        "timestamp": _utc_timestamp(),
    }

    context = get_current_context()
    for key in ("unit_id", "handler", "phase"):
        value = getattr(context, key)
        if value:
            checkpoint_data[key] = value

    if data:
        checkpoint_data["data"] = data

    logger.log(level, f"CHECKPOINT: {name}", extra={"extra": checkpoint_data})


__all__ = [
    "ComponentType",
    "LogContext",
    "ContextLogger",
    "get_logger",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
