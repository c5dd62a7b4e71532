# ============================================================================
# HANDLER DIAGNOSTICS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Post-run limits report
# PURPOSE: Forward platform resource counters to the log after a handler run
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handler Diagnostics

The supervisor does not measure resource usage itself. When the limits
report is enabled it asks the unit of work's limits provider for the
platform's counters and logs them as a "handler_limits" checkpoint.
Any counter at or above the warn percentage raises the record to WARNING.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from core.contracts import LimitUsage, Phase
from core.logging import log_checkpoint

logger = logging.getLogger(__name__)


def build_limits_report(
    identity: str,
    phase: Phase,
    usages: Iterable[LimitUsage],
    warn_percent: int = 80,
    loop_count: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the report payload.

    Returns:
        Dict with handler, phase, limits (one entry per counter) and the
        names of counters at or above warn_percent
    """
    limits: List[Dict[str, Any]] = []
    near_limit: List[str] = []
    for usage in usages:
        limits.append({
            "name": usage.name,
            "used": usage.used,
            "limit": usage.limit,
            "percent_used": usage.percent_used,
        })
        if usage.limit and usage.percent_used >= warn_percent:
            near_limit.append(usage.name)

    report: Dict[str, Any] = {
        "handler": identity,
        "phase": phase.value,
        "limits": limits,
        "near_limit": near_limit,
    }
    if loop_count is not None:
        report["loop_count"] = loop_count
    return report


def emit_limits_report(
    identity: str,
    phase: Phase,
    usages: Iterable[LimitUsage],
    warn_percent: int = 80,
    loop_count: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Log the limits report and return it.
    """
    report = build_limits_report(
        identity, phase, usages, warn_percent=warn_percent, loop_count=loop_count
    )
    level = logging.WARNING if report["near_limit"] else logging.INFO
    log_checkpoint("handler_limits", data=report, logger=logger, level=level)
    return report


__all__ = [
    "build_limits_report",
    "emit_limits_report",
]
