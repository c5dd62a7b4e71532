# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core module initialization
# PURPOSE: Export contracts shared by the supervisor and its callers
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import EventContext, LimitUsage, Phase

__all__ = [
    "Phase",
    "EventContext",
    "LimitUsage",
]
