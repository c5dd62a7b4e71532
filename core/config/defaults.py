# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for recursion limits and diagnostics
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the handler supervisor.
These can be overridden via environment variables or constructor arguments.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access

Environment:
    TRIGGER_MAX_LOOP_COUNT       default recursion limit (0 = unbounded)
    TRIGGER_MAX_LOOP_COUNTS      per-handler limits, "AccountHandler=2,OrderHandler=5"
    TRIGGER_SHOW_LIMITS          emit the post-run limits report (true/false)
    TRIGGER_LIMITS_WARN_PERCENT  usage percentage that is logged as WARNING
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_loop_counts(raw: str) -> Dict[str, int]:
    """Parse "Name=3,Other=1" into a dict. Blank entries are ignored."""
    counts: Dict[str, int] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, _, value = entry.partition("=")
        if not name.strip() or not value.strip():
            raise ValueError(f"Invalid loop count entry: {entry!r}")
        counts[name.strip()] = int(value)
    return counts


@dataclass(frozen=True)
class SupervisorDefaults:
    """
    Defaults for the recursion guard.

    A max loop count of 0 means the handler may re-enter without limit.
    """
    max_loop_count: int = 0

    # Handler-specific limits, keyed by handler identity
    handler_max_loop_counts: Dict[str, int] = field(default_factory=dict)

    def get_max_loop_count(self, handler: str) -> int:
        """Get the configured limit for a handler, falling back to the default."""
        return self.handler_max_loop_counts.get(handler, self.max_loop_count)

    @classmethod
    def from_env(cls) -> "SupervisorDefaults":
        """Create from environment variables."""
        return cls(
            max_loop_count=int(os.getenv("TRIGGER_MAX_LOOP_COUNT", 0)),
            handler_max_loop_counts=_parse_loop_counts(
                os.getenv("TRIGGER_MAX_LOOP_COUNTS", "")
            ),
        )


@dataclass(frozen=True)
class DiagnosticsDefaults:
    """
    Defaults for the post-run limits report.
    """
    show_limits: bool = False
    warn_percent: int = 80

    @classmethod
    def from_env(cls) -> "DiagnosticsDefaults":
        """Create from environment variables."""
        return cls(
            show_limits=_env_bool("TRIGGER_SHOW_LIMITS", False),
            warn_percent=int(os.getenv("TRIGGER_LIMITS_WARN_PERCENT", 80)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    supervisor: SupervisorDefaults = field(default_factory=SupervisorDefaults)
    diagnostics: DiagnosticsDefaults = field(default_factory=DiagnosticsDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            supervisor=SupervisorDefaults.from_env(),
            diagnostics=DiagnosticsDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SupervisorDefaults",
    "DiagnosticsDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
