# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the handler supervisor.
"""

from core.config.defaults import (
    SupervisorDefaults,
    DiagnosticsDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "SupervisorDefaults",
    "DiagnosticsDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
