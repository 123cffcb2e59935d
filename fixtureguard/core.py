#=============================================================================
# File        : fixtureguard/core.py
# Project     : FixtureGuard v1.0
# Component   : Core Orchestrator - Public Teardown Leak Checking API
# Description : Primary orchestration layer for fixture leak detection
#               " Unified API for protect(), inspect_test(), assert_no_leaks()
#               " Active configuration and logging level management
#               " Session report and status information
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Cross-Platform
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Teardown leak checking)
# Dependencies: config, report, guards, detectors
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import sys
import logging
import platform
import unittest
from typing import Any, Dict, List, Optional

from .config import FixtureGuardConfig, get_active_config, set_active_config
from .report import Finding, LeakReport, create_report
from .detectors.fields import (
    inspect_fields, check_fields, get_performance_stats, reset_performance_stats,
    get_session_findings, clear_session_findings
)
from .guards.teardown_guard import (
    InstallState, install_teardown_guard, is_installed, get_install_info,
    get_install_state
)

# Configure safe logging defaults
_logger = logging.getLogger(__name__)
_logger.setLevel(logging.WARNING)  # Only WARN/ERROR by default

# Add console handler only if none exists
if not _logger.handlers and not logging.getLogger().handlers:
    _console_handler = logging.StreamHandler()
    _console_handler.setLevel(logging.WARNING)
    _formatter = logging.Formatter('[FixtureGuard] %(levelname)s: %(message)s')
    _console_handler.setFormatter(_formatter)
    _logger.addHandler(_console_handler)

_PACKAGE_LOGGER = "fixtureguard"

# Environment detection
_environment_info = {
    'platform': platform.system(),
    'python_implementation': platform.python_implementation(),
    'python_version': platform.python_version(),
    'process_name': os.path.basename(sys.argv[0]) if sys.argv else 'unknown'
}


def _apply_log_level(config: FixtureGuardConfig) -> None:
    """Lower every FixtureGuard logger to DEBUG in debug mode."""
    level = logging.DEBUG if config.debug_mode else logging.WARNING
    for name in list(logging.Logger.manager.loggerDict):
        if name == _PACKAGE_LOGGER or name.startswith(_PACKAGE_LOGGER + "."):
            logging.getLogger(name).setLevel(level)
            for handler in logging.getLogger(name).handlers:
                handler.setLevel(level)


def protect(base: type = unittest.TestCase,
            config: Optional[FixtureGuardConfig] = None) -> InstallState:
    """
    Start checking every test of ``base`` for leaked fields at teardown.

    Call once at suite bootstrap (the pytest plugin does this for
    unittest.TestCase). Repeated calls on the same base are no-ops: the
    guard keeps the configuration it was installed with, and so does the
    active configuration.

    Args:
        base: Test base class whose tearDown() is intercepted
        config: Pre-configured FixtureGuardConfig (environment if None)
    """
    if get_install_state(base) is InstallState.INSTALLED:
        return install_teardown_guard(base, config)

    config = config or FixtureGuardConfig.from_env()
    set_active_config(config)
    _apply_log_level(config)
    return install_teardown_guard(base, config)


def inspect_test(instance: Any) -> List[Finding]:
    """Classify the fields of ``instance`` now, resetting AutoTeardown fields."""
    return inspect_fields(instance, get_active_config())


def assert_no_leaks(instance: Any) -> None:
    """Raise FixtureLeakError now if ``instance`` holds leaked fields."""
    check_fields(instance, get_active_config())


def get_report() -> LeakReport:
    """Snapshot of every leak found in this process so far."""
    stats = get_performance_stats()
    return create_report(
        get_session_findings(),
        instances_inspected=stats['instances_inspected'],
        fields_reset=stats['fields_reset'],
    )


def reset_report() -> None:
    """Clear recorded findings and counters (for testing)."""
    clear_session_findings()
    reset_performance_stats()


def is_protecting(base: type = unittest.TestCase) -> bool:
    return is_installed(base)


def get_status() -> Dict[str, Any]:
    """
    Get status information about FixtureGuard.

    Returns:
        Dictionary with installed guards, configuration and performance metrics
    """
    config = get_active_config()
    return {
        'is_protecting': is_protecting(),
        'installed_guards': get_install_info(),
        'configuration': {
            'mode': config.mode,
            'auto_teardown': config.auto_teardown,
            'kill_switch': config.kill_switch,
            'debug_mode': config.debug_mode,
            'ignored_fields': list(config.ignored_fields),
            'framework_packages': list(config.framework_packages),
        },
        'performance_stats': get_performance_stats(),
        'environment_info': _environment_info.copy(),
    }
