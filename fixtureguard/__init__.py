#=============================================================================
# File        : fixtureguard/__init__.py
# Project     : FixtureGuard v1.0 - Open Source
# Component   : Package Initialization
# Description : Test fixture leak detection at teardown
#               • Automatic field inspection for every unittest.TestCase
#               • TestConstant / AutoTeardown field markers
#               • pytest plugin for bootstrap and plain test classes
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, unittest, pytest
# Standards   : PEP 8, Type Hints, Dataclasses
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial release)
# Dependencies: unittest, pytest
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, comprehensive test suite
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. Released under MIT License.
#=============================================================================

"""
FixtureGuard - Test Fixture Leak Detection

Fails any test whose instance still holds fixtures (mocks, clients, heavy
objects) once teardown runs, so state never leaks silently between tests.

Quick Start:
    import unittest
    import fixtureguard
    from fixtureguard import AutoTeardown, TestConstant

    fixtureguard.protect()  # once, at suite bootstrap

    class ClientTest(unittest.TestCase):
        base_url = TestConstant("https://example.invalid")
        client = AutoTeardown()

        def setUp(self):
            self.client = make_client(self.base_url)   # released automatically
            self.session = open_session()              # must be set to None in tearDown

With pytest installed the bundled plugin calls protect() for you.
"""

from .core import (
    protect,
    inspect_test,
    assert_no_leaks,
    get_report,
    reset_report,
    is_protecting,
    get_status
)

from .config import FixtureGuardConfig

from .markers import (
    FieldKind,
    TestConstant,
    AutoTeardown
)

from .report import (
    Finding,
    FixtureLeakError,
    LeakReport
)

from .guards.teardown_guard import InstallState

__version__ = "1.0.0"
__author__ = "Kyle Clouthier"
__license__ = "MIT"

__all__ = [
    # Core functions
    "protect",
    "inspect_test",
    "assert_no_leaks",
    "get_report",
    "reset_report",
    "is_protecting",
    "get_status",

    # Configuration
    "FixtureGuardConfig",

    # Markers
    "FieldKind",
    "TestConstant",
    "AutoTeardown",

    # Reporting
    "Finding",
    "FixtureLeakError",
    "LeakReport",
    "InstallState",

    # Metadata
    "__version__",
    "__author__",
    "__license__"
]
