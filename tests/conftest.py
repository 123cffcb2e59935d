#=============================================================================
# File        : tests/conftest.py
# Project     : FixtureGuard v1.0
# Component   : Shared Test Fixtures
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import os
import sys
from pathlib import Path

import pytest

# Add fixtureguard to path for testing
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from fixtureguard import config as config_module
from fixtureguard.core import reset_report

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def clean_fixtureguard_state(monkeypatch):
    """Isolate the active config and session report for every test."""
    monkeypatch.setattr(config_module, "_active_config", config_module.FixtureGuardConfig())
    for name in list(os.environ):
        if name.startswith("FIXTUREGUARD_"):
            monkeypatch.delenv(name)
    reset_report()
    yield
    reset_report()
