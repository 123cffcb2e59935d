#=============================================================================
# File        : fixtureguard/config.py
# Project     : FixtureGuard v1.0
# Component   : Configuration - FixtureGuard Configuration Dataclass
# Description : Runtime configuration for teardown leak checking
#               " Enforce/report modes for leak findings
#               " Auto-teardown and kill switch toggles
#               " Environment variable overlay (FIXTUREGUARD_*)
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses
# Standards   : PEP 8, Type Hints, Immutable Updates
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Teardown guard configuration)
# Dependencies: os, dataclasses, typing
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Tuple, Optional, Iterable, Literal

ModeName = Literal["enforce", "report"]

_VALID_MODES = ("enforce", "report")

def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None: return default
    return v.strip().lower() in {"1", "true", "yes", "on"}

def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    v = os.getenv(name)
    if v is None: return default
    return tuple(item.strip() for item in v.split(",") if item.strip())

def _normalize_names(values: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = (values,)
    return tuple(dict.fromkeys(str(v) for v in values))  # dedupe, keep order


@dataclass
class FixtureGuardConfig:
    """
    FixtureGuard runtime configuration.

    Safety defaults:
      - enforce mode (leaks fail the test)
      - auto-teardown fields are reset
      - only unittest is treated as a host framework
    """
    mode: ModeName = "enforce"       # "enforce" | "report"
    auto_teardown: bool = True       # reset AutoTeardown fields during inspection
    kill_switch: bool = False        # hard-off (e.g., FIXTUREGUARD_KILL_SWITCH=1)
    debug_mode: bool = False         # per-field decisions logged at DEBUG

    # Field names never reported (e.g. attributes injected by other plugins)
    ignored_fields: Tuple[str, ...] = ()

    # Packages whose TestCase bases own framework attributes on the instance
    framework_packages: Tuple[str, ...] = ("unittest",)

    def __post_init__(self):
        mode = (self.mode or "enforce").strip().lower()
        if mode not in _VALID_MODES:
            raise ValueError(f"Unknown mode '{self.mode}' (expected one of {_VALID_MODES})")

        self.mode = mode  # type: ignore[assignment]
        self.auto_teardown = bool(self.auto_teardown)
        self.kill_switch = bool(self.kill_switch)
        self.debug_mode = bool(self.debug_mode)
        self.ignored_fields = _normalize_names(self.ignored_fields)
        self.framework_packages = _normalize_names(self.framework_packages)

    # --------- Factory helpers ---------

    @staticmethod
    def from_env(base: Optional["FixtureGuardConfig"] = None) -> "FixtureGuardConfig":
        """
        Build config from environment variables, overlaying a base config.
        Supported envs:
          FIXTUREGUARD_MODE (enforce|report)
          FIXTUREGUARD_AUTO_TEARDOWN (0|1)
          FIXTUREGUARD_KILL_SWITCH (0|1)
          FIXTUREGUARD_DEBUG (0|1)
          FIXTUREGUARD_IGNORE (comma separated field names)
          FIXTUREGUARD_FRAMEWORKS (comma separated package names)
        """
        base = base or FixtureGuardConfig()
        return replace(
            base,
            mode=(os.getenv("FIXTUREGUARD_MODE", base.mode) or base.mode),  # type: ignore
            auto_teardown=_env_bool("FIXTUREGUARD_AUTO_TEARDOWN", base.auto_teardown),
            kill_switch=_env_bool("FIXTUREGUARD_KILL_SWITCH", base.kill_switch),
            debug_mode=_env_bool("FIXTUREGUARD_DEBUG", base.debug_mode),
            ignored_fields=_env_list("FIXTUREGUARD_IGNORE", base.ignored_fields),
            framework_packages=_env_list("FIXTUREGUARD_FRAMEWORKS", base.framework_packages),
        )

    def merge(self, **overrides) -> "FixtureGuardConfig":
        """Return a copy with provided fields overridden."""
        return replace(self, **overrides)

    # --------- Convenience getters ---------

    def is_enabled(self) -> bool:
        return not self.kill_switch

    def raises_on_leak(self) -> bool:
        return self.mode == "enforce"

    def is_ignored(self, name: str) -> bool:
        return name in self.ignored_fields

    def __repr__(self) -> str:
        return (f"FixtureGuardConfig(mode='{self.mode}', auto_teardown={self.auto_teardown}, "
                f"kill_switch={self.kill_switch}, debug_mode={self.debug_mode}, "
                f"ignored_fields={self.ignored_fields}, "
                f"framework_packages={self.framework_packages})")


# Active configuration shared by the teardown guard, plugin and on-demand checks
_active_config: Optional[FixtureGuardConfig] = None


def get_active_config() -> FixtureGuardConfig:
    """Return the configuration set by protect(), or one built from the environment."""
    global _active_config
    if _active_config is None:
        _active_config = FixtureGuardConfig.from_env()
    return _active_config


def set_active_config(config: Optional[FixtureGuardConfig]) -> None:
    """Replace the active configuration (None re-reads the environment on next use)."""
    global _active_config
    _active_config = config
