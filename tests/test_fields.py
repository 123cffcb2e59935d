#=============================================================================
# File        : tests/test_fields.py
# Project     : FixtureGuard v1.0
# Component   : Field Classification Test Suite
# Description : Leak classification of test instance fields
#               • TestConstant exemption, AutoTeardown reset
#               • Unmarked leaks, emptiness, ordering and idempotence
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import gc
import unittest
import weakref
from enum import Enum
from unittest import mock

import pytest

from fixtureguard.config import FixtureGuardConfig
from fixtureguard.detectors.fields import (
    Classification, check_fields, classify_field, get_performance_stats,
    get_session_findings, inspect_fields
)
from fixtureguard.detectors.introspection import iter_fields
from fixtureguard.markers import AutoTeardown, TestConstant
from fixtureguard.report import Finding, FixtureLeakError


class Color(Enum):
    RED = "red"
    CUSTOM = ("custom", 0x123456)


class Widget:
    pass


SAMPLE_VALUES = [
    pytest.param("text", id="str"),
    pytest.param(7, id="int"),
    pytest.param(Color.RED, id="enum"),
    pytest.param(Color.CUSTOM, id="enum-with-payload"),
    pytest.param(Widget(), id="object"),
    pytest.param([], id="empty-list"),
]


class TestClassificationScenarios:
    """End-to-end classification of representative instances."""

    def test_mixed_fields(self):
        class T:
            b = TestConstant(2)
            c = AutoTeardown()

            def __init__(self):
                self.a = "x"
                self.c = "y"

        instance = T()

        assert inspect_fields(instance) == [Finding("T", "a")]
        assert instance.c is None
        assert instance.b == 2
        assert instance.a == "x"  # leaks are reported, never cleaned

    def test_absent_and_structurally_empty_values(self):
        class T:
            def __init__(self):
                payload = Widget()
                self.a = None
                self.b = weakref.ref(payload)
                del payload
                gc.collect()

        assert inspect_fields(T()) == []

    def test_never_initialized_instance(self):
        class T:
            __slots__ = ("handle", "__dict__")
            released = AutoTeardown()

            def __init__(self):
                self.handle = Widget()
                self.leaky = Widget()
                self.released = Widget()

        template = T.__new__(T)

        assert inspect_fields(template) == []
        check_fields(template)  # nothing raised

    def test_unittest_case_mirrors_leak_suite(self):
        class DetectTestCaseLeak(unittest.TestCase):
            const_string = TestConstant("constant")
            const_int = TestConstant(2)
            const_enum = TestConstant(Color.CUSTOM)
            const_object = TestConstant(factory=Widget)

            auto_string = AutoTeardown()
            auto_int = AutoTeardown()
            auto_enum = AutoTeardown()
            auto_object = AutoTeardown()

            def setUp(self):
                self.let_string = "not torn down"
                self.let_int = 1
                self.let_enum = Color.RED
                self.let_enum_payload = Color.CUSTOM
                self.let_object = Widget()
                self.auto_string = "released"
                self.auto_int = 3
                self.auto_enum = Color.CUSTOM
                self.auto_object = Widget()

            def test_nothing(self):
                pass

        case = DetectTestCaseLeak("test_nothing")
        case.setUp()
        const_object = case.const_object

        findings = inspect_fields(case)

        assert {f.class_name for f in findings} == {"DetectTestCaseLeak"}
        assert [f.field_name for f in findings] == [
            "let_string", "let_int", "let_enum", "let_enum_payload", "let_object",
        ]
        assert case.auto_string is None
        assert case.auto_int is None
        assert case.auto_enum is None
        assert case.auto_object is None
        assert case.let_int == 1
        assert case.const_string == "constant"
        assert case.const_int == 2
        assert case.const_enum is Color.CUSTOM
        assert case.const_object is const_object

    def test_stubbed_helper_method_leaks(self):
        class StubbedTest(unittest.TestCase):
            def load_user(self):
                return "real user"

            def setUp(self):
                self.load_user = mock.Mock(return_value="stub user")

            def test_nothing(self):
                pass

        case = StubbedTest("test_nothing")
        case.setUp()

        assert inspect_fields(case) == [Finding("StubbedTest", "load_user")]


class TestClassificationProperties:
    """Per-kind guarantees, whatever the value type."""

    @pytest.mark.parametrize("value", SAMPLE_VALUES)
    def test_test_constant_never_reported(self, value):
        class T:
            held = TestConstant()

        instance = T()
        instance.held = value

        assert inspect_fields(instance) == []
        assert instance.held is value

    @pytest.mark.parametrize("value", SAMPLE_VALUES)
    def test_auto_teardown_reset_and_never_reported(self, value):
        class T:
            held = AutoTeardown()

        instance = T()
        instance.held = value

        assert inspect_fields(instance) == []
        assert instance.held is None

    @pytest.mark.parametrize("value", SAMPLE_VALUES)
    def test_unmarked_value_reported_once(self, value):
        class Holder:
            pass

        instance = Holder()
        instance.held = value

        assert inspect_fields(instance) == [Finding("Holder", "held")]

    def test_finding_uses_runtime_type_name(self):
        class Base:
            def __init__(self):
                self.shared = Widget()

        class Derived(Base):
            pass

        assert inspect_fields(Derived()) == [Finding("Derived", "shared")]

    def test_findings_follow_discovery_order(self):
        class T:
            __slots__ = ("slot_field", "__dict__")

            def __init__(self):
                self.zulu = 1
                self.alpha = 2
                self.slot_field = 3
                self.mike = 4

        names = [f.field_name for f in inspect_fields(T())]
        assert names == ["slot_field", "zulu", "alpha", "mike"]

    def test_second_run_is_idempotent(self):
        class T:
            released = AutoTeardown()

            def __init__(self):
                self.leaky = Widget()
                self.released = Widget()

        instance = T()
        first = inspect_fields(instance)
        resets_after_first = get_performance_stats()['fields_reset']

        second = inspect_fields(instance)

        assert first == second == [Finding("T", "leaky")]
        assert get_performance_stats()['fields_reset'] == resets_after_first == 1


class TestClassifyField:
    """Single-field decisions and configuration switches."""

    def _field(self, instance, name):
        return next(f for f in iter_fields(instance) if f.name == name)

    def test_ignored_fields_are_exempt(self):
        class T:
            def __init__(self):
                self.driver = Widget()
                self.leaky = Widget()

        config = FixtureGuardConfig(ignored_fields=("driver",))
        assert inspect_fields(T(), config) == [Finding("T", "leaky")]

    def test_auto_teardown_disabled_leaves_value(self):
        class T:
            released = AutoTeardown()

            def __init__(self):
                self.released = "kept"

        instance = T()
        config = FixtureGuardConfig(auto_teardown=False)

        assert classify_field(instance, self._field(instance, "released"), config) is Classification.EXEMPT
        assert instance.released == "kept"

    def test_results(self):
        class T:
            constant = TestConstant()
            released = AutoTeardown()

            def __init__(self):
                self.constant = 1
                self.released = 2
                self.leaky = 3
                self.empty = None

        instance = T()

        assert classify_field(instance, self._field(instance, "constant")) is Classification.EXEMPT
        assert classify_field(instance, self._field(instance, "released")) is Classification.RESET
        assert classify_field(instance, self._field(instance, "leaky")) is Classification.LEAKED
        assert classify_field(instance, self._field(instance, "empty")) is Classification.EXEMPT


class TestCheckFields:
    """Explicit on-demand checks and bookkeeping."""

    def test_raises_aggregate_error(self):
        class T:
            def __init__(self):
                self.first = 1
                self.second = 2

        with pytest.raises(FixtureLeakError) as exc_info:
            check_fields(T())

        assert exc_info.value.findings == (Finding("T", "first"), Finding("T", "second"))
        assert "T.first" in str(exc_info.value)
        assert "T.second" in str(exc_info.value)

    def test_clean_instance_passes(self):
        class T:
            def __init__(self):
                self.cleared = None

        check_fields(T())

    def test_stats_and_session_findings(self):
        class T:
            released = AutoTeardown()

            def __init__(self):
                self.leaky = 1
                self.released = 2
                self.empty = None

        inspect_fields(T())
        stats = get_performance_stats()

        assert stats['instances_inspected'] == 1
        assert stats['fields_inspected'] == 3
        assert stats['findings'] == 1
        assert stats['fields_reset'] == 1
        assert get_session_findings() == [Finding("T", "leaky")]
