#=============================================================================
# File        : tests/test_introspection.py
# Project     : FixtureGuard v1.0
# Component   : Introspection Test Suite
# Description : Field enumeration, structural emptiness and the
#               uninitialized slot guard
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import gc
import unittest
import weakref
from unittest import mock

import pytest

from fixtureguard.config import FixtureGuardConfig
from fixtureguard.detectors.introspection import (
    FieldState, framework_fields, is_empty, is_uninitialized, iter_fields
)
from fixtureguard.markers import AutoTeardown, FieldKind, TestConstant


class Payload:
    pass


def _dead_ref():
    payload = Payload()
    ref = weakref.ref(payload)
    del payload
    gc.collect()
    return ref


def _dead_proxy():
    payload = Payload()
    proxy = weakref.proxy(payload)
    del payload
    gc.collect()
    return proxy


class TestStructuralEmptiness:
    """None and dead weak references are empty; everything else is held."""

    def test_none_is_empty(self):
        assert is_empty(None)

    def test_dead_weak_reference_is_empty(self):
        assert is_empty(_dead_ref())

    def test_dead_weak_proxy_is_empty(self):
        assert is_empty(_dead_proxy())

    def test_live_weak_reference_is_held(self):
        payload = Payload()
        assert not is_empty(weakref.ref(payload))
        assert not is_empty(weakref.proxy(payload))

    @pytest.mark.parametrize("value", [0, "", [], {}, False, Payload()])
    def test_falsy_and_empty_containers_are_held(self, value):
        assert not is_empty(value)


class TestFieldEnumeration:
    """Discovery order, states and kinds."""

    def test_slots_then_dict_then_unwritten_markers(self):
        class Base:
            __slots__ = ("first", "__dict__")

        class Subject(Base):
            constant = TestConstant(3)
            released = AutoTeardown()

            def __init__(self):
                self.first = "slot"
                self.zeta = 1
                self.alpha = None

        fields = list(iter_fields(Subject()))

        assert [f.name for f in fields] == ["first", "zeta", "alpha", "constant", "released"]
        assert [f.state for f in fields] == [
            FieldState.PRESENT, FieldState.PRESENT, FieldState.EMPTY,
            FieldState.UNINITIALIZED, FieldState.UNINITIALIZED,
        ]
        assert fields[3].kind is FieldKind.TEST_CONSTANT
        assert fields[4].kind is FieldKind.AUTO_TEARDOWN

    def test_marker_fields_keep_assignment_order(self):
        class Subject:
            released = AutoTeardown()

            def __init__(self):
                self.before = 1
                self.released = "value"
                self.after = 2

        fields = list(iter_fields(Subject()))

        assert [f.name for f in fields] == ["before", "released", "after"]
        assert fields[1].kind is FieldKind.AUTO_TEARDOWN
        assert fields[1].marker is Subject.__dict__["released"]

    def test_unset_slots_are_uninitialized(self):
        class Slotted:
            __slots__ = ("set_slot", "unset_slot", "__private")

            def __init__(self):
                self.set_slot = 1

        subject = Slotted()
        states = {f.name: f.state for f in iter_fields(subject)}

        assert states == {
            "set_slot": FieldState.PRESENT,
            "unset_slot": FieldState.UNINITIALIZED,
            "_Slotted__private": FieldState.UNINITIALIZED,
        }
        assert is_uninitialized(subject, "unset_slot")
        assert not is_uninitialized(subject, "set_slot")

    def test_unnamed_dict_keys_are_skipped(self):
        subject = Payload()
        subject.named = "x"
        vars(subject)[1] = "anonymous"

        assert [f.name for f in iter_fields(subject)] == ["named"]

    def test_template_instance_has_only_uninitialized_fields(self):
        class Subject:
            __slots__ = ("handle", "__dict__")
            constant = TestConstant()
            released = AutoTeardown()

            def __init__(self):
                self.handle = object()
                self.constant = 1
                self.released = object()
                self.plain = object()

        template = Subject.__new__(Subject)

        fields = list(iter_fields(template))
        assert fields
        assert all(f.state is FieldState.UNINITIALIZED for f in fields)
        assert is_uninitialized(template, "handle")
        assert is_uninitialized(template, "plain")
        assert is_uninitialized(template, "released")


class TestFrameworkFields:
    """Attributes set by unittest.TestCase itself are never fields."""

    def test_testcase_internals_are_excluded(self):
        class Subject(unittest.TestCase):
            def setUp(self):
                self.client = object()

            def test_nothing(self):
                pass

        case = Subject("test_nothing")
        case.setUp()

        assert [f.name for f in iter_fields(case)] == ["client"]

    def test_probe_covers_testcase_init(self):
        owned = framework_fields(unittest.TestCase, ("unittest",))

        assert "_testMethodName" in owned
        assert "_cleanups" in owned

    def test_non_framework_classes_own_nothing(self):
        owned = framework_fields(Payload, ("unittest",))
        assert owned == frozenset()

    def test_framework_packages_are_configurable(self):
        class Subject(unittest.TestCase):
            def test_nothing(self):
                pass

        config = FixtureGuardConfig(framework_packages=("some_other_framework",))
        names = [f.name for f in iter_fields(Subject("test_nothing"), config)]

        assert "_testMethodName" in names

    def test_rebound_test_method_is_not_a_field(self):
        class Subject(unittest.TestCase):
            def test_nothing(self):
                pass

        case = Subject("test_nothing")
        # pytest's unittest runner pins the bound test method on the instance
        case.test_nothing = case.test_nothing
        case.callback = lambda: None

        assert [f.name for f in iter_fields(case)] == ["callback"]

    def test_mock_over_method_is_a_field(self):
        class Subject(unittest.TestCase):
            def fetch(self):
                return "live"

            def test_nothing(self):
                pass

        case = Subject("test_nothing")
        case.fetch = mock.Mock()
        case.other = mock.Mock()

        assert [f.name for f in iter_fields(case)] == ["fetch", "other"]

    def test_method_from_another_instance_is_a_field(self):
        class Subject(unittest.TestCase):
            def test_nothing(self):
                pass

        case, other = Subject("test_nothing"), Subject("test_nothing")
        case.test_nothing = other.test_nothing

        assert [f.name for f in iter_fields(case)] == ["test_nothing"]

    def test_is_uninitialized_agrees_with_field_states(self):
        class Subject:
            __slots__ = ("handle", "spare", "__dict__")
            released = AutoTeardown()

            def __init__(self):
                self.handle = object()
                self.plain = None

        for instance in (Subject(), Subject.__new__(Subject)):
            for info in iter_fields(instance):
                expected = info.state is FieldState.UNINITIALIZED
                assert is_uninitialized(instance, info.name) is expected, info.name
