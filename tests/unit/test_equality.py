"""Tests for tripwire.equality module."""

import datetime as dt
import math
import re
from collections import OrderedDict
from dataclasses import dataclass

import pytest

from tripwire import deep_equal


@dataclass
class Point:
    x: int
    y: int


class Plain:
    def __init__(self, **attrs):
        self.__dict__.update(attrs)


class TestPrimitives:
    @pytest.mark.parametrize("value", [None, True, 0, 1.5, "text", b"bytes", 3j])
    def test_reflexive(self, value):
        assert deep_equal(value, value)
        assert deep_equal(value, value, True)

    def test_loose_numeric_string_coercion(self):
        assert deep_equal(1, "1")
        assert deep_equal("1.5", 1.5)
        assert not deep_equal(1, "one")

    def test_strict_requires_same_category(self):
        assert not deep_equal(1, "1", True)
        assert not deep_equal(True, 1, True)
        assert deep_equal(1, 1.0, True)

    def test_nan_equals_nan(self):
        assert deep_equal(math.nan, float("nan"))
        assert deep_equal(math.nan, float("nan"), True)

    def test_signed_zero_is_equal(self):
        assert deep_equal(0.0, -0.0)
        assert deep_equal(0.0, -0.0, True)


class TestContainers:
    def test_nested_mismatch(self):
        assert deep_equal({"a": {"b": 2}}, {"a": {"b": 2}})
        assert not deep_equal({"a": {"b": 2}}, {"a": {"b": 3}})

    def test_sequence_order_matters(self):
        assert deep_equal([1, 2, 3], [1, 2, 3])
        assert not deep_equal([1, 2, 3], [3, 2, 1])
        assert not deep_equal([1, 2], [1, 2, 3])

    def test_mapping_order_does_not_matter(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})

    def test_mapping_keys_compared_recursively(self):
        assert deep_equal({(1, 2): "x"}, {(1, 2): "x"})
        assert deep_equal({1: "x"}, {"1": "x"})
        assert not deep_equal({1: "x"}, {"1": "x"}, True)
        assert not deep_equal({1: "x"}, {True: "x"}, True)
        assert not deep_equal({0: "x", "k": 1}, {False: "x", "k": 1}, True)
        assert deep_equal({1: "x"}, {True: "x"})

    def test_list_and_tuple(self):
        assert deep_equal([1, 2], (1, 2))
        assert not deep_equal([1, 2], (1, 2), True)

    def test_strict_requires_same_container_type(self):
        assert not deep_equal({"a": 1}, OrderedDict(a=1), True)
        assert deep_equal({"a": 1}, OrderedDict(a=1))

    def test_sets_are_unordered(self):
        assert deep_equal({1, 2, 3}, {3, 2, 1})
        assert not deep_equal({1, 2}, {1, 3})
        assert deep_equal(frozenset({"a"}), {"a"})

    def test_category_mismatch(self):
        assert not deep_equal([1], {1})
        assert not deep_equal({"a": 1}, [("a", 1)])


class TestObjects:
    def test_dataclasses(self):
        assert deep_equal(Point(1, 2), Point(1, 2))
        assert not deep_equal(Point(1, 2), Point(2, 1))

    def test_plain_objects_compare_attributes(self):
        assert deep_equal(Plain(a=1, b=[1]), Plain(a=1, b=[1]))
        assert not deep_equal(Plain(a=1), Plain(a=2))

    def test_datetimes(self):
        assert deep_equal(dt.datetime(2024, 1, 1), dt.datetime(2024, 1, 1))
        assert not deep_equal(dt.date(2024, 1, 1), dt.date(2024, 1, 2))

    def test_patterns(self):
        assert deep_equal(re.compile("a+"), re.compile("a+"))
        assert not deep_equal(re.compile("a+"), re.compile("a+", re.I))

    def test_exceptions(self):
        assert deep_equal(ValueError("x"), ValueError("x"))
        assert not deep_equal(ValueError("x"), TypeError("x"))

    def test_callables_by_identity(self):
        def f():
            pass

        def g():
            pass

        assert deep_equal(f, f)
        assert not deep_equal(f, g)
        assert not deep_equal(int, float)


class TestCycles:
    def test_self_referential_value(self):
        a = {"name": "a"}
        a["self"] = a
        assert deep_equal(a, a)
        assert deep_equal(a, a, True)

    def test_structurally_identical_cycles(self):
        a = {"name": "x"}
        a["self"] = a
        b = {"name": "x"}
        b["self"] = b
        assert deep_equal(a, b)

    def test_cycles_with_different_content(self):
        a = {"name": "x"}
        a["self"] = a
        b = {"name": "y"}
        b["self"] = b
        assert not deep_equal(a, b)

    def test_list_cycles(self):
        a = [1]
        a.append(a)
        b = [1]
        b.append(b)
        assert deep_equal(a, b)


def test_never_raises():
    class Exploding:
        def __eq__(self, other):
            raise RuntimeError("no")

        __hash__ = object.__hash__

    assert deep_equal(Exploding(), Exploding()) is False
