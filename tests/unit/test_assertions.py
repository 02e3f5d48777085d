"""Tests for the function-style ``assert_`` namespace."""

import re

import pytest

from tripwire import (
    AssertClassDef,
    AssertionError,
    AssertionFailure,
    AssertionFatal,
    assert_,
    assert_config,
    create_assert,
)


def raise_key_error():
    raise KeyError("missing")


class TestBasics:
    def test_call(self):
        assert_(1)
        with pytest.raises(AssertionFailure, match="^expected False to be truthy$"):
            assert_(False)

    def test_call_with_message(self):
        with pytest.raises(AssertionFailure, match="^must be set: expected None to be truthy$"):
            assert_(None, "must be set")

    def test_ok(self):
        assert_.ok("x")
        assert_.is_ok([0])
        assert_.is_not_ok("")
        with pytest.raises(AssertionFailure, match='^not expected "x" to be truthy$'):
            assert_.is_not_ok("x")


class TestFail:
    def test_fail_with_actual_and_expected(self):
        with pytest.raises(AssertionFailure, match="^boom$") as excinfo:
            assert_.fail(1, 2, "boom", "==")
        error = excinfo.value
        assert error.actual == 1
        assert error.expected == 2
        assert error.operator == "=="

    def test_fail_with_message(self):
        with pytest.raises(AssertionFailure, match="^simple$"):
            assert_.fail("simple")

    def test_fail_default_message(self):
        with pytest.raises(AssertionFailure, match="^assertion failure$"):
            assert_.fail()

    def test_fail_uses_configured_default(self):
        assert_config.def_assert_msg = "custom default"
        with pytest.raises(AssertionFailure, match="^custom default$"):
            assert_.fail()

    def test_fatal(self):
        with pytest.raises(AssertionFatal, match="^fatal assertion failure$"):
            assert_.fatal()
        with pytest.raises(AssertionFatal, match="^stop now$"):
            assert_.fatal("stop now")


class TestEquality:
    def test_equal(self):
        assert_.equal(1, 1)
        assert_.equal("2", 2)
        assert_.not_equal(1, 2)
        with pytest.raises(AssertionFailure, match="^not expected 1 to equal 1$"):
            assert_.not_equal(1, 1)

    def test_strict_equal(self):
        marker = object()
        assert_.strict_equal(marker, marker)
        assert_.not_strict_equal("2", 2)
        with pytest.raises(AssertionFailure, match="strictly equal"):
            assert_.strict_equal([1], [1])

    def test_deep_equal(self):
        assert_.deep_equal({"a": {"b": 2}}, {"a": {"b": 2}})
        assert_.not_deep_equal([1], [2])
        with pytest.raises(AssertionFailure) as excinfo:
            assert_.deep_equal({"a": {"b": 2}}, {"a": {"b": 3}})
        message = str(excinfo.value)
        assert "{a:{b:2}}" in message
        assert "{a:{b:3}}" in message
        assert excinfo.value.operator == "deep_equal"

    def test_deep_strict_equal(self):
        assert_.deep_strict_equal([1, [2]], [1, [2]])
        with pytest.raises(AssertionFailure, match="deeply and strictly"):
            assert_.deep_strict_equal([1], ["1"])

    def test_message_prefix(self):
        with pytest.raises(AssertionFailure, match="^totals: expected 1 to equal 2$"):
            assert_.equal(1, 2, "totals")


class TestTypeChecks:
    def test_booleans_and_none(self):
        assert_.is_true(True)
        assert_.is_false(False)
        assert_.is_none(None)
        assert_.is_not_none(0)
        with pytest.raises(AssertionFailure, match="^expected 1 to be true$"):
            assert_.is_true(1)

    def test_empty(self):
        assert_.is_empty([])
        assert_.is_not_empty({"a": 1})
        with pytest.raises(AssertionFatal):
            assert_.is_empty(3)

    def test_types(self):
        assert_.is_string("s")
        assert_.is_not_string(1)
        assert_.is_number(2)
        assert_.is_list([])
        assert_.is_dict({})
        assert_.is_callable(print)
        assert_.is_instance_of(1, int)
        assert_.is_not_instance_of(1, str)


class TestCollections:
    def test_includes(self):
        assert_.includes("team", "ea")
        assert_.includes([1, 2], 2)
        assert_.not_includes([1, 2], 3)
        with pytest.raises(AssertionFailure, match=re.escape("not expected [1,2] to include 2")):
            assert_.not_includes([1, 2], 2)

    def test_match(self):
        assert_.match("v1.2", r"v\d")
        assert_.not_match("v1.2", r"^\d")

    def test_has_property(self):
        assert_.has_property({"a": 1}, "a")
        assert_.not_has_property({"a": 1}, "b")
        with pytest.raises(AssertionFailure, match="property"):
            assert_.has_property([1], 3)


class TestThrows:
    def test_throws(self):
        assert_.throws(raise_key_error)
        assert_.throws(raise_key_error, KeyError)
        assert_.throws(raise_key_error, (KeyError, ValueError), "missing")

    def test_throws_failure(self):
        with pytest.raises(AssertionFailure, match="^check: expected .* to raise an error$"):
            assert_.throws(lambda: None, msg="check")


class TestAliasesAndAdapters:
    def test_aliases(self):
        assert_.equals(1, 1)
        assert_.not_equals(1, 2)
        assert_.strict_equals("a", "a")
        assert_.deep_equals([1], [1])
        assert_.deep_strict_equals({"a": 1}, {"a": 1})
        with pytest.raises(AssertionFailure, match="^count: expected 1 to equal 2$"):
            assert_.equals(1, 2, "count")

    def test_message_keyword(self):
        with pytest.raises(AssertionFailure, match="^totals: expected 1 to equal 2$"):
            assert_.equal(1, 2, msg="totals")
        with pytest.raises(AssertionFailure, match="^flag: expected 0 to be truthy$"):
            assert_.is_ok(0, msg="flag")

    def test_nan(self):
        assert_.is_nan(float("nan"))
        assert_.is_not_nan(1.0)
        with pytest.raises(AssertionFailure, match="^expected 1 to be NaN$"):
            assert_.is_nan(1)
        with pytest.raises(AssertionFailure, match="^not expected .* to be NaN$"):
            assert_.is_not_nan(float("nan"))

    def test_deep_includes(self):
        assert_.deep_includes([{"a": 1}], {"a": 1})
        assert_.not_deep_includes([{"a": 1}], {"a": 2})
        with pytest.raises(AssertionFailure, match="include"):
            assert_.deep_includes([{"a": 1}], {"a": 2})

    def test_has_deep_property(self):
        assert_.has_deep_property({"a": [1, {"b": 2}]}, "a", [1, {"b": 2}])
        assert_.not_has_deep_property({"a": [1]}, "a", [2])
        with pytest.raises(AssertionFailure, match="deeply equal"):
            assert_.has_deep_property({"a": [1]}, "a", [2])

    def test_not_string(self):
        with pytest.raises(AssertionFailure, match='^not expected "s" to be a string$'):
            assert_.is_not_string("s")


class TestAddAssertFuncs:
    def test_scope_function(self):
        custom = create_assert()
        custom.add_assert_funcs(
            {"is_positive": lambda scope: scope.context.eval(scope.context.value > 0, "expected {value} to be positive")}
        )
        custom.is_positive(3)
        with pytest.raises(AssertionFailure, match="^expected -1 to be positive$"):
            custom.is_positive(-1)
        with pytest.raises(AssertionFailure, match="^score: expected -1 to be positive$"):
            custom.is_positive(-1, "score")

    def test_expression_and_steps(self):
        custom = create_assert()
        custom.add_assert_funcs({"is_text": "is_.string", "is_mapping": ["is_", "dict"]})
        custom.is_text("x")
        custom.is_mapping({})
        with pytest.raises(AssertionFailure, match="^expected 1 to be a string$"):
            custom.is_text(1)

    def test_alias(self):
        custom = create_assert()
        custom.add_assert_funcs({"same": AssertClassDef(alias="strict_equal")})
        custom.same("a", "a")
        with pytest.raises(AssertionFailure, match="strictly equal"):
            custom.same([1], [1])

    def test_class_def_arguments(self):
        custom = create_assert()
        custom.add_assert_funcs(
            {
                "is_between": AssertClassDef(
                    scope_fn=lambda scope, low, high: scope.context.eval(
                        low <= scope.context.value <= high, "expected {value} to be in range"
                    ),
                    n_args=3,
                )
            }
        )
        custom.is_between(2, 1, 3)
        with pytest.raises(AssertionFailure, match="^range: expected 5 to be in range$"):
            custom.is_between(5, 1, 3, "range")

    def test_does_not_change_other_instances(self):
        custom = create_assert()
        custom.add_assert_funcs({"is_text": "is_.string"})
        assert "is_text" in dir(custom)
        with pytest.raises(AttributeError):
            assert_.is_text("x")

    def test_replaces_builtin(self):
        custom = create_assert()
        custom.add_assert_funcs({"ok": "is_.string"})
        custom.ok("x")
        custom("x")
        with pytest.raises(AssertionFailure, match="to be a string"):
            custom(1)

    @pytest.mark.parametrize("name", ["", "_hidden", "add_assert_funcs"])
    def test_invalid_names(self, name):
        with pytest.raises(AssertionError, match="Invalid assert function name"):
            create_assert().add_assert_funcs({name: "is_.string"})

    @pytest.mark.parametrize("definition", [42, None, [], [1, 2], AssertClassDef()])
    def test_invalid_definitions(self, definition):
        with pytest.raises(AssertionError, match="Invalid definition for check"):
            create_assert().add_assert_funcs({"check": definition})

    def test_invalid_expression(self):
        with pytest.raises(AssertionError, match="Invalid expression"):
            create_assert().add_assert_funcs({"check": "is_..string"})
