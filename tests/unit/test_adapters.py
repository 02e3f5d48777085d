"""Tests for tripwire.adapters module."""

import pytest

from tripwire import (
    AssertionError,
    AssertionFailure,
    AssertScope,
    assert_config,
    create_eval_adapter,
    create_expr_adapter,
    create_not_adapter,
)
from tripwire.context import OP_PATH, create_context
from tripwire.funcs import equal_func


def _scope(value):
    return AssertScope(create_context(value))


class TestExprAdapter:
    def test_runs_dotted_chain(self):
        is_string = create_expr_adapter("is_.string")
        is_string(_scope("x"))
        with pytest.raises(AssertionFailure, match="^expected 1 to be a string$"):
            is_string(_scope(1))

    def test_accepts_step_list(self):
        create_expr_adapter(["not_", "is_", "string"])(_scope(1))

    def test_passes_call_arguments_to_last_step(self):
        deep_equal = create_expr_adapter("deep.equal")
        deep_equal(_scope({"a": [1]}), {"a": [1]})
        with pytest.raises(AssertionFailure, match="deeply equal"):
            deep_equal(_scope({"a": [1]}), {"a": [2]})

    def test_runs_scope_fn_after_steps(self):
        not_equal = create_expr_adapter("not_", equal_func)
        not_equal(_scope(1), 2)
        with pytest.raises(AssertionFailure, match="^not expected 1 to equal 1$"):
            not_equal(_scope(1), 1)

    def test_step_arguments(self):
        scope = _scope({"a": 1})
        scope.context.set("key", "a")
        create_expr_adapter("have.property(key)")(scope)
        create_expr_adapter("have.property({a})")(_scope({"a": 1}))
        create_expr_adapter("have.property({1}, {0})")(_scope({"a": 1}), 1, "a")
        with pytest.raises(AssertionFailure, match="^expected 2 to equal 1$"):
            create_expr_adapter("have.property({1},{0})")(_scope({"a": 2}), 1, "a")

    def test_calls_plain_methods(self):
        with pytest.raises(AssertionFailure, match="^boom$"):
            create_expr_adapter("fail")(_scope(None), "boom")

    def test_unknown_step(self):
        with pytest.raises(AssertionError, match="Invalid step: nope"):
            create_expr_adapter("to.nope")(_scope(1))

    def test_arguments_to_non_function(self):
        with pytest.raises(AssertionError, match='expected a function for "to"'):
            create_expr_adapter("to({0})")(_scope(1), 1)

    @pytest.mark.parametrize("expr", ["a(b(c))", "a(b", "a(b c)", "a({b{})", "", "to..equal", []])
    def test_malformed_expressions(self, expr):
        with pytest.raises(AssertionError, match="Invalid expression"):
            create_expr_adapter(expr)

    def test_verbose_records_expression(self):
        assert_config.is_verbose = True
        scope = _scope(1)
        create_expr_adapter("to.be.ok")(scope)
        assert '[["to.be.ok"]]' in scope.context.get(OP_PATH)


class TestNotAdapter:
    def test_negates_scope_fn(self):
        not_equal = create_not_adapter(equal_func)
        assert not_equal.__name__ == "not_equal_func"
        not_equal(_scope(1), 2)
        with pytest.raises(AssertionFailure, match="^not expected 1 to equal 1$"):
            not_equal(_scope(1), 1)

    def test_double_negation(self):
        create_not_adapter(create_not_adapter(equal_func))(_scope(1), 1)


class TestEvalAdapter:
    def test_evaluates_with_actual_first(self):
        above = create_eval_adapter(lambda actual, limit: actual > limit, "expected {value} to be above the limit")
        scope = _scope(5)
        assert above(scope, 3) is scope.that
        with pytest.raises(AssertionFailure, match="^expected 1 to be above the limit$"):
            above(_scope(1), 3)

    def test_name(self):
        assert create_eval_adapter(lambda actual: True, func_name="always").__name__ == "always"

    def test_negated(self):
        positive = create_eval_adapter(lambda actual: actual > 0, "expected {value} to be positive")
        create_not_adapter(positive)(_scope(-1))
        with pytest.raises(AssertionFailure, match="^not expected 1 to be positive$"):
            create_not_adapter(positive)(_scope(1))
