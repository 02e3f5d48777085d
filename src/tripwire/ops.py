"""Chain operations: attributes that shape the chain rather than test a value.

``to``, ``be``, ``is_`` and friends only make the chain read naturally.
``not_`` negates everything after it, ``deep`` and ``strictly`` switch the
comparison mode of the functions they expose.
"""

from __future__ import annotations

from typing import Any

from tripwire.context import ContextOverrides, MsgSource
from tripwire.funcs import (
    deep_equal_func,
    deep_strict_equal_func,
    has_property_func,
    include_func,
    strict_equal_func,
    strict_false_func,
    strict_true_func,
)
from tripwire.funcs.tokens import DEEP
from tripwire.instance import FuncDef, register_builtin_funcs
from tripwire.scope import AssertScope


def _not_eval(parent: Any, expr: Any, eval_msg: MsgSource = None, caused_by: BaseException | None = None) -> Any:
    return parent.eval(not expr, eval_msg, caused_by)


def _not_eval_message(parent: Any, eval_msg: MsgSource = None, skip_overrides: bool = False) -> str:
    return "not " + parent.get_eval_message(eval_msg)


NOT_OVERRIDES = ContextOverrides(eval=_not_eval, get_eval_message=_not_eval_message, negate=True)


def noop_op(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    return None


def not_op(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    return scope.update_ctx(scope.context.value, NOT_OVERRIDES).that


def strictly_op(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    return scope.create_operation(
        {
            "not_": FuncDef(prop_fn=not_op),
            "equal": FuncDef(scope_fn=strict_equal_func),
            "equals": FuncDef(scope_fn=strict_equal_func),
            "eq": FuncDef(scope_fn=strict_equal_func),
            "true": FuncDef(scope_fn=strict_true_func),
            "false": FuncDef(scope_fn=strict_false_func),
        }
    )


def deep_strictly_op(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    return scope.create_operation(
        {
            "not_": FuncDef(prop_fn=not_op),
            "equal": FuncDef(scope_fn=deep_strict_equal_func),
            "equals": FuncDef(scope_fn=deep_strict_equal_func),
            "eq": FuncDef(scope_fn=deep_strict_equal_func),
            "true": FuncDef(scope_fn=strict_true_func),
            "false": FuncDef(scope_fn=strict_false_func),
        }
    )


def deep_op(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    scope.context.set(DEEP, True)
    return scope.create_operation(
        {
            "not_": FuncDef(prop_fn=not_op),
            "strictly": FuncDef(prop_fn=deep_strictly_op),
            "equal": FuncDef(scope_fn=deep_equal_func),
            "equals": FuncDef(scope_fn=deep_equal_func),
            "eq": FuncDef(scope_fn=deep_equal_func),
            "include": FuncDef(scope_fn=include_func),
            "includes": FuncDef(scope_fn=include_func),
            "contain": FuncDef(scope_fn=include_func),
            "contains": FuncDef(scope_fn=include_func),
            "property": FuncDef(scope_fn=has_property_func),
        }
    )


def has_op(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    return scope.create_operation(
        {
            "not_": FuncDef(prop_fn=not_op),
            "deep": FuncDef(prop_fn=deep_op),
            "property": FuncDef(scope_fn=has_property_func),
            "include": FuncDef(scope_fn=include_func),
        }
    )


CORE_OPS: dict[str, FuncDef] = {
    "to": FuncDef(prop_fn=noop_op),
    "be": FuncDef(prop_fn=noop_op),
    "been": FuncDef(prop_fn=noop_op),
    "is_": FuncDef(prop_fn=noop_op),
    "a": FuncDef(prop_fn=noop_op),
    "an": FuncDef(prop_fn=noop_op),
    "and_": FuncDef(prop_fn=noop_op),
    "does": FuncDef(prop_fn=noop_op),
    "not_": FuncDef(prop_fn=not_op),
    "deep": FuncDef(prop_fn=deep_op),
    "strictly": FuncDef(prop_fn=strictly_op),
    "has": FuncDef(prop_fn=has_op),
    "have": FuncDef(prop_fn=has_op),
}

register_builtin_funcs(CORE_OPS)

