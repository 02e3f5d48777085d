from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource
from tripwire.equality import deep_equal
from tripwire.funcs.tokens import EXPECTED, OPERATOR

if TYPE_CHECKING:
    from tripwire.scope import AssertScope

_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)


def loose_equal(value: Any, expected: Any) -> bool:
    """``==`` where numeric strings match the number they spell."""
    if isinstance(value, _PRIMITIVE_TYPES) and isinstance(expected, _PRIMITIVE_TYPES):
        return deep_equal(value, expected)
    try:
        return value is expected or bool(value == expected)
    except Exception:
        return False


def strict_equal(value: Any, expected: Any) -> bool:
    """Same primitive category and value, or the very same object."""
    if isinstance(value, _PRIMITIVE_TYPES) and isinstance(expected, _PRIMITIVE_TYPES):
        return deep_equal(value, expected, strict=True)
    return value is expected


def equal_func(scope: AssertScope, expected: Any, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.set(EXPECTED, expected)
    context.set(OPERATOR, "==")
    context.eval(loose_equal(context.value, expected), eval_msg or "expected {value} to equal {expected}")


def strict_equal_func(scope: AssertScope, expected: Any, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.set(EXPECTED, expected)
    context.set(OPERATOR, "is")
    context.eval(strict_equal(context.value, expected), eval_msg or "expected {value} to strictly equal {expected}")


def deep_equal_func(scope: AssertScope, expected: Any, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.set(EXPECTED, expected)
    context.set(OPERATOR, "deep_equal")
    context.eval(deep_equal(context.value, expected), eval_msg or "expected {value} to deeply equal {expected}")


def deep_strict_equal_func(scope: AssertScope, expected: Any, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.set(EXPECTED, expected)
    context.set(OPERATOR, "deep_strict_equal")
    context.eval(
        deep_equal(context.value, expected, strict=True),
        eval_msg or "expected {value} to deeply and strictly equal {expected}",
    )
