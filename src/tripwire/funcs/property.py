"""Property checks.

A property is a mapping key, a sequence index or an attribute, in that
order of preference.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource
from tripwire.funcs.equal import deep_equal_func, equal_func
from tripwire.funcs.tokens import DEEP, PROPERTY
from tripwire.instance import AssertInst, FuncDef

if TYPE_CHECKING:
    from tripwire.scope import AssertScope

_MISSING = object()


def _is_index_target(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _get_property(target: Any, name: Any) -> Any:
    """Return the property value, or ``_MISSING`` when it does not exist."""
    if isinstance(target, Mapping):
        return target[name] if name in target else _MISSING
    if isinstance(name, int) and _is_index_target(target):
        return target[name] if -len(target) <= name < len(target) else _MISSING
    if isinstance(name, str) and target is not None:
        return getattr(target, name, _MISSING)
    return _MISSING


def property_result_op(scope: AssertScope, value: Any) -> AssertInst:
    """Instance returned by ``property()``.

    ``value`` and ``that`` move the chain onto the property value, ``and_``
    keeps asserting on the owner.
    """

    def _value_op(scope: AssertScope, eval_msg: MsgSource = None) -> AssertInst:
        scope.that = scope.new_inst(value)
        return scope.that

    def _and_op(scope: AssertScope, eval_msg: MsgSource = None) -> None:
        return None

    return scope.create_operation(
        {
            "and_": FuncDef(prop_fn=_and_op),
            "value": FuncDef(prop_fn=_value_op),
            "that": FuncDef(prop_fn=_value_op),
        },
        scope.new_inst(),
    )


def has_property_func(
    scope: AssertScope,
    name: Any,
    value: Any = _MISSING,
    eval_msg: MsgSource = None,
) -> AssertInst:
    """Assert the value has property ``name``, optionally equal to ``value``.

    Under ``deep`` the property value is compared with deep equality.
    """
    context = scope.context
    context.set(PROPERTY, name)
    if not isinstance(name, (str, int)) or isinstance(name, bool):
        context.fatal("expected {property} to be a string or an int")

    prop_value = _get_property(context.value, name)
    exists = prop_value is not _MISSING
    if value is not _MISSING and exists:
        equal_fn = deep_equal_func if context.get(DEEP) else equal_func
        scope.new_scope(prop_value).exec(equal_fn, (value, eval_msg))
    else:
        context.eval(exists, eval_msg or "expected {value} to have a {property} property")

    return property_result_op(scope, None if prop_value is _MISSING else prop_value)
