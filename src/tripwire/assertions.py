"""Function-style assertions: ``assert_.equal(actual, expected)``.

Every ``assert_`` function is generated from a definition table. Each call
starts a new chain on its first argument (the actual value) and runs the
definition's scope function with the remaining arguments. When more
arguments are passed than the function takes, the extra argument is the init
message, prefixed to the failure message. It can also be passed as ``msg=``.

Definitions can be added with :meth:`Assert.add_assert_funcs`::

    assert_.add_assert_funcs({
        "is_positive": lambda scope: scope.context.eval(scope.context.value > 0, "expected {value} to be positive"),
        "is_text": "is_.string",
        "is_mapping": ["is_", "dict"],
        "is_plus": AssertClassDef(alias="is_positive"),
    })
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from tripwire.adapters import ScopeFn, create_eval_adapter, create_expr_adapter, create_not_adapter
from tripwire.context import MsgSource, create_context
from tripwire.errors import AssertionError, _hide_internal_frames
from tripwire.funcs import (
    callable_func,
    deep_equal_func,
    deep_strict_equal_func,
    dict_func,
    empty_func,
    equal_func,
    false_func,
    has_property_func,
    include_func,
    instance_of_func,
    list_func,
    match_func,
    none_func,
    number_func,
    strict_equal_func,
    throws_func,
    true_func,
)
from tripwire.scope import AssertScope

logger = logging.getLogger(__name__)

_NO_MSG = object()


@dataclass(frozen=True, slots=True)
class AssertClassDef:
    """Definition of an ``assert_`` function.

    Attributes
    ----------
    alias
        Name of another ``assert_`` function to call instead.
    scope_fn
        ``scope_fn(scope, *args)`` run on the new chain.
    n_args
        Number of arguments the function takes, including the actual value.
        ``0`` means no actual value; every argument goes to ``scope_fn``.
    m_idx
        Position of the optional init message. Negative positions count from
        the end and only apply when more than ``n_args`` arguments are
        passed. ``None`` disables message extraction.
    """

    alias: str | None = None
    scope_fn: ScopeFn | None = None
    n_args: int = 1
    m_idx: int | None = -1


AssertClassDefSource = Union[AssertClassDef, ScopeFn, str, Sequence[str]]


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


# Built-in definitions, installed on every Assert
ASSERT_FUNCS: dict[str, AssertClassDefSource] = {
    # No actual value is passed to these
    "fail": AssertClassDef(scope_fn=create_expr_adapter("fail"), n_args=0, m_idx=None),
    "fatal": AssertClassDef(scope_fn=create_expr_adapter("fatal"), n_args=0, m_idx=None),
    "ok": "ok",
    "is_ok": AssertClassDef(alias="ok"),
    "is_not_ok": "not_.ok",
    "equal": AssertClassDef(scope_fn=equal_func, n_args=2),
    "equals": AssertClassDef(alias="equal"),
    "not_equal": AssertClassDef(scope_fn=create_not_adapter(equal_func), n_args=2),
    "not_equals": AssertClassDef(alias="not_equal"),
    "strict_equal": AssertClassDef(scope_fn=strict_equal_func, n_args=2),
    "strict_equals": AssertClassDef(alias="strict_equal"),
    "not_strict_equal": AssertClassDef(scope_fn=create_not_adapter(strict_equal_func), n_args=2),
    "deep_equal": AssertClassDef(scope_fn=deep_equal_func, n_args=2),
    "deep_equals": AssertClassDef(alias="deep_equal"),
    "not_deep_equal": AssertClassDef(scope_fn=create_not_adapter(deep_equal_func), n_args=2),
    "not_deep_equals": AssertClassDef(alias="not_deep_equal"),
    "deep_strict_equal": AssertClassDef(scope_fn=deep_strict_equal_func, n_args=2),
    "deep_strict_equals": AssertClassDef(alias="deep_strict_equal"),
    "is_true": true_func,
    "is_not_true": create_not_adapter(true_func),
    "is_false": false_func,
    "is_not_false": create_not_adapter(false_func),
    "is_none": none_func,
    "is_not_none": create_not_adapter(none_func),
    "is_empty": empty_func,
    "is_not_empty": create_not_adapter(empty_func),
    "is_string": "is_.string",
    "is_not_string": "not_.is_.string",
    "is_number": number_func,
    "is_not_number": create_not_adapter(number_func),
    "is_list": list_func,
    "is_not_list": create_not_adapter(list_func),
    "is_dict": dict_func,
    "is_not_dict": create_not_adapter(dict_func),
    "is_callable": callable_func,
    "is_not_callable": create_not_adapter(callable_func),
    "is_nan": create_eval_adapter(_is_nan, "expected {value} to be NaN", "is_nan"),
    "is_not_nan": create_not_adapter(create_eval_adapter(_is_nan, "expected {value} to be NaN", "is_nan")),
    "is_instance_of": AssertClassDef(scope_fn=instance_of_func, n_args=2),
    "is_not_instance_of": AssertClassDef(scope_fn=create_not_adapter(instance_of_func), n_args=2),
    "includes": AssertClassDef(scope_fn=include_func, n_args=2),
    "not_includes": AssertClassDef(scope_fn=create_expr_adapter("not_", include_func), n_args=2),
    "deep_includes": AssertClassDef(scope_fn=create_expr_adapter("deep.include"), n_args=2),
    "not_deep_includes": AssertClassDef(scope_fn=create_expr_adapter("not_.deep.include"), n_args=2),
    "match": AssertClassDef(scope_fn=match_func, n_args=2),
    "not_match": AssertClassDef(scope_fn=create_not_adapter(match_func), n_args=2),
    "has_property": AssertClassDef(scope_fn=has_property_func, n_args=3),
    "not_has_property": AssertClassDef(scope_fn=create_not_adapter(has_property_func), n_args=3),
    "has_deep_property": AssertClassDef(scope_fn=create_expr_adapter("has.deep.property"), n_args=3),
    "not_has_deep_property": AssertClassDef(scope_fn=create_expr_adapter("not_.has.deep.property"), n_args=3),
    "throws": AssertClassDef(scope_fn=throws_func, n_args=3),
}


def _to_class_def(name: str, source: AssertClassDefSource) -> AssertClassDef:
    if isinstance(source, AssertClassDef):
        class_def = source
    elif isinstance(source, str):
        class_def = AssertClassDef(scope_fn=create_expr_adapter(source))
    elif isinstance(source, Sequence) and source and all(isinstance(step, str) for step in source):
        class_def = AssertClassDef(scope_fn=create_expr_adapter(source))
    elif callable(source):
        class_def = AssertClassDef(scope_fn=source)
    else:
        class_def = None

    if class_def is None or (class_def.alias is None and not callable(class_def.scope_fn)):
        msg = f"Invalid definition for {name}: {source!r}"
        logger.warning(msg)
        raise AssertionError(msg)
    return class_def


def _extract_init_msg(args: list[Any], n_args: int, m_idx: int | None) -> MsgSource:
    if m_idx is None:
        return None
    if m_idx >= 0:
        return args.pop(m_idx) if len(args) > m_idx else None

    idx = len(args) + m_idx
    if 0 <= idx < len(args) and 0 <= n_args < len(args):
        return args.pop(idx)
    return None


class Assert:
    """Callable assertion namespace; see the module docstring.

    ``assert_(expr, msg=None)`` fails when ``expr`` is falsy.
    """

    def __init__(self) -> None:
        self._funcs: dict[str, Callable[..., Any]] = {}
        self.add_assert_funcs(ASSERT_FUNCS)

    def __call__(self, expr: Any, msg: MsgSource = None) -> Any:
        __tracebackhide__ = _hide_internal_frames
        return self.ok(expr, msg=msg)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        funcs = self.__dict__.get("_funcs")
        if funcs is None or name not in funcs:
            raise AttributeError(f"{type(self).__name__!r} has no assertion function {name!r}")
        return funcs[name]

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._funcs))

    def add_assert_funcs(self, funcs: Mapping[str, AssertClassDefSource]) -> None:
        """Add functions to this namespace.

        Args:
            funcs: Mapping of name to definition. A definition is an
                :class:`AssertClassDef`, a scope function, a chain expression
                string (``"is_.string"``) or a list of chain steps
                (``["is_", "string"]``).

        Raises:
            AssertionError: If a definition or name is invalid.
        """
        for name, source in funcs.items():
            if not name or name.startswith("_") or hasattr(type(self), name):
                msg = f"Invalid assert function name: {name}"
                logger.warning(msg)
                raise AssertionError(msg)
            class_def = _to_class_def(name, source)
            if class_def.alias is not None:
                self._funcs[name] = self._create_alias_func(class_def.alias)
            else:
                self._funcs[name] = self._create_proxy_func(name, class_def)

    def _create_alias_func(self, alias: str) -> Callable[..., Any]:
        def _alias_fn(*args: Any, msg: Any = _NO_MSG) -> Any:
            __tracebackhide__ = _hide_internal_frames
            target = getattr(self, alias)
            if msg is _NO_MSG:
                return target(*args)
            return target(*args, msg=msg)

        _alias_fn.__name__ = alias
        return _alias_fn

    def _create_proxy_func(self, name: str, class_def: AssertClassDef) -> Callable[..., Any]:
        scope_fn = class_def.scope_fn
        n_args = class_def.n_args
        m_idx = class_def.m_idx

        def _assert_fn(*args: Any, msg: Any = _NO_MSG) -> Any:
            __tracebackhide__ = _hide_internal_frames
            org_args = args
            scope_args = list(args)
            if msg is _NO_MSG:
                init_msg = _extract_init_msg(scope_args, n_args, m_idx)
            else:
                init_msg = msg

            actual = None
            if scope_args and n_args > 0:
                actual = scope_args.pop(0)

            context = create_context(actual, init_msg, _assert_fn, org_args)
            context.set_op(name + "()")
            scope = AssertScope(context)
            return scope.exec(scope_fn, tuple(scope_args), getattr(scope_fn, "__name__", None))

        _assert_fn.__name__ = name
        return _assert_fn


def create_assert() -> Assert:
    """Return a new :class:`Assert` with only the built-in functions."""
    return Assert()


assert_ = create_assert()


__all__ = ["ASSERT_FUNCS", "Assert", "AssertClassDef", "assert_", "create_assert"]
