"""Chainable assertion instances and the function tables behind them.

Every attribute read on an :class:`AssertInst` resolves a :class:`FuncDef`:

- a ``prop_fn`` runs immediately and its result becomes the next link in
  the chain (``expect(x).to.not_``)
- a ``scope_fn`` is returned as a callable that runs inside the scope when
  called (``expect(x).equal(1)``)

Lookups check the instance's own functions first (added through
``AssertScope.create_operation``), then user functions registered with
:func:`add_assert_funcs`, then the built-in table.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource
from tripwire.errors import AssertionError, _hide_internal_frames

if TYPE_CHECKING:
    from tripwire.scope import AssertScope

logger = logging.getLogger(__name__)

# Imported on first lookup; each registers its functions as built-ins
_BUILTIN_MODULES = ("tripwire.ops", "tripwire.funcs")

_builtin_funcs: dict[str, FuncDef] = {}
_user_funcs: dict[str, FuncDef] = {}
_builtins_loaded = False


@dataclass(frozen=True, slots=True)
class FuncDef:
    """Definition of a chain function.

    Exactly one of ``scope_fn`` and ``prop_fn`` must be set.

    Attributes
    ----------
    scope_fn
        ``scope_fn(scope, *args)``, exposed as a callable.
    prop_fn
        ``prop_fn(scope, eval_msg)``, run when the attribute is read.
    eval_msg
        Message handed to ``prop_fn``.
    """

    scope_fn: Callable[..., Any] | None = None
    prop_fn: Callable[..., Any] | None = None
    eval_msg: MsgSource = None


FuncDefs = Mapping[str, "FuncDef | Callable[..., Any]"]


def _is_banned_name(name: str) -> bool:
    return not name or name.startswith("_")


def _validate_func_defs(funcs: FuncDefs) -> dict[str, FuncDef]:
    validated: dict[str, FuncDef] = {}
    for name, func_def in funcs.items():
        if not isinstance(func_def, FuncDef) and callable(func_def):
            func_def = FuncDef(scope_fn=func_def)

        if not isinstance(func_def, FuncDef):
            msg = f'Invalid definition for "{name}" : {func_def!r}'
            logger.warning(msg)
            raise AssertionError(msg)
        if func_def.scope_fn is not None and func_def.prop_fn is not None:
            msg = f'Invalid function definition for "{name}" : {func_def!r}'
            logger.warning(msg)
            raise AssertionError(msg)
        if func_def.scope_fn is None and func_def.prop_fn is None:
            msg = f'Invalid definition for "{name}" : {func_def!r}'
            logger.warning(msg)
            raise AssertionError(msg)
        if not callable(func_def.scope_fn or func_def.prop_fn):
            msg = f'Invalid operation definition for "{name}" : {func_def!r}'
            logger.warning(msg)
            raise AssertionError(msg)
        if _is_banned_name(name):
            msg = f"Invalid operation name: {name}"
            logger.warning(msg)
            raise AssertionError(msg)
        validated[name] = func_def
    return validated


def register_builtin_funcs(funcs: FuncDefs) -> None:
    """Register built-in chain functions (kept by :func:`clear_assert_funcs`)."""
    _builtin_funcs.update(_validate_func_defs(funcs))


def add_assert_funcs(funcs: FuncDefs) -> None:
    """Add user functions to every full assertion instance.

    Args:
        funcs: Mapping of name to :class:`FuncDef`, or to a plain callable
            which is used as the ``scope_fn``.

    Raises:
        AssertionError: If a definition or name is invalid.
    """
    _user_funcs.update(_validate_func_defs(funcs))


def clear_assert_funcs() -> None:
    """Remove all user functions, keeping the built-ins."""
    _user_funcs.clear()


def _load_builtins() -> None:
    global _builtins_loaded
    if not _builtins_loaded:
        _builtins_loaded = True
        for module in _BUILTIN_MODULES:
            importlib.import_module(module)


def _lookup_shared(name: str) -> FuncDef | None:
    _load_builtins()
    return _user_funcs.get(name) or _builtin_funcs.get(name)


class AssertInst:
    """A link in an assertion chain, bound to an :class:`AssertScope`.

    A full instance exposes the user and built-in functions. An empty
    instance only exposes functions added to it directly.
    """

    __slots__ = ("_scope", "_funcs", "_full")

    def __init__(self, scope: AssertScope, full: bool = True) -> None:
        self._scope = scope
        self._funcs: dict[str, FuncDef] = {}
        self._full = full

    def _add_funcs(self, funcs: FuncDefs) -> None:
        self._funcs.update(_validate_func_defs(funcs))

    def _lookup(self, name: str) -> FuncDef | None:
        func_def = self._funcs.get(name)
        if func_def is None and self._full:
            func_def = _lookup_shared(name)
        return func_def

    def __getattr__(self, name: str) -> Any:
        __tracebackhide__ = _hide_internal_frames
        if _is_banned_name(name):
            raise AttributeError(name)
        func_def = self._lookup(name)
        if func_def is None:
            raise AttributeError(f"{type(self).__name__!r} has no assertion function {name!r}")
        return _invoke_func_def(self._scope, name, func_def)

    def __dir__(self) -> list[str]:
        names = set(self._funcs)
        if self._full:
            _load_builtins()
            names.update(_builtin_funcs)
            names.update(_user_funcs)
        return sorted(names | {"fail", "fatal"})

    def fail(self, *args: Any) -> None:
        __tracebackhide__ = _hide_internal_frames
        self._scope.fail(*args)

    def fatal(self, msg: MsgSource = None, details: Any = None) -> None:
        __tracebackhide__ = _hide_internal_frames
        self._scope.fatal(msg, details)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} value={self._scope.context.value!r}>"


class ResultAdapter:
    """Wraps a function result so it can continue the chain.

    A callable target re-enters the scope when called. Public keys of the
    target (dict keys or attributes) are readable lazily, each read is
    recorded in the operation path and its value is wrapped in turn.
    """

    __slots__ = ("_scope", "_target", "_func_name", "_keys")

    def __init__(self, scope: AssertScope, target: Any, func_name: str | None = None) -> None:
        self._scope = scope
        self._target = target
        self._func_name = func_name
        self._keys = tuple(key for key in _public_keys(target) if not _is_banned_name(key))

    def __call__(self, *args: Any) -> Any:
        __tracebackhide__ = _hide_internal_frames
        if not callable(self._target):
            raise TypeError(f"{self._target!r} is not callable")
        scope = self._scope
        scope.context.push_stack_fn(ResultAdapter.__call__)
        result = scope.exec(self._target, args, self._func_name)
        if result is None:
            result = scope.new_inst()
        return handle_result(result, scope, self._func_name)

    def __getattr__(self, name: str) -> Any:
        __tracebackhide__ = _hide_internal_frames
        if name not in self._keys:
            raise AttributeError(name)
        scope = self._scope
        scope.context.set_op(name)
        target = self._target
        value = target[name] if isinstance(target, Mapping) else getattr(target, name)
        if value is None:
            value = scope.new_inst()
        return handle_result(value, scope, name)

    def __dir__(self) -> list[str]:
        return list(self._keys)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} for {self._func_name or type(self._target).__name__}>"


def _public_keys(target: Any) -> Iterator[str]:
    if isinstance(target, Mapping):
        yield from (key for key in target if isinstance(key, str))
    elif hasattr(target, "__dict__"):
        yield from vars(target)


def handle_result(result: Any, scope: AssertScope, func_name: str | None = None) -> Any:
    """Turn a function result into the next link of the chain."""
    if result is None:
        scope.that = scope.new_inst()
        return scope.that

    scope.that = result
    if isinstance(result, (AssertInst, ResultAdapter)):
        return result

    name = func_name
    if name is None and callable(result):
        name = getattr(result, "__name__", None)
    adapter = ResultAdapter(scope, result, name or "anonymous")
    scope.that = adapter
    return adapter


def _invoke_func_def(scope: AssertScope, name: str, func_def: FuncDef) -> Any:
    __tracebackhide__ = _hide_internal_frames
    is_call = func_def.scope_fn is not None
    scope.context.set_op(name + "()" if is_call else name)
    if func_def.prop_fn is not None:
        return handle_result(func_def.prop_fn(scope, func_def.eval_msg), scope, name)
    return handle_result(func_def.scope_fn, scope, name)


__all__ = [
    "AssertInst",
    "FuncDef",
    "FuncDefs",
    "ResultAdapter",
    "add_assert_funcs",
    "clear_assert_funcs",
    "handle_result",
    "register_builtin_funcs",
]
