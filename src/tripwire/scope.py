"""The assertion scope: dispatches chain functions against a scope context."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from tripwire.context import EXEC, ContextOverrides, MsgSource, ScopeContext
from tripwire.errors import AssertionError, AssertionFailure, AssertionFatal, _hide_internal_frames
from tripwire.instance import AssertInst, FuncDefs, ResultAdapter

_MISSING = object()


class AssertScope:
    """Wraps one :class:`ScopeContext` at a time for a chain of assertions.

    ``that`` is the current link of the chain. Functions run through
    :meth:`exec` receive the scope as their first argument and usually
    return ``scope.that`` to let the chain continue.
    """

    def __init__(self, context: ScopeContext) -> None:
        self._context = context
        self.that: Any = AssertInst(self)

    @property
    def context(self) -> ScopeContext:
        return self._context

    def new_scope(self, value: Any = _MISSING) -> AssertScope:
        """Create an independent scope on a child context (same value by default)."""
        if value is _MISSING:
            value = self._context.value
        return AssertScope(self._context.new(value))

    def new_inst(
        self,
        value: Any = _MISSING,
        overrides: ContextOverrides | Mapping[str, Any] | None = None,
    ) -> AssertInst:
        if value is _MISSING:
            value = self._context.value
        self.update_ctx(value, overrides)
        return AssertInst(self)

    def new_empty_inst(self, value: Any = _MISSING) -> AssertInst:
        if value is _MISSING:
            value = self._context.value
        self.update_ctx(value)
        return AssertInst(self, full=False)

    def update_ctx(
        self,
        value: Any,
        overrides: ContextOverrides | Mapping[str, Any] | None = None,
    ) -> AssertScope:
        """Replace the context with a child for ``value``, in place."""
        if value is not self._context.value or overrides:
            self._context = self._context.new(value, overrides)
        return self

    def exec(self, fn: Callable[..., Any], args: Sequence[Any] = (), func_name: str | None = None) -> Any:
        """Run ``fn(self, *args)`` within this scope and return its raw result."""
        __tracebackhide__ = _hide_internal_frames
        name = func_name or getattr(fn, "__name__", None) or "anonymous"
        context = self._context
        if context.opts.is_verbose:
            context.set_op(f"[[{name}]]")
        context.set(EXEC, name)
        context.push_stack_fn(AssertScope.exec)
        return fn(self, *args)

    def fail(self, *args: Any) -> None:
        """Raise :class:`AssertionFailure`, regardless of negation.

        Accepts either ``fail(msg=None, details=None)`` or
        ``fail(actual, expected, msg=None, operator=None)``. The second form
        records ``actual``, ``expected`` and ``operator`` as tokens first.
        """
        __tracebackhide__ = _hide_internal_frames
        context = self._context
        details = None
        if len(args) > 2:
            msg = args[2]
            for pos, token in ((0, "actual"), (1, "expected"), (3, "operator")):
                if pos < len(args):
                    context.set(token, args[pos])
        else:
            msg = args[0] if args else None
            details = args[1] if len(args) > 1 else None

        context.push_stack_fn(AssertScope.fail)
        raise AssertionFailure(
            context.get_message(msg or context.opts.def_assert_msg, skip_overrides=True),
            details if details is not None else context.get_details(),
            stack_start=None if context.opts.full_stack else list(context.stack_fns),
        )

    def fatal(self, msg: MsgSource = None, details: Any = None) -> None:
        """Raise :class:`AssertionFatal`, regardless of negation."""
        __tracebackhide__ = _hide_internal_frames
        context = self._context
        context.push_stack_fn(AssertScope.fatal)
        raise AssertionFatal(
            context.get_message(msg or context.opts.def_fatal_msg, skip_overrides=True),
            details if details is not None else context.get_details(),
            stack_start=None if context.opts.full_stack else list(context.stack_fns),
        )

    def create_operation(self, func_defs: FuncDefs, target: AssertInst | None = None) -> AssertInst:
        """Attach ``func_defs`` to a new empty instance, or to ``target``.

        Raises:
            AssertionError: If ``target`` is not an assertion instance, is bound
                to another scope, or a definition is invalid.
        """
        if target is None:
            target = self.new_empty_inst()
        elif not isinstance(target, AssertInst):
            raise AssertionError(f"Cannot add functions to {target!r}")
        elif target._scope is not self:
            raise AssertionError("Cannot reset the scope of an object that already has a scope")

        target._add_funcs(func_defs)
        return target


def get_assert_scope(value: Any) -> AssertScope | None:
    """Return the scope behind a scope, instance or result adapter, else None."""
    if isinstance(value, AssertScope):
        return value
    if isinstance(value, (AssertInst, ResultAdapter)):
        return value._scope
    return None


__all__ = ["AssertScope", "get_assert_scope"]
