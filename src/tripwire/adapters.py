"""Adapters that turn chain expressions and plain predicates into scope functions.

A scope function is called as ``fn(scope, *args)``. The adapters let the
function-style :class:`~tripwire.assertions.Assert` reuse the fluent chain:

- :func:`create_expr_adapter` walks a dotted chain expression such as
  ``"not_.is_.string"`` on ``scope.that``.
- :func:`create_not_adapter` negates the scope, then runs a scope function.
- :func:`create_eval_adapter` evaluates ``eval_fn(actual, *args)``.

Expression steps may take arguments: ``"property(name)"``. Each argument is
``{N}`` for the Nth call argument, ``{text}`` for the literal string ``text``,
or a bare name that is read from the context tokens.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource
from tripwire.errors import AssertionError, _hide_internal_frames
from tripwire.instance import AssertInst, ResultAdapter
from tripwire.ops import not_op

if TYPE_CHECKING:
    from tripwire.scope import AssertScope

ScopeFn = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class _StepArg:
    named: str | None = None
    idx: int | None = None
    value: Any = None


@dataclass(frozen=True, slots=True)
class _Step:
    name: str
    args: tuple[_StepArg, ...] | None = None


def _expr_text(expr: str | Sequence[str]) -> str:
    return expr if isinstance(expr, str) else ".".join(expr)


def _invalid_expr(expr: str | Sequence[str]) -> AssertionError:
    return AssertionError(f"Invalid expression: {_expr_text(expr)}", stack_start=create_expr_adapter)


def _parse_step_arg(arg: str, expr: str | Sequence[str]) -> _StepArg:
    arg = arg.strip()
    if arg.startswith("{") and arg.endswith("}"):
        value = arg[1:-1]
        if "{" in value or "}" in value:
            raise _invalid_expr(expr)
        if value.isdigit():
            return _StepArg(idx=int(value))
        return _StepArg(value=value)

    if not arg or " " in arg:
        raise _invalid_expr(expr)
    return _StepArg(named=arg)


def _parse_step(step: str, expr: str | Sequence[str]) -> _Step:
    parts = step.split("(")
    if len(parts) > 2 or not parts[0]:
        raise _invalid_expr(expr)
    if len(parts) == 1:
        return _Step(parts[0])

    name, arg_text = parts
    if not arg_text.endswith(")") or ")" in arg_text[:-1]:
        raise _invalid_expr(expr)
    arg_text = arg_text[:-1]
    args = tuple(_parse_step_arg(arg, expr) for arg in arg_text.split(",")) if arg_text else ()
    return _Step(name, args)


def _parse_expr(expr: str | Sequence[str]) -> list[_Step]:
    names = expr.split(".") if isinstance(expr, str) else list(expr)
    if not names or not all(isinstance(name, str) for name in names):
        raise _invalid_expr(expr)
    return [_parse_step(name, expr) for name in names]


def _step_args(scope: AssertScope, step: _Step, call_args: tuple[Any, ...]) -> list[Any]:
    values = []
    for arg in step.args or ():
        if arg.named is not None:
            values.append(scope.context.get(arg.named))
        elif arg.idx is not None:
            values.append(call_args[arg.idx])
        else:
            values.append(arg.value)
    return values


def _call_result(scope: AssertScope, result: Any, args: Sequence[Any]) -> Any:
    __tracebackhide__ = _hide_internal_frames
    if isinstance(result, ResultAdapter):
        return result(*args)
    if isinstance(result, AssertInst) or not callable(result):
        return result
    return result(*args)


def create_expr_adapter(expr: str | Sequence[str], scope_fn: ScopeFn | None = None) -> ScopeFn:
    """Create a scope function that runs the chain ``expr``.

    The steps are read from ``scope.that`` one after another. When
    ``scope_fn`` is given it then runs in the resulting scope with the call
    arguments; otherwise a callable last step is called with them.

    Raises:
        AssertionError: If ``expr`` is malformed.
    """
    steps = _parse_expr(expr)
    text = _expr_text(expr)

    def _expr_fn(scope: AssertScope, *args: Any) -> Any:
        __tracebackhide__ = _hide_internal_frames
        context = scope.context
        context.push_stack_fn(_expr_fn)
        if context.opts.is_verbose:
            context.set_op(f'[["{text}"]]')

        result: Any = scope.that
        for step in steps:
            try:
                result = getattr(scope.that, step.name)
            except AttributeError as exc:
                raise AssertionError(
                    f"Invalid step: {step.name} for [{text}]",
                    {"expected": step.name, "actual": dir(scope.that)},
                    cause=exc,
                    stack_start=list(context.stack_fns),
                ) from exc

            if step.args is not None:
                if not callable(result):
                    raise AssertionError(
                        context.get_message(f'expected a function for "{step.name}" but found {result!r}'),
                        context.get_details(),
                        stack_start=list(context.stack_fns),
                    )
                result = _call_result(scope, result, _step_args(scope, step, args))
            scope.that = result

        if scope_fn is not None:
            return scope.exec(scope_fn, args)
        return _call_result(scope, result, args)

    _expr_fn.__name__ = text
    return _expr_fn


def create_not_adapter(scope_fn: ScopeFn) -> ScopeFn:
    """Create a scope function that runs ``scope_fn`` negated."""

    def _not_fn(scope: AssertScope, *args: Any) -> Any:
        __tracebackhide__ = _hide_internal_frames
        context = scope.context
        context.push_stack_fn(_not_fn)
        if context.opts.is_verbose:
            context.set_op("[[not]]")
        not_op(scope)
        return scope.exec(scope_fn, args)

    _not_fn.__name__ = "not_" + getattr(scope_fn, "__name__", "anonymous")
    return _not_fn


def create_eval_adapter(
    eval_fn: Callable[..., Any],
    eval_msg: MsgSource = None,
    func_name: str | None = None,
) -> ScopeFn:
    """Create a scope function asserting ``eval_fn(actual, *args)`` is truthy."""
    name = func_name or getattr(eval_fn, "__name__", None) or "anonymous"

    def _eval_fn(scope: AssertScope, *args: Any) -> Any:
        __tracebackhide__ = _hide_internal_frames
        context = scope.context
        context.push_stack_fn(_eval_fn)
        if context.opts.is_verbose:
            context.set_op(f"[[{name}]]")
        context.eval(eval_fn(context.value, *args), eval_msg)
        return scope.that

    _eval_fn.__name__ = name
    return _eval_fn


__all__ = ["ScopeFn", "create_eval_adapter", "create_expr_adapter", "create_not_adapter"]
