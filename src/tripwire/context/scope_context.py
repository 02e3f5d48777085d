"""Scope contexts: the state threaded through an assertion chain.

A root context is created for the value an assertion starts with. Each step
that changes the value, or needs to alter how the chain evaluates, creates a
child context. Children read their parent's tokens, share its config and may
override ``eval``, ``fail``, ``get_message``, ``get_eval_message`` and
``get_details``. An override receives a view of the parent as its first
argument; calling the same method through that view runs the next
implementation up the chain, still acting on the child's state.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from tripwire.config import AssertConfig, assert_config
from tripwire.errors import AssertionFailure, AssertionFatal, _hide_internal_frames
from tripwire.formatting import format_value

MsgSource = str | Callable[[], str] | None

OP_PATH = "op_path"
OPERATION = "operation"
EXEC = "exec"

_MESSAGE_FNS = ("get_message", "get_eval_message")


@dataclass(frozen=True, slots=True)
class ContextOverrides:
    """Behavior overrides applied by a child context.

    Attributes
    ----------
    eval
        ``eval(parent, expr, eval_msg=None, caused_by=None)``.
    fail
        ``fail(parent, msg, details=None, stack_start=None, caused_by=None)``.
    get_message
        ``get_message(parent, eval_msg=None, skip_overrides=False)``.
    get_eval_message
        ``get_eval_message(parent, eval_msg=None, skip_overrides=False)``.
    get_details
        ``get_details(parent)``.
    negate
        Toggle the context's ``negated`` flag.
    """

    eval: Callable[..., Any] | None = None
    fail: Callable[..., Any] | None = None
    get_message: Callable[..., str] | None = None
    get_eval_message: Callable[..., str] | None = None
    get_details: Callable[..., dict[str, Any]] | None = None
    negate: bool = False


_OVERRIDABLE = frozenset(f.name for f in fields(ContextOverrides) if f.name != "negate")


class _ParentView:
    """What an override sees as its parent.

    Overridable methods continue the override chain above ``level``. Any
    other attribute comes from the context being evaluated.
    """

    __slots__ = ("_target", "_level")

    def __init__(self, target: ScopeContext, level: ScopeContext | None) -> None:
        self._target = target
        self._level = level

    def __getattr__(self, name: str) -> Any:
        if name in _OVERRIDABLE:
            return functools.partial(self._target._dispatch, self._level, name)
        return getattr(self._target, name)


class ScopeContext:
    """Holds the current value, message tokens and behavior overrides of a chain.

    Use :func:`create_context` to create a root context and :meth:`new` to
    derive children.
    """

    def __init__(
        self,
        value: Any,
        *,
        parent: ScopeContext | None = None,
        overrides: ContextOverrides | None = None,
        init_msg: MsgSource = None,
        org_args: tuple[Any, ...] | None = None,
        opts: AssertConfig | None = None,
        stack_start: Callable | None = None,
    ) -> None:
        self._value = value
        self._parent = parent
        self._overrides = overrides
        self._values: dict[str, Any] = {}
        self._stack_start = stack_start

        if parent is None:
            self._init_msg = init_msg
            self._org_args = org_args
            self._opts = opts if opts is not None else assert_config
            self.stack_fns: list[Callable] = []
        else:
            self._init_msg = parent._init_msg
            self._org_args = parent._org_args
            self._opts = parent._opts
            self.stack_fns = list(parent.stack_fns)

        if stack_start is not None:
            self.push_stack_fn(stack_start)

    @property
    def value(self) -> Any:
        return self._value

    @property
    def opts(self) -> AssertConfig:
        return self._opts

    @property
    def org_args(self) -> tuple[Any, ...] | None:
        return self._org_args

    @property
    def parent(self) -> ScopeContext | None:
        return self._parent

    @property
    def negated(self) -> bool:
        negated = False
        node: ScopeContext | None = self
        while node is not None:
            if node._overrides is not None and node._overrides.negate:
                negated = not negated
            node = node._parent
        return negated

    def push_stack_fn(self, *fns: Callable) -> None:
        """Add entry functions whose frames are hidden from failure stacks."""
        for fn in fns:
            if fn not in self.stack_fns:
                self.stack_fns.append(fn)

    # Tokens

    def get(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        if self._parent is None:
            return None

        value = self._parent.get(name)
        # Copy mutable containers so changes made here never reach the parent
        if isinstance(value, list):
            value = list(value)
            self._values[name] = value
        elif isinstance(value, dict):
            value = dict(value)
            self._values[name] = value
        return value

    def set(self, name: str, value: Any) -> ScopeContext:
        self._values[name] = value
        return self

    def keys(self) -> list[str]:
        keys = self._parent.keys() if self._parent is not None else []
        for key in self._values:
            if key not in keys:
                keys.append(key)
        return keys

    def set_op(self, name: str) -> ScopeContext:
        """Record ``name`` as the current operation and append it to the path."""
        self.set(OPERATION, name)
        path = self.get(OP_PATH)
        if path is None:
            path = []
            self.set(OP_PATH, path)
        path.append(name)
        return self

    # Children

    def new(self, value: Any, overrides: ContextOverrides | Mapping[str, Any] | None = None) -> ScopeContext:
        if isinstance(overrides, Mapping):
            overrides = ContextOverrides(**overrides)
        return ScopeContext(value, parent=self, overrides=overrides, stack_start=self._stack_start)

    # Overridable behavior

    def eval(self, expr: Any, eval_msg: MsgSource = None, caused_by: BaseException | None = None) -> ScopeContext:
        """Fail with ``eval_msg`` unless ``expr`` holds (after any negation)."""
        __tracebackhide__ = _hide_internal_frames
        return self._dispatch(self, "eval", expr, eval_msg, caused_by)

    def fail(
        self,
        msg: MsgSource = None,
        details: Any = None,
        stack_start: Callable | Iterable[Callable] | None = None,
        caused_by: BaseException | None = None,
    ) -> None:
        __tracebackhide__ = _hide_internal_frames
        self._dispatch(self, "fail", msg, details, stack_start, caused_by)

    def get_message(self, eval_msg: MsgSource = None, skip_overrides: bool = False) -> str:
        return self._dispatch(self, "get_message", eval_msg, skip_overrides)

    def get_eval_message(self, eval_msg: MsgSource = None, skip_overrides: bool = False) -> str:
        return self._dispatch(self, "get_eval_message", eval_msg, skip_overrides)

    def get_details(self) -> dict[str, Any]:
        return self._dispatch(self, "get_details")

    def fatal(self, msg: MsgSource = None, details: Any = None) -> None:
        """Raise :class:`AssertionFatal`, ignoring negation and message overrides."""
        __tracebackhide__ = _hide_internal_frames
        message = self.get_message(msg or self.opts.def_fatal_msg, skip_overrides=True)
        raise AssertionFatal(
            message,
            details if details is not None else self.get_details(),
            stack_start=self._failure_stack(self.fatal),
        )

    def _dispatch(self, level: ScopeContext | None, name: str, *args: Any) -> Any:
        skip = name in _MESSAGE_FNS and len(args) > 1 and bool(args[1])
        node = level
        while node is not None and not skip:
            override = getattr(node._overrides, name, None) if node._overrides is not None else None
            if override is not None:
                return override(_ParentView(self, node._parent), *args)
            node = node._parent
        return getattr(self, "_base_" + name)(*args)

    def _base_eval(self, expr: Any, eval_msg: MsgSource = None, caused_by: BaseException | None = None) -> ScopeContext:
        __tracebackhide__ = _hide_internal_frames
        if not expr:
            self.fail(eval_msg, self.get_details(), None, caused_by)
        return self

    def _base_fail(
        self,
        msg: MsgSource = None,
        details: Any = None,
        stack_start: Callable | Iterable[Callable] | None = None,
        caused_by: BaseException | None = None,
    ) -> None:
        __tracebackhide__ = _hide_internal_frames
        message = self.get_message(msg) or self.opts.def_assert_msg
        raise AssertionFailure(
            message,
            details if details is not None else self.get_details(),
            cause=caused_by,
            stack_start=self._failure_stack(stack_start),
        )

    def _base_get_message(self, eval_msg: MsgSource = None, skip_overrides: bool = False) -> str:
        init_msg = self._resolve_message(self._init_msg)
        message = self.get_eval_message(eval_msg, skip_overrides)
        if init_msg:
            return init_msg + (": " + message if message else "")
        return message

    def _base_get_eval_message(self, eval_msg: MsgSource = None, skip_overrides: bool = False) -> str:
        message = self._resolve_message(eval_msg)
        if message:
            return message
        path = self.get(OP_PATH)
        return " ".join(path) if path else ""

    def _base_get_details(self) -> dict[str, Any]:
        details: dict[str, Any] = {"actual": self._value, "show_diff": self.opts.show_diff}
        for key in self.keys():
            details[key] = self.get(key)
        return details

    def _failure_stack(self, extra: Callable | Iterable[Callable] | None) -> list[Callable] | None:
        if self.opts.full_stack:
            return None
        stack = list(self.stack_fns)
        extras = [] if extra is None else [extra] if callable(extra) else list(extra)
        for fn in extras:
            if fn not in stack:
                stack.append(fn)
        return stack

    def _resolve_message(self, msg: MsgSource) -> str:
        message = (msg() if callable(msg) else msg) or ""
        if "{" not in message:
            return message

        details = self.get_details()
        parts: list[str] = []
        pos = 0
        start = 0
        while True:
            open_idx = message.find("{", start)
            if open_idx == -1:
                break
            if message.startswith("{{", open_idx):
                start = open_idx + 2
                continue
            close_idx = message.find("}", open_idx)
            if close_idx == -1:
                break

            token = message[open_idx + 1 : close_idx]
            if token in details:
                rendered = format_value(self.opts, details[token])
            elif token == "value":
                rendered = format_value(self.opts, details.get("actual"))
            elif token == "path":
                rendered = " ".join(self.get(OP_PATH) or [])
            else:
                # Unknown tokens stay as written
                start = open_idx + 1
                continue

            parts.append(message[pos:open_idx])
            parts.append(rendered)
            pos = start = close_idx + 1

        parts.append(message[pos:])
        return "".join(parts)

    def __repr__(self) -> str:
        return f"ScopeContext(value={self._value!r}, negated={self.negated})"


def create_context(
    value: Any = None,
    init_msg: MsgSource = None,
    stack_start: Callable | None = None,
    org_args: tuple[Any, ...] | None = None,
    config: AssertConfig | Mapping[str, Any] | None = None,
) -> ScopeContext:
    """Create a root context.

    Parameters
    ----------
    value
        The actual value being asserted on.
    init_msg
        Message prefixed to every failure message of the chain.
    stack_start
        Entry function whose frames are hidden from failure stacks.
    org_args
        The arguments the chain was started with.
    config
        An :class:`AssertConfig` to use as is, or a mapping of overrides
        applied to a clone of the global config.
    """
    if isinstance(config, Mapping):
        opts = assert_config.clone(config)
    else:
        opts = config
    return ScopeContext(value, init_msg=init_msg, org_args=org_args, opts=opts, stack_start=stack_start)


def get_scope_context(value: Any) -> ScopeContext:
    """Return the context of a context, scope or chain instance; otherwise wrap ``value``."""
    if isinstance(value, ScopeContext):
        return value

    from tripwire.scope import get_assert_scope

    scope = get_assert_scope(value)
    if scope is not None:
        return scope.context
    return create_context(value)


__all__ = [
    "EXEC",
    "OPERATION",
    "OP_PATH",
    "ContextOverrides",
    "MsgSource",
    "ScopeContext",
    "create_context",
    "get_scope_context",
]
