"""Assertion error hierarchy.

- ``AssertionError`` is the base for every error raised by the package. It
  subclasses the builtin so test runners treat it as an assertion failure.
- ``AssertionFailure`` is raised when an assertion check fails.
- ``AssertionFatal`` is raised when an assertion cannot continue (bad usage).
"""

from __future__ import annotations

import builtins
import json
import math
import os
import traceback
from collections.abc import Callable, Iterable
from types import CodeType, MappingProxyType
from typing import Any

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

_TRACKED_FIELDS = ("actual", "expected", "operator", "show_diff")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _same_value(a: Any, b: Any) -> bool:
    """Same-value comparison: NaN equals NaN, ``0.0`` and ``-0.0`` differ.

    Ints and floats compare as numbers, so ``1`` and ``1.0`` are the same value.
    """
    if a is b:
        return True
    if _is_number(a) and _is_number(b):
        if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
            return True
        if a == 0 and b == 0:
            return math.copysign(1.0, a) == math.copysign(1.0, b)
        return a == b
    if type(a) is not type(b):
        return False
    try:
        return bool(a == b)
    except Exception:
        return False


def _format_lines(value: str, indent: str) -> str:
    return "\n".join(indent + line for line in value.strip().split("\n"))


def _entry_codes(stack_start: Callable | Iterable[Callable] | None) -> set[CodeType]:
    if stack_start is None:
        return set()
    fns = stack_start if isinstance(stack_start, (list, tuple, set)) else [stack_start]
    codes = set()
    for fn in fns:
        code = getattr(fn, "__code__", None) or getattr(getattr(fn, "__func__", None), "__code__", None)
        if code is not None:
            codes.add(code)
    return codes


def _capture_stack(stack_start: Callable | Iterable[Callable] | None) -> tuple[str, str]:
    """Return the full and filtered stack text for the caller of the error.

    Without ``stack_start`` nothing is filtered, which is how failures raised
    under ``full_stack`` keep the package frames.
    """
    this_file = os.path.abspath(__file__)
    frames = [frame for frame in traceback.extract_stack() if os.path.abspath(frame.filename) != this_file]
    full = "".join(traceback.format_list(frames))
    if stack_start is None:
        return full, full

    codes = _entry_codes(stack_start)
    code_names = {(code.co_filename, code.co_name) for code in codes}
    filtered = [
        frame
        for frame in frames
        if (frame.filename, frame.name) not in code_names
        and not _is_internal_file(frame.filename)
    ]
    return full, "".join(traceback.format_list(filtered))


def _is_internal_file(filename: str) -> bool:
    return os.path.abspath(filename).startswith(_PACKAGE_DIR + os.sep)


def _hide_internal_frames(excinfo: Any) -> bool:
    """pytest ``__tracebackhide__`` hook: hide package frames unless full stacks are on."""
    from tripwire.config import assert_config

    return not assert_config.full_stack


def _tracked(name: str) -> property:
    def _get(self: AssertionFailure) -> Any:
        return self._fields[name]

    def _set(self: AssertionFailure, value: Any) -> None:
        self._set_field(name, value)

    return property(_get, _set)


class AssertionError(builtins.AssertionError):
    """Base error for the package.

    Parameters
    ----------
    message
        The error message.
    props
        Additional properties attached to the error.
    cause
        The error that caused this one, also chained as ``__cause__``.
    stack_start
        Entry function(s) whose frames are dropped from :attr:`stack`.
    """

    def __init__(
        self,
        message: str = "",
        props: Any = None,
        *,
        cause: BaseException | None = None,
        stack_start: Callable | Iterable[Callable] | None = None,
    ) -> None:
        self._raw_message = message or ""
        self.props = props
        self.inner_exception = cause
        if cause is not None:
            self.__cause__ = cause
        self.full_stack, self.stack = _capture_stack(stack_start)
        super().__init__(self.message)

    @property
    def message(self) -> str:
        message = self._raw_message
        if self.inner_exception is not None and str(self.inner_exception):
            message += f"\n\nCaused by: {self.inner_exception}"
        return message

    def __str__(self) -> str:
        return self.message

    def format_stack(self) -> str:
        """Filtered stack followed by the inner exception's traceback, if any."""
        stack = self.stack
        inner = self.inner_exception
        if inner is not None and inner.__traceback__ is not None:
            inner_tb = "".join(traceback.format_exception(type(inner), inner, inner.__traceback__))
            stack += "\n\nInner Exception:\n" + _format_lines(inner_tb, "    ")
        return stack

    def to_dict(self, stack: bool = False) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "props": self.props,
            "stack": self.format_stack() if stack else None,
            "inner_exception": repr(self.inner_exception) if self.inner_exception else None,
        }

    def to_json(self, stack: bool = False) -> str:
        return json.dumps(self.to_dict(stack), default=repr)


class AssertionFailure(AssertionError):
    """Raised when an assertion check fails.

    ``actual``, ``expected``, ``operator`` and ``show_diff`` are read from
    ``props`` when present. Reassigning any of them records the value they
    held before the first change in :attr:`org_values`.
    """

    def __init__(
        self,
        message: str = "",
        props: Any = None,
        *,
        cause: BaseException | None = None,
        stack_start: Callable | Iterable[Callable] | None = None,
    ) -> None:
        super().__init__(message, props, cause=cause, stack_start=stack_start)
        source = props if isinstance(props, dict) else {}
        self._fields: dict[str, Any] = {
            "actual": source.get("actual"),
            "expected": source.get("expected"),
            "operator": source.get("operator"),
            "show_diff": source.get("show_diff", True),
        }
        self._org_values: dict[str, Any] | None = None

    def _set_field(self, name: str, value: Any) -> None:
        current = self._fields[name]
        if _same_value(current, value):
            return
        if self._org_values is None:
            self._org_values = {}
        self._org_values.setdefault(name, current)
        self._fields[name] = value

    actual = _tracked("actual")
    expected = _tracked("expected")
    operator = _tracked("operator")
    show_diff = _tracked("show_diff")

    @property
    def org_values(self) -> MappingProxyType | None:
        """Values held before the first change of each tracked field, or None."""
        if self._org_values is None:
            return None
        return MappingProxyType(self._org_values)

    def to_dict(self, stack: bool = False) -> dict[str, Any]:
        result = super().to_dict(stack)
        for name in _TRACKED_FIELDS:
            result[name] = self._fields[name]
        return result


class AssertionFatal(AssertionFailure):
    """Raised when the assertion chain cannot meaningfully continue."""


__all__ = ["AssertionError", "AssertionFailure", "AssertionFatal"]
