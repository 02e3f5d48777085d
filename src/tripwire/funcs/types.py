"""Type and shape checks."""

from __future__ import annotations

from collections.abc import Mapping, Sized
from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource

if TYPE_CHECKING:
    from tripwire.scope import AssertScope


def none_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(context.value is None, eval_msg or "expected {value} to be None")


def string_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(isinstance(context.value, str), eval_msg or "expected {value} to be a string")


def number_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    value = context.value
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    context.eval(is_number, eval_msg or "expected {value} to be a number")


def list_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(isinstance(context.value, list), eval_msg or "expected {value} to be a list")


def dict_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(isinstance(context.value, Mapping), eval_msg or "expected {value} to be a dict")


def callable_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(callable(context.value), eval_msg or "expected {value} to be callable")


def empty_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    value = context.value
    if not isinstance(value, Sized):
        context.fatal("expected {value} to have a length")
    context.eval(len(value) == 0, eval_msg or "expected {value} to be empty")


def instance_of_func(scope: AssertScope, cls: Any, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.set("cls", cls)
    is_type = isinstance(cls, type) or (isinstance(cls, tuple) and all(isinstance(c, type) for c in cls))
    if not is_type:
        context.fatal("expected {cls} to be a class")
    context.eval(isinstance(context.value, cls), eval_msg or "expected {value} to be an instance of {cls}")
