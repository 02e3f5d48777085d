from __future__ import annotations

from typing import TYPE_CHECKING

from tripwire.context import MsgSource

if TYPE_CHECKING:
    from tripwire.scope import AssertScope


def truthy_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(bool(context.value), eval_msg or "expected {value} to be truthy")


def true_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(context.value is True, eval_msg or "expected {value} to be true")


def false_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(context.value is False, eval_msg or "expected {value} to be false")


def strict_true_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(context.value is True, eval_msg or "expected {value} to be strictly true")


def strict_false_func(scope: AssertScope, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.eval(context.value is False, eval_msg or "expected {value} to be strictly false")
