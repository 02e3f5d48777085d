"""Exception checks for callables."""

from __future__ import annotations

import re
from enum import IntFlag
from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource

if TYPE_CHECKING:
    from tripwire.instance import AssertInst
    from tripwire.scope import AssertScope


class _Match(IntFlag):
    NOTHING = 0x00
    INSTANCE = 0x01
    TYPE = 0x02
    CONTAINS = 0x10
    MATCHES = 0x20


_MESSAGES: dict[int, str] = {
    _Match.INSTANCE: "expected {function} to raise {exc_type} but {error} was raised",
    _Match.TYPE: "expected {function} to raise an error of type {exc_type} but raised {error}",
    _Match.CONTAINS: "expected {function} to raise an error with a message containing {msg_match} but it was {message}",
    _Match.MATCHES: "expected {function} to raise an error with a message matching {msg_match} but it was {message}",
    _Match.INSTANCE | _Match.CONTAINS: (
        "expected {function} to raise {exc_type} with a message containing {msg_match} but {error} was raised"
    ),
    _Match.INSTANCE | _Match.MATCHES: (
        "expected {function} to raise {exc_type} with a message matching {msg_match} but {error} was raised"
    ),
    _Match.TYPE | _Match.CONTAINS: (
        "expected {function} to raise an error of type {exc_type} with a message containing {msg_match}"
        " but {error} was raised"
    ),
    _Match.TYPE | _Match.MATCHES: (
        "expected {function} to raise an error of type {exc_type} with a message matching {msg_match}"
        " but {error} was raised"
    ),
}


def _match_type(error: BaseException, exc_type: Any) -> tuple[bool, _Match]:
    if exc_type is None:
        return True, _Match.NOTHING
    if isinstance(exc_type, BaseException):
        same = type(error) is type(exc_type) and error.args == exc_type.args
        return error is exc_type or same, _Match.INSTANCE
    return isinstance(error, exc_type), _Match.TYPE


def _match_message(error: BaseException, msg_match: str | re.Pattern | None) -> tuple[bool, _Match]:
    if msg_match is None:
        return True, _Match.NOTHING
    message = str(error)
    if isinstance(msg_match, re.Pattern):
        return msg_match.search(message) is not None, _Match.MATCHES
    return msg_match in message, _Match.CONTAINS


def throws_func(
    scope: AssertScope,
    exc_type: Any = None,
    msg_match: str | re.Pattern | None = None,
    eval_msg: MsgSource = None,
) -> AssertInst:
    """Assert that calling the value raises.

    ``exc_type`` may be an exception class, a tuple of classes or an
    exception instance. Passing a string or pattern as ``exc_type`` matches
    the message only. On success the chain continues on the raised error.
    """
    context = scope.context
    func = context.value
    if not callable(func):
        scope.fatal("expected {value} to be a function")

    if isinstance(exc_type, (str, re.Pattern)):
        exc_type, msg_match = None, exc_type
    if exc_type is not None:
        valid = isinstance(exc_type, BaseException) or isinstance(exc_type, (type, tuple))
        if not valid:
            scope.fatal("expected {value} to be an exception class or instance")
        context.set("exc_type", exc_type)
    if msg_match is not None:
        context.set("msg_match", msg_match)

    try:
        result = func()
    except Exception as error:
        new_scope = scope.new_scope(error)
        new_context = new_scope.context
        new_context.set("function", func)
        new_context.set("error", error)
        new_context.set("message", str(error))

        type_ok, type_flag = _match_type(error, exc_type)
        msg_ok, msg_flag = _match_message(error, msg_match)
        default_msg = _MESSAGES.get(type_flag | msg_flag, "expected {function} to raise an error but {error} was raised")
        new_context.eval(type_ok and msg_ok, eval_msg or default_msg, error)
        return new_scope.that

    context.eval(False, eval_msg or "expected {value} to raise an error")
    return scope.new_scope(result).that
