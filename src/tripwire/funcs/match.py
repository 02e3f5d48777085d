from __future__ import annotations

import re
from typing import TYPE_CHECKING

from tripwire.context import MsgSource
from tripwire.funcs.tokens import MATCH

if TYPE_CHECKING:
    from tripwire.scope import AssertScope


def match_func(scope: AssertScope, pattern: str | re.Pattern, eval_msg: MsgSource = None) -> None:
    context = scope.context
    context.set(MATCH, pattern)
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error:
            context.fatal("expected {match} to be a valid regular expression")
        context.set(MATCH, pattern)
    if not isinstance(pattern, re.Pattern):
        context.fatal("expected {match} to be a regular expression")

    value = context.value
    matched = isinstance(value, str) and pattern.search(value) is not None
    context.eval(matched, eval_msg or "expected {value} to match {match}")
