from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tripwire.config import AssertConfig
from tripwire.context import MsgSource, create_context
from tripwire.instance import AssertInst
from tripwire.scope import AssertScope


def expect(value: Any, init_msg: MsgSource = None, config: AssertConfig | Mapping[str, Any] | None = None) -> AssertInst:
    """Start an assertion chain on ``value``.

    Parameters
    ----------
    value
        The actual value.
    init_msg
        Prefix for every failure message of the chain.
    config
        An :class:`AssertConfig` to use, or a dict of overrides applied to a
        clone of the global config.

    Examples
    --------
    >>> expect({"a": 1}).to.have.property("a", 1)  # doctest: +SKIP
    >>> expect([1, 2]).not_.to.include(3)  # doctest: +SKIP
    """
    context = create_context(value, init_msg, expect, (value, init_msg), config)
    return AssertScope(context).that
