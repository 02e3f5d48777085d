from __future__ import annotations

from collections.abc import Iterable, Mapping, Set
from typing import TYPE_CHECKING, Any

from tripwire.context import MsgSource
from tripwire.equality import deep_equal
from tripwire.funcs.equal import loose_equal
from tripwire.funcs.tokens import DEEP, MATCH

if TYPE_CHECKING:
    from tripwire.scope import AssertScope


def _contains(items: Iterable[Any], match: Any, deep: bool) -> bool:
    equal = deep_equal if deep else loose_equal
    return any(item is match or equal(item, match) for item in items)


def _includes(value: Any, match: Any, deep: bool) -> bool:
    if isinstance(value, Mapping):
        if isinstance(match, Mapping):
            # Subset of entries
            equal = deep_equal if deep else loose_equal
            return all(key in value and equal(value[key], expected) for key, expected in match.items())
        return _contains(value.keys(), match, deep)
    if isinstance(value, Set) and not deep:
        try:
            return match in value
        except TypeError:
            return False
    return _contains(value, match, deep)


def include_func(scope: AssertScope, match: Any, eval_msg: MsgSource = None) -> None:
    """Assert the value includes ``match``.

    - strings: substring
    - mappings: a key, or a subset of entries when ``match`` is a mapping
    - other collections: an element (deeply equal under ``deep``)
    """
    context = scope.context
    value = context.value
    deep = bool(context.get(DEEP))
    context.set(MATCH, match)

    if isinstance(value, str):
        if not isinstance(match, str):
            context.fatal("expected {match} to be a string when checking {value}")
        found = match in value
    elif isinstance(value, (Mapping, Iterable)) and not isinstance(value, (bytes, bytearray)):
        found = _includes(value, match, deep)
    else:
        context.fatal("argument {value} is not a supported collection type for the operation")

    default_msg = "expected {value} to deep include {match}" if deep else "expected {value} to include {match}"
    context.eval(found, eval_msg or default_msg)
