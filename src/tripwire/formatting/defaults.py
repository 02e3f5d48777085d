"""Built-in formatters, applied after any user formatters.

Ordered roughly by how often each type shows up in assertion messages.
More specific formatters must come before general ones (exception classes
before classes, classes before callables).
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import re
from collections.abc import Iterable, Mapping
from typing import Any

from tripwire.formatting.formatter import FormatContext, FormattedValue, Formatter

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_REGEX_FLAGS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
    (re.ASCII, "a"),
)


def _join_items(ctx: FormatContext, items: Iterable[Any], render) -> str:
    max_props = ctx.cfg.format.max_props
    parts: list[str] = []
    for idx, item in enumerate(items):
        if max_props and idx >= max_props:
            parts.append("...")
            break
        parts.append(render(item))
    return ",".join(parts)


def _format_key(ctx: FormatContext, key: Any) -> str:
    if isinstance(key, str) and _IDENTIFIER.match(key):
        return key
    return ctx.format(key)


def _format_mapping(ctx: FormatContext, value: Mapping) -> str:
    return _join_items(ctx, value.items(), lambda kv: f"{_format_key(ctx, kv[0])}:{ctx.format(kv[1])}")


def _string(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, str):
        return FormattedValue.ok(f'"{value}"')
    return None


def _dict(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, dict):
        return FormattedValue.ok("{" + _format_mapping(ctx, value) + "}")
    return None


def _list(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, list):
        return FormattedValue.ok("[" + _join_items(ctx, value, ctx.format) + "]")
    if isinstance(value, tuple) and not hasattr(value, "_fields"):
        return FormattedValue.ok("(" + _join_items(ctx, value, ctx.format) + ")")
    return None


def _exception(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, BaseException):
        return FormattedValue.ok(f"[{type(value).__name__}:{ctx.format(str(value))}]")
    return None


def _exception_type(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, type) and issubclass(value, BaseException):
        return FormattedValue.ok(f"{value.__name__}()")
    return None


def _class(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, type):
        return FormattedValue.ok(f"[class:{value.__qualname__}]")
    return None


def _callable(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if callable(value) and not dataclasses.is_dataclass(value):
        name = getattr(value, "__qualname__", None) or getattr(value, "__name__", None)
        return FormattedValue.ok("[Function" + (f":{name}" if name and name != "<lambda>" else "") + "]")
    return None


def _datetime(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return FormattedValue.ok(f'[{type(value).__name__}:"{value.isoformat()}"]')
    if isinstance(value, dt.timedelta):
        return FormattedValue.ok(f'[timedelta:"{value}"]')
    return None


def _set(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, (set, frozenset)):
        tag = "Set" if isinstance(value, set) else "frozenset"
        return FormattedValue.ok(f"{tag}:{{" + _join_items(ctx, value, ctx.format) + "}")
    return None


def _mapping(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, Mapping):
        return FormattedValue.ok("Map:{" + _format_mapping(ctx, value) + "}")
    return None


def _pattern(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, re.Pattern):
        flags = "".join(char for flag, char in _REGEX_FLAGS if value.flags & flag)
        return FormattedValue.ok(f"/{value.pattern}/{flags}")
    return None


def _bytes(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return FormattedValue.ok(f"{type(value).__name__}:[" + _join_items(ctx, data, str) + "]")
    return None


def _enum(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if isinstance(value, enum.Enum):
        return FormattedValue.ok(f"{type(value).__name__}.{value.name}")
    return None


def _object(ctx: FormatContext, value: Any) -> FormattedValue | None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    elif hasattr(value, "_fields") and isinstance(value, tuple):
        fields = dict(zip(value._fields, value))
    elif hasattr(value, "__dict__") and type(value).__repr__ is object.__repr__:
        fields = {k: v for k, v in vars(value).items() if not k.startswith("_")}
    else:
        return None
    return FormattedValue.ok(f"{type(value).__name__}:{{" + _format_mapping(ctx, fields) + "}")


def _fallback(ctx: FormatContext, value: Any) -> FormattedValue | None:
    return FormattedValue.ok(repr(value))


DEFAULT_FORMATTERS: tuple[Formatter, ...] = (
    Formatter("String", _string),
    Formatter("Dict", _dict),
    Formatter("List", _list),
    Formatter("Error", _exception),
    Formatter("ErrorType", _exception_type),
    Formatter("Class", _class),
    Formatter("Function", _callable),
    Formatter("Date", _datetime),
    Formatter("Set", _set),
    Formatter("Map", _mapping),
    Formatter("Pattern", _pattern),
    Formatter("Bytes", _bytes),
    Formatter("Enum", _enum),
    Formatter("Object", _object),
    Formatter("Fallback", _fallback),
)


__all__ = ["DEFAULT_FORMATTERS"]
