"""Render arbitrary values for assertion messages.

The user formatters registered on the config run first, in registration
order. Anything they do not handle is rendered by the built-in formatters
in :mod:`tripwire.formatting.defaults`.
"""

from __future__ import annotations

import io
import logging
import re
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.text import Text

from tripwire.formatting.defaults import DEFAULT_FORMATTERS
from tripwire.formatting.formatter import FormattedValue, FormatResult

if TYPE_CHECKING:
    from tripwire.config import AssertConfig

logger = logging.getLogger(__name__)

CIRCULAR_TEXT = "[<Circular>]"

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

# Never tracked for cycles: they cannot contain themselves
_ATOMIC_TYPES = (str, bytes, int, float, complex, bool, type(None))


def _style(text: str, style: str) -> str:
    console = Console(file=io.StringIO(), force_terminal=True, color_system="standard", soft_wrap=True)
    with console.capture() as capture:
        console.print(Text(text, style=style), end="")
    return capture.get()


def default_circular_msg() -> str:
    return _style(CIRCULAR_TEXT, "cyan")


def escape_ansi(value: str) -> str:
    """Make control characters visible as ``\\xNN``, leaving newlines and tabs alone."""
    return _CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group(0)):02x}", value)


class _FormatCtx:
    """Per-call formatting state.

    Holds the stack of values currently being rendered so a value that
    contains itself renders the circular marker instead of recursing.
    """

    def __init__(self, cfg: AssertConfig) -> None:
        self._cfg = cfg
        self._stack: list[int] = []

    @property
    def cfg(self) -> AssertConfig:
        return self._cfg

    @property
    def depth(self) -> int:
        return len(self._stack)

    def format(self, value: Any) -> str:
        if isinstance(value, _ATOMIC_TYPES):
            return _do_format(self, value)

        if id(value) in self._stack:
            return self._cfg.circular_msg()
        max_depth = self._cfg.format.max_format_depth
        if max_depth and len(self._stack) >= max_depth:
            return "..."

        self._stack.append(id(value))
        try:
            return _do_format(self, value)
        finally:
            self._stack.pop()


def _format_defaults(ctx: _FormatCtx, value: Any) -> str:
    for formatter in DEFAULT_FORMATTERS:
        try:
            result = formatter.value(ctx, value)
        except Exception as exc:
            logger.debug("Default formatter %s failed: %s", formatter.name, exc)
            return _style(f"<unformattable {type(value).__name__}>", "yellow")
        if result is not None and result.res is FormatResult.OK:
            return result.val or ""
    return repr(value)


def _do_format(ctx: _FormatCtx, value: Any) -> str:
    current: Any = value
    continued = False

    for formatter in ctx.cfg.format_mgr:
        try:
            result: FormattedValue | None = formatter.value(ctx, current)
        except Exception as exc:
            logger.debug("Formatter %s raised, using defaults: %s", formatter.name, exc)
            return _format_defaults(ctx, value)

        if result is None or result.res is FormatResult.SKIP:
            continue
        if result.res is FormatResult.FAILED:
            logger.debug("Formatter %s failed, using defaults: %s", formatter.name, result.err)
            return _format_defaults(ctx, value)
        if result.res is FormatResult.OK:
            return result.val or ""
        # CONTINUE
        current = result.val or ""
        continued = True

    if continued:
        return current
    return _format_defaults(ctx, value)


def format_value(cfg: AssertConfig | None, value: Any) -> str:
    """Format ``value`` for inclusion in an assertion message.

    Parameters
    ----------
    cfg
        Config providing the formatters and format options. ``None`` uses the
        global :data:`tripwire.config.assert_config`.
    value
        Any value, including self-referential structures.

    Returns
    -------
    str
        The rendered value, finalized when ``cfg.format.finalize`` is set.
    """
    if cfg is None:
        from tripwire.config import assert_config

        cfg = assert_config

    text = _FormatCtx(cfg).format(value)

    if cfg.format.finalize:
        finalize_fn = cfg.format.finalize_fn or escape_ansi
        text = finalize_fn(text)
    return text


__all__ = ["CIRCULAR_TEXT", "default_circular_msg", "escape_ansi", "format_value"]
