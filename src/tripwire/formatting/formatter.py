"""Formatter types shared by the format manager and the default formatters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tripwire.config import AssertConfig


class FormatResult(Enum):
    """Outcome of a single formatter."""

    OK = "ok"  # Use the value and stop
    CONTINUE = "continue"  # Use the value as input for the next formatter
    SKIP = "skip"  # Formatter does not apply
    FAILED = "failed"  # Formatter errored, fall back to default rendering


@dataclass(frozen=True, slots=True)
class FormattedValue:
    """Result of formatting a value.

    Attributes
    ----------
    res
        The :class:`FormatResult` of the formatting attempt.
    val
        The formatted string, meaningful for ``OK`` and ``CONTINUE``.
    err
        The error raised by the formatter, set for ``FAILED``.
    """

    res: FormatResult
    val: str | None = None
    err: BaseException | None = None

    @classmethod
    def ok(cls, val: str) -> FormattedValue:
        return cls(FormatResult.OK, val)

    @classmethod
    def cont(cls, val: str) -> FormattedValue:
        return cls(FormatResult.CONTINUE, val)

    @classmethod
    def skip(cls) -> FormattedValue:
        return cls(FormatResult.SKIP)

    @classmethod
    def failed(cls, err: BaseException | None = None) -> FormattedValue:
        return cls(FormatResult.FAILED, err=err)


class FormatContext(Protocol):
    """Context handed to every formatter call."""

    @property
    def cfg(self) -> AssertConfig: ...

    @property
    def depth(self) -> int: ...

    def format(self, value: Any) -> str:
        """Format a nested value with the same pipeline and circular tracking."""
        ...


FormatFn = Callable[["FormatContext", Any], "FormattedValue | None"]


@dataclass(frozen=True, slots=True)
class Formatter:
    """A named value formatter.

    ``value`` receives the format context and the value to render. Returning
    ``None`` is treated the same as :meth:`FormattedValue.skip`.
    """

    name: str
    value: FormatFn


__all__ = ["FormatContext", "FormatFn", "FormatResult", "FormattedValue", "Formatter"]
