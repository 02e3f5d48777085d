"""Assertion configuration.

A single process-wide :data:`assert_config` holds the defaults used by every
assertion chain. A chain started with config overrides works on a
:meth:`AssertConfig.clone` instead, so the global stays untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from tripwire.formatting.format_value import default_circular_msg
from tripwire.formatting.formatter import Formatter
from tripwire.formatting.manager import FormatManager, Removable


class FormatOptions(BaseModel):
    """Options controlling value formatting.

    Attributes
    ----------
    finalize
        Apply ``finalize_fn`` to every formatted value.
    finalize_fn
        Post-processing applied when ``finalize`` is on. ``None`` means
        :func:`~tripwire.formatting.escape_ansi`.
    max_props
        Maximum number of entries rendered per collection.
    max_format_depth
        Maximum nesting depth rendered before eliding with ``...``.
    """

    model_config = ConfigDict(validate_assignment=True, arbitrary_types_allowed=True)

    finalize: bool = False
    finalize_fn: Callable[[str], str] | None = None
    max_props: int = Field(default=8, ge=0)
    max_format_depth: int = Field(default=50, ge=0)


class AssertConfig(BaseModel):
    """Configuration shared by assertion chains.

    Attributes
    ----------
    is_verbose
        Record every executed function in the operation path.
    full_stack
        Keep package-internal frames in pytest tracebacks.
    def_assert_msg
        Message used when a failure has no message of its own.
    def_fatal_msg
        Message used when a fatal error has no message of its own.
    show_diff
        Default ``show_diff`` flag attached to failures.
    circular_msg
        Returns the marker rendered for circular references.
    format
        Value formatting options.
    """

    model_config = ConfigDict(validate_assignment=True, arbitrary_types_allowed=True)

    is_verbose: bool = False
    full_stack: bool = False
    def_assert_msg: str = "assertion failure"
    def_fatal_msg: str = "fatal assertion failure"
    show_diff: bool = True
    circular_msg: Callable[[], str] = default_circular_msg
    format: FormatOptions = Field(default_factory=FormatOptions)

    _format_mgr: FormatManager = PrivateAttr(default_factory=FormatManager)

    @property
    def format_mgr(self) -> FormatManager:
        return self._format_mgr

    def add_formatter(self, formatter: Formatter | Iterable[Formatter]) -> Removable:
        """Register user formatter(s); returns a handle whose ``rm()`` removes them."""
        return self._format_mgr.add_formatter(formatter)

    def reset(self) -> None:
        """Restore every option to its default and drop all user formatters, in place."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))
        self._format_mgr.reset()

    def clone(self, overrides: Mapping[str, Any] | None = None) -> AssertConfig:
        """Return an independent copy with ``overrides`` applied.

        Nested dicts are merged into the matching nested options rather than
        replacing them, e.g. ``{"format": {"max_props": 2}}`` keeps the other
        format options. The formatter list is copied into a new manager.
        """
        new = self.model_copy(deep=True)
        new._format_mgr = self._format_mgr.copy()
        if overrides:
            _apply_overrides(new, overrides)
        return new


def _apply_overrides(model: BaseModel, overrides: Mapping[str, Any]) -> None:
    for name, value in overrides.items():
        current = getattr(model, name, None)
        if isinstance(current, BaseModel) and isinstance(value, Mapping):
            _apply_overrides(current, value)
        else:
            setattr(model, name, value)


assert_config = AssertConfig()


__all__ = ["AssertConfig", "FormatOptions", "assert_config"]
