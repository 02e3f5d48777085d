"""Ordered registry of user formatters."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from tripwire.formatting.formatter import Formatter


@dataclass
class Removable:
    """Handle returned by :meth:`FormatManager.add_formatter`."""

    _manager: FormatManager | None
    _formatters: list[Formatter] = field(default_factory=list)

    def rm(self) -> None:
        """Remove the formatters added with this handle. Safe to call repeatedly."""
        if self._manager is not None:
            self._manager.remove_formatter(self._formatters)
            self._manager = None


class FormatManager:
    """Holds user formatters in registration order.

    Registration order is evaluation order. The default formatters are not
    stored here; they are always applied after the user pipeline.
    """

    def __init__(self, formatters: Iterable[Formatter] | None = None) -> None:
        self._formatters: list[Formatter] = list(formatters or [])

    def add_formatter(self, formatter: Formatter | Iterable[Formatter]) -> Removable:
        added = [formatter] if isinstance(formatter, Formatter) else list(formatter)
        self._formatters.extend(added)
        return Removable(self, added)

    def remove_formatter(self, formatter: Formatter | Iterable[Formatter]) -> None:
        targets = [formatter] if isinstance(formatter, Formatter) else list(formatter)
        for target in targets:
            for idx, existing in enumerate(self._formatters):
                if existing is target:
                    del self._formatters[idx]
                    break

    def get_formatters(self) -> tuple[Formatter, ...]:
        return tuple(self._formatters)

    def reset(self) -> None:
        self._formatters.clear()

    def copy(self) -> FormatManager:
        return FormatManager(self._formatters)

    def __iter__(self) -> Iterator[Formatter]:
        # Snapshot so a formatter may unregister itself mid-format
        return iter(tuple(self._formatters))

    def __len__(self) -> int:
        return len(self._formatters)


__all__ = ["FormatManager", "Removable"]
