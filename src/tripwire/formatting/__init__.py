"""Value formatting for assertion messages."""

from tripwire.formatting.format_value import CIRCULAR_TEXT, default_circular_msg, escape_ansi, format_value
from tripwire.formatting.formatter import FormatContext, FormatFn, FormatResult, FormattedValue, Formatter
from tripwire.formatting.manager import FormatManager, Removable

__all__ = [
    "CIRCULAR_TEXT",
    "FormatContext",
    "FormatFn",
    "FormatManager",
    "FormatResult",
    "FormattedValue",
    "Formatter",
    "Removable",
    "default_circular_msg",
    "escape_ansi",
    "format_value",
]
