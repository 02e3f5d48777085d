"""Fluent and function-style assertions with structured failures."""

from tripwire.adapters import create_eval_adapter, create_expr_adapter, create_not_adapter
from tripwire.assertions import Assert, AssertClassDef, assert_, create_assert
from tripwire.config import AssertConfig, FormatOptions, assert_config
from tripwire.context import (
    ContextOverrides,
    ScopeContext,
    create_context,
    get_current_scope_context,
    get_scope_context,
    scope_context,
    use_scope,
)
from tripwire.equality import deep_equal
from tripwire.errors import AssertionError, AssertionFailure, AssertionFatal
from tripwire.expect import expect
from tripwire.formatting import (
    FormatManager,
    FormatResult,
    FormattedValue,
    Formatter,
    Removable,
    escape_ansi,
    format_value,
)
from tripwire.instance import AssertInst, FuncDef, ResultAdapter, add_assert_funcs, clear_assert_funcs
from tripwire.ops import not_op
from tripwire.scope import AssertScope

__version__ = "0.1.0"

__all__ = [
    "Assert",
    "AssertClassDef",
    "AssertConfig",
    "AssertInst",
    "AssertScope",
    "AssertionError",
    "AssertionFailure",
    "AssertionFatal",
    "ContextOverrides",
    "FormatManager",
    "FormatOptions",
    "FormatResult",
    "FormattedValue",
    "Formatter",
    "FuncDef",
    "Removable",
    "ResultAdapter",
    "ScopeContext",
    "add_assert_funcs",
    "clear_assert_funcs",
    "assert_",
    "assert_config",
    "create_assert",
    "create_context",
    "create_eval_adapter",
    "create_expr_adapter",
    "create_not_adapter",
    "deep_equal",
    "escape_ansi",
    "expect",
    "format_value",
    "get_current_scope_context",
    "get_scope_context",
    "not_op",
    "scope_context",
    "use_scope",
]
