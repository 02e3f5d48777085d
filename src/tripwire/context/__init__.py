from tripwire.context.scope_context import (
    EXEC,
    OP_PATH,
    OPERATION,
    ContextOverrides,
    MsgSource,
    ScopeContext,
    create_context,
    get_scope_context,
)
from tripwire.context.use_scope import SCOPE_CONTEXT, get_current_scope_context, scope_context, use_scope

__all__ = [
    "EXEC",
    "OPERATION",
    "OP_PATH",
    "SCOPE_CONTEXT",
    "ContextOverrides",
    "MsgSource",
    "ScopeContext",
    "create_context",
    "get_current_scope_context",
    "get_scope_context",
    "scope_context",
    "use_scope",
]
