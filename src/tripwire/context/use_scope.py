from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TypeVar

from tripwire.context.scope_context import ScopeContext

T = TypeVar("T")

SCOPE_CONTEXT: ContextVar[ScopeContext | None] = ContextVar("scope_context", default=None)


@contextmanager
def scope_context(ctx: ScopeContext | None) -> Iterator[ScopeContext | None]:
    token = SCOPE_CONTEXT.set(ctx)
    try:
        yield ctx
    finally:
        SCOPE_CONTEXT.reset(token)


def use_scope(ctx: ScopeContext | None, callback: Callable[[], T]) -> T:
    """Run ``callback`` with ``ctx`` as the current scope context.

    The previous context is restored when the callback returns or raises.
    """
    with scope_context(ctx):
        return callback()


def get_current_scope_context() -> ScopeContext | None:
    return SCOPE_CONTEXT.get()
