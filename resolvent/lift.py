"""
Lift — run a handler into a LazyCoroResult.

Handlers may be sync or async and may return a plain value or a kungfu
Result. `call` normalizes all of that through combinators.lift, so callers
always get one LazyCoroResult and never see a raised exception.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from kungfu import LazyCoroResult, Ok, Error

from combinators.lift import catching_async


class _Failed(Exception):
    """Carries an Error(...) value returned by a handler."""

    def __init__(self, value: object) -> None:
        super().__init__(value)
        self.value = value


def call[E](
    handler: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    on_error: Callable[[object], E],
) -> LazyCoroResult[Any, E]:
    """
    Lazily call `handler(*args, **kwargs)`.

    on_error receives either the raised exception or the error carried by
    a returned Error(...). Compose with combinators (e.g. C.timeout) for
    time budgets.

    Example:
        result = await call(get_user, kwargs={"name": "Ada"}, on_error=str)
    """
    kw = dict(kwargs or {})

    async def run() -> Any:
        value = handler(*args, **kw)
        if inspect.isawaitable(value):
            value = await value
        match value:
            case Ok(v):
                return v
            case Error(e):
                raise _Failed(e)
            case _:
                return value

    def unwrap(exc: Exception) -> E:
        return on_error(exc.value if isinstance(exc, _Failed) else exc)

    return catching_async(run, on_error=unwrap)


__all__ = ("call",)
