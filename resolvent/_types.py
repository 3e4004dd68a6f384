"""
Core types for resolvent.

Re-exports from kungfu + the operation kind and the request context.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

if TYPE_CHECKING:
    from resolvent.pubsub import Broker

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Alias
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Operation Kind
# ═══════════════════════════════════════════════════════════════════════════════


class Kind(StrEnum):
    """Namespace of an operation. Names are unique per kind."""

    READ = "read"
    WRITE = "write"
    EVENT = "event"


# ═══════════════════════════════════════════════════════════════════════════════
# Context — per-request collaborators for write handlers
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Context:
    """
    Ambient collaborators of one write request.

    Declare a parameter annotated with Context on a write handler to get it:

        @S.write()
        async def add_user(name: str, email: str, ctx: Context) -> User:
            user = User.__shape__.new(name=name, email=email)
            await ctx.publish("USER_ADDED", user)
            return user
    """

    broker: Broker
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, key: str, default: Any = None) -> Any:
        return self.extras.get(key, default)

    async def publish(self, topic: str, payload: object) -> int:
        return await self.broker.publish(topic, payload)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "Lazy",
    # Core
    "Kind",
    "Context",
)
