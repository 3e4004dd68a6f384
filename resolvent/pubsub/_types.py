"""
PubSub types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from resolvent._errors import DeliveryError


class SubscriptionState(Enum):
    """ATTACHED → DELIVERING → DETACHED (terminal)."""

    ATTACHED = auto()
    DELIVERING = auto()
    DETACHED = auto()


class ErrorReporter(Protocol):
    """Observability hook for per-subscriber delivery failures."""

    def __call__(self, error: DeliveryError) -> None: ...


@dataclass(frozen=True, slots=True)
class BrokerPolicy:
    """Per-subscription queue bound. Overflow is a DeliveryError for that subscriber."""
    max_pending: int = 1024

    def __post_init__(self) -> None:
        if self.max_pending < 1:
            raise ValueError(f"max_pending must be >= 1, got {self.max_pending}")


__all__ = ("SubscriptionState", "ErrorReporter", "BrokerPolicy")
