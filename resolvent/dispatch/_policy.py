"""
Dispatch policy — thin configuration for the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Timeout:
    """Handler timeout budget (seconds), applied via combinators.timeout. None disables it."""
    handler: float | None = None


@dataclass(frozen=True, slots=True)
class Policy:
    """Full dispatcher policy. Operation.timeout overrides timeout.handler."""
    timeout: Timeout = Timeout()

    def timeout_for(self, operation_timeout: float | None) -> float | None:
        if operation_timeout is not None:
            return operation_timeout
        return self.timeout.handler


__all__ = ("Timeout", "Policy")
