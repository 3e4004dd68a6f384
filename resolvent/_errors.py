"""
Error taxonomy.

Schema errors are raised while building and abort startup.
Dispatch errors are returned as Error(...) values from the dispatcher.
Delivery errors are reported to the broker's reporter, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass


class ResolventError(Exception):
    """Base class for every resolvent error."""


# ═══════════════════════════════════════════════════════════════════════════════
# Schema — build time, fatal
# ═══════════════════════════════════════════════════════════════════════════════


class SchemaError(ResolventError):
    """Invalid declaration. Raised, never returned."""


@dataclass(frozen=True, slots=True)
class DuplicateShapeError(SchemaError):
    name: str

    def __str__(self) -> str:
        return f"entity shape already registered: {self.name}"


@dataclass(frozen=True, slots=True)
class DuplicateOperationError(SchemaError):
    kind: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind} operation already registered: {self.name}"


@dataclass(frozen=True, slots=True)
class UnresolvedReferenceError(SchemaError):
    owner: str
    type_name: str

    def __str__(self) -> str:
        return f"{self.owner} references unregistered entity {self.type_name!r}"


@dataclass(frozen=True, slots=True)
class DuplicateFieldError(SchemaError):
    shape: str
    field: str

    def __str__(self) -> str:
        return f"{self.shape}.{self.field} declared twice"


@dataclass(frozen=True, slots=True)
class ReadOnlyFieldError(SchemaError):
    shape: str
    field: str

    def __str__(self) -> str:
        return f"{self.shape}.{self.field} is computed and cannot be assigned"


@dataclass(frozen=True, slots=True)
class InvalidOperationError(SchemaError):
    name: str
    reason: str

    def __str__(self) -> str:
        return f"invalid operation {self.name}: {self.reason}"


# ═══════════════════════════════════════════════════════════════════════════════
# Dispatch — request time, scoped to one request
# ═══════════════════════════════════════════════════════════════════════════════


class DispatchError(ResolventError):
    """Request rejected or failed. Returned as Error(...)."""


@dataclass(frozen=True, slots=True)
class UnknownOperationError(DispatchError):
    kind: str
    name: str

    def __str__(self) -> str:
        return f"unknown {self.kind} operation: {self.name}"


@dataclass(frozen=True, slots=True)
class ArgumentTypeError(DispatchError):
    operation: str
    argument: str
    reason: str

    def __str__(self) -> str:
        return f"{self.operation}: argument {self.argument!r} {self.reason}"


@dataclass(frozen=True, slots=True)
class HandlerError(DispatchError):
    operation: str
    cause: object

    def __str__(self) -> str:
        return f"{self.operation} failed: {self.cause!r}"


@dataclass(frozen=True, slots=True)
class OperationTimeoutError(DispatchError):
    operation: str
    seconds: float

    def __str__(self) -> str:
        return f"{self.operation} timed out after {self.seconds}s"


@dataclass(frozen=True, slots=True)
class ShapingError(DispatchError):
    type_name: str
    reason: str

    def __str__(self) -> str:
        return f"cannot shape {self.type_name}: {self.reason}"


# ═══════════════════════════════════════════════════════════════════════════════
# PubSub
# ═══════════════════════════════════════════════════════════════════════════════


class PubSubError(ResolventError):
    """Subscription-side failure."""


@dataclass(frozen=True, slots=True)
class UnknownTopicBindingError(PubSubError, DispatchError):
    topic: str
    source: str

    def __str__(self) -> str:
        return f"{self.source} is not bound to topic {self.topic!r}"


@dataclass(frozen=True, slots=True)
class DeliveryError(PubSubError):
    topic: str
    subscription: int
    cause: object

    def __str__(self) -> str:
        return f"delivery of {self.topic!r} to subscription #{self.subscription} failed: {self.cause!r}"


@dataclass(frozen=True, slots=True)
class SubscriptionClosedError(PubSubError):
    subscription: int

    def __str__(self) -> str:
        return f"subscription #{self.subscription} is detached"


@dataclass(frozen=True, slots=True)
class BrokerClosedError(PubSubError, DispatchError, RuntimeError):
    def __str__(self) -> str:
        return "broker is closed"


__all__ = (
    "ResolventError",
    "SchemaError",
    "DuplicateShapeError",
    "DuplicateOperationError",
    "UnresolvedReferenceError",
    "DuplicateFieldError",
    "ReadOnlyFieldError",
    "InvalidOperationError",
    "DispatchError",
    "UnknownOperationError",
    "ArgumentTypeError",
    "HandlerError",
    "OperationTimeoutError",
    "ShapingError",
    "PubSubError",
    "UnknownTopicBindingError",
    "DeliveryError",
    "SubscriptionClosedError",
    "BrokerClosedError",
)
