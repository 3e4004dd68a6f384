"""
resolvent — declarative schema, resolver dispatch and topic subscriptions.

    from resolvent import schema as S     # Shapes, operations, registry
    from resolvent import dispatch as D   # Request resolution
    from resolvent import pubsub as P     # Publish / subscribe
"""

from resolvent._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    Lazy,
    Kind,
    Context,
)
from resolvent._errors import (
    ResolventError,
    SchemaError,
    DuplicateShapeError,
    DuplicateOperationError,
    UnresolvedReferenceError,
    DuplicateFieldError,
    ReadOnlyFieldError,
    InvalidOperationError,
    DispatchError,
    UnknownOperationError,
    ArgumentTypeError,
    HandlerError,
    OperationTimeoutError,
    ShapingError,
    PubSubError,
    UnknownTopicBindingError,
    DeliveryError,
    SubscriptionClosedError,
    BrokerClosedError,
)
from resolvent import schema
from resolvent import pubsub
from resolvent import dispatch
from resolvent import lift

__version__ = "0.1.0"

__all__ = (
    "schema",
    "pubsub",
    "dispatch",
    "lift",
    # Types
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "Lazy",
    "Kind",
    "Context",
    # Errors
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
