"""
Dispatcher — resolve (kind, name, args) against a Schema.

Request-time failures are returned, never raised:

    match await dispatcher.invoke("read", "getOneUserByName", {"name": "Ada"}):
        case Ok(user):
            ...                       # shaped dict or None
        case Error(UnknownOperationError() | ArgumentTypeError() as e):
            ...                       # rejected before the handler ran
        case Error(HandlerError(cause=cause)):
            ...                       # business failure, passed through
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Any

import combinators as C
from kungfu import LazyCoroResult, Ok, Error, Result

from resolvent import lift
from resolvent._errors import (
    BrokerClosedError,
    DispatchError,
    HandlerError,
    OperationTimeoutError,
    ShapingError,
    UnknownOperationError,
    UnknownTopicBindingError,
)
from resolvent._types import Context, Kind
from resolvent.dispatch._coerce import coerce_args
from resolvent.dispatch._policy import Policy
from resolvent.pubsub import Broker, Subscription
from resolvent.schema import Operation, Schema, render

logger = logging.getLogger(__name__)


def _kind(kind: Kind | str) -> Kind | None:
    try:
        return Kind(kind)
    except ValueError:
        return None


@dataclass(slots=True)
class Dispatcher:
    """
    Executes operations of one Schema.

    1. Look up (kind, name)
    2. Coerce arguments
    3. Await the handler (write handlers may receive a Context)
    4. Shape the result against the declared return type
    """

    schema: Schema
    broker: Broker
    policy: Policy = field(default_factory=Policy)

    def context(self, **extras: Any) -> Context:
        """Request context bound to this dispatcher's broker."""
        return Context(broker=self.broker, extras=MappingProxyType(extras))

    def lookup(self, kind: Kind | str, name: str) -> Result[Operation, UnknownOperationError]:
        k = _kind(kind)
        op = self.schema.operation(k, name) if k is not None else None
        if op is None:
            return Error(UnknownOperationError(str(kind), name))
        return Ok(op)

    async def invoke(
        self,
        kind: Kind | str,
        name: str,
        raw_args: Mapping[str, Any] | None = None,
        context: Context | None = None,
    ) -> Result[Any, DispatchError]:
        """
        Execute a read or write operation.

        Event sources are not invokable: subscribe() to them instead.
        """
        k = _kind(kind)
        if k is Kind.EVENT:
            return Error(UnknownOperationError(Kind.EVENT.value, name))

        match self.lookup(kind, name):
            case Ok(found):
                op = found
            case Error(e):
                logger.debug("rejected: %s", e)
                return Error(e)

        match coerce_args(self.schema, op, raw_args):
            case Ok(coerced):
                kwargs = coerced
            case Error(e):
                logger.debug("rejected: %s", e)
                return Error(e)

        if op.context_param is not None:
            kwargs[op.context_param] = context if context is not None else self.context()

        timeout = self.policy.timeout_for(op.timeout)
        logger.debug("invoking %s %s", op.kind.value, op.name)
        call = lift.call(op.handler, kwargs=kwargs, on_error=partial(HandlerError, op.name))
        if timeout is not None:
            call = C.timeout(call, seconds=timeout)
        match await call:
            case Ok(value):
                return self._shape(op, value)
            case Error(C.TimeoutError() as e):
                logger.debug("%s %s timed out after %ss", op.kind.value, op.name, e.seconds)
                return Error(OperationTimeoutError(op.name, timeout))
            case Error(e):
                logger.debug("%s %s failed: %s", op.kind.value, op.name, e)
                return Error(e)

    def __call__(
        self,
        kind: Kind | str,
        name: str,
        raw_args: Mapping[str, Any] | None = None,
        context: Context | None = None,
    ) -> LazyCoroResult[Any, DispatchError]:
        """Execute operation (returns awaitable)."""
        async def inner() -> Result[Any, DispatchError]:
            return await self.invoke(kind, name, raw_args, context)
        return LazyCoroResult(inner)

    def subscribe(
        self,
        name: str,
        topic: str | None = None,
    ) -> Result[Subscription, DispatchError]:
        """
        Attach to an event source.

        Subscribes to `topic`, or to every topic the source is bound to.
        Delivered values are shaped against the source's return type.
        """
        op = self.schema.operation(Kind.EVENT, name)
        if op is None:
            return Error(UnknownOperationError(Kind.EVENT.value, name))
        try:
            sub = self.broker.subscribe(
                topic if topic is not None else op.topics,
                op,
                render=partial(render, self.schema, op.returns),
            )
        except (UnknownTopicBindingError, BrokerClosedError) as e:
            return Error(e)
        return Ok(sub)

    def _shape(self, op: Operation, value: Any) -> Result[Any, DispatchError]:
        try:
            return Ok(render(self.schema, op.returns, value))
        except ShapingError as e:
            return Error(e)
        except Exception as e:
            # Computed field accessor failed
            return Error(ShapingError(op.returns.name, repr(e)))


def dispatcher(schema: Schema, broker: Broker | None = None, policy: Policy | None = None) -> Dispatcher:
    """Create a dispatcher; a fresh Broker is made when none is given."""
    return Dispatcher(
        schema=schema,
        broker=broker if broker is not None else Broker(),
        policy=policy if policy is not None else Policy(),
    )


__all__ = ("Dispatcher", "dispatcher")
