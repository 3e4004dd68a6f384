"""
Broker — topic-keyed publish/subscribe with per-subscriber isolation.

Each Subscription owns a bounded FIFO queue. publish() only enqueues the
raw payload; the event source transform and rendering run in the
subscriber's own task when it receives. A slow or failing subscriber
therefore never delays or breaks delivery to the others.

    broker = P.Broker()
    sub = broker.subscribe("USER_ADDED", user_added)

    await broker.publish("USER_ADDED", user)
    value = await sub.receive()

    async for value in sub:   # ends when unsubscribed
        ...
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable, Iterable
from typing import Any

from kungfu import Ok, Error

from resolvent import lift
from resolvent._errors import (
    BrokerClosedError,
    DeliveryError,
    SubscriptionClosedError,
    UnknownTopicBindingError,
)
from resolvent._types import Kind
from resolvent.pubsub._types import BrokerPolicy, ErrorReporter, SubscriptionState
from resolvent.schema import Operation

logger = logging.getLogger(__name__)

type Render = Callable[[Any], Any]

_CLOSED = object()


def _identity(value: Any) -> Any:
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Subscription — live handle
# ═══════════════════════════════════════════════════════════════════════════════


class Subscription:
    """
    Live binding of one consumer to topics + an event source.

    Consume with `await receive()` or `async for`. Use as an async context
    manager to unsubscribe on exit.
    """

    __slots__ = ("id", "topics", "source", "_render", "_queue", "_state", "_broker")

    def __init__(
        self,
        id: int,
        topics: frozenset[str],
        source: Operation,
        render: Render,
        broker: Broker,
        max_pending: int,
    ) -> None:
        self.id = id
        self.topics = topics
        self.source = source
        self._render = render
        self._broker = broker
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max_pending + 1)
        self._state = SubscriptionState.ATTACHED

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is not SubscriptionState.DETACHED

    @property
    def pending(self) -> int:
        """Payloads queued but not yet received."""
        return self._queue.qsize()

    def _offer(self, topic: str, payload: object, max_pending: int) -> bool:
        """Enqueue without waiting. Called by the broker only."""
        if not self.active:
            return False
        # One slot stays free for the close sentinel
        if self._queue.qsize() >= max_pending:
            self._broker.report(DeliveryError(topic, self.id, asyncio.QueueFull()))
            return False
        self._queue.put_nowait((topic, payload))
        self._state = SubscriptionState.DELIVERING
        return True

    def _detach(self) -> None:
        self._state = SubscriptionState.DETACHED
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass  # consumer is not waiting; it sees DETACHED on its next receive

    async def receive(self) -> Any:
        """
        Next transformed value.

        Transform failures are reported as DeliveryError and skipped.
        Raises SubscriptionClosedError once detached.
        """
        while True:
            if not self.active:
                raise SubscriptionClosedError(self.id)
            item = await self._queue.get()
            if item is _CLOSED or not self.active:
                raise SubscriptionClosedError(self.id)

            topic, payload = item
            result = await lift.call(
                self.source.handler,
                (payload,),
                on_error=lambda cause, t=topic: DeliveryError(t, self.id, cause),
            )
            match result:
                case Ok(value):
                    try:
                        return self._render(value)
                    except Exception as e:
                        self._broker.report(DeliveryError(topic, self.id, e))
                case Error(err):
                    self._broker.report(err)

    def close(self) -> bool:
        return self._broker.unsubscribe(self)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Any:
        try:
            return await self.receive()
        except SubscriptionClosedError:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        topics = ",".join(sorted(self.topics))
        return f"<Subscription #{self.id} {self.source.name} on {topics} {self._state.name}>"


# ═══════════════════════════════════════════════════════════════════════════════
# Broker
# ═══════════════════════════════════════════════════════════════════════════════


class Broker:
    """
    In-process topic broker. Safe within a single asyncio event loop.

    Topic buckets are only mutated in synchronous sections, so the loop
    itself is the single writer; publish() walks a snapshot.
    """

    def __init__(
        self,
        policy: BrokerPolicy = BrokerPolicy(),
        on_error: ErrorReporter | None = None,
    ) -> None:
        self.policy = policy
        self._on_error = on_error
        self._topics: dict[str, list[Subscription]] = {}
        self._ids = itertools.count(1)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(
        self,
        topic: str | Iterable[str],
        source: Operation,
        render: Render | None = None,
    ) -> Subscription:
        """
        Attach a new subscription.

        Raises UnknownTopicBindingError if `source` is not an event source
        bound to every requested topic, BrokerClosedError once closed.
        """
        if self._closed:
            raise BrokerClosedError()

        topics = frozenset([topic] if isinstance(topic, str) else topic)
        if not topics:
            raise ValueError("subscribe() needs at least one topic")
        for t in sorted(topics):
            if source.kind is not Kind.EVENT or t not in source.topics:
                raise UnknownTopicBindingError(t, source.name)

        sub = Subscription(
            id=next(self._ids),
            topics=topics,
            source=source,
            render=render or _identity,
            broker=self,
            max_pending=self.policy.max_pending,
        )
        for t in topics:
            self._topics.setdefault(t, []).append(sub)
        logger.debug("subscription #%d attached to %s", sub.id, sorted(topics))
        return sub

    def unsubscribe(self, sub: Subscription) -> bool:
        """Detach. Idempotent: True only for the call that detached."""
        if not sub.active:
            return False
        for t in sub.topics:
            bucket = self._topics.get(t)
            if bucket is None:
                continue
            if sub in bucket:
                bucket.remove(sub)
            if not bucket:
                del self._topics[t]
        sub._detach()
        logger.debug("subscription #%d detached", sub.id)
        return True

    async def publish(self, topic: str, payload: object) -> int:
        """Queue `payload` for every live subscription on `topic`. Returns the count."""
        delivered = 0
        for sub in tuple(self._topics.get(topic, ())):
            if sub._offer(topic, payload, self.policy.max_pending):
                delivered += 1
        logger.debug("published %s to %d subscription(s)", topic, delivered)
        return delivered

    def subscriptions(self, topic: str | None = None) -> tuple[Subscription, ...]:
        """Snapshot of live subscriptions, optionally for one topic."""
        if topic is not None:
            return tuple(self._topics.get(topic, ()))
        seen: dict[int, Subscription] = {}
        for bucket in self._topics.values():
            for sub in bucket:
                seen.setdefault(sub.id, sub)
        return tuple(seen.values())

    def report(self, error: DeliveryError) -> None:
        """Hand a delivery failure to the reporter. Never raises."""
        logger.warning("%s", error, exc_info=error.cause if isinstance(error.cause, BaseException) else None)
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception:
            logger.exception("error reporter failed for subscription #%d", error.subscription)

    def close(self) -> None:
        """Detach every subscription and refuse new ones."""
        for sub in self.subscriptions():
            self.unsubscribe(sub)
        self._closed = True

    async def __aenter__(self) -> Broker:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()


__all__ = ("Render", "Subscription", "Broker")
