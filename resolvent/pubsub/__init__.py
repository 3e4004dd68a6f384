"""
PubSub — topic broker with isolated, ordered delivery per subscriber.

    from resolvent import pubsub as P

    broker = P.Broker(P.BrokerPolicy(max_pending=256), on_error=report)
    sub = broker.subscribe("USER_ADDED", user_added)
    await broker.publish("USER_ADDED", user)
    value = await sub.receive()
"""

from resolvent.pubsub._types import (
    SubscriptionState,
    ErrorReporter,
    BrokerPolicy,
)
from resolvent.pubsub._broker import (
    Render,
    Subscription,
    Broker,
)

__all__ = (
    "SubscriptionState",
    "ErrorReporter",
    "BrokerPolicy",
    "Render",
    "Subscription",
    "Broker",
)
