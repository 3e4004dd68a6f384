"""
Dispatch — resolve read/write requests and attach subscriptions.

    from resolvent import dispatch as D

    d = D.dispatcher(schema, broker)
    result = await d.invoke("write", "addUser", {"name": "Ada", "email": "a@x.com"})

    match d.subscribe("userAddedNotif"):
        case Ok(sub):
            async for user in sub: ...

Policies (handler timeout) are frozen dataclasses:
    D.dispatcher(schema, broker, D.Policy(timeout=D.Timeout(handler=2.0)))
"""

from resolvent.dispatch._coerce import coerce_args
from resolvent.dispatch._dispatcher import (
    Dispatcher,
    dispatcher,
)
from resolvent.dispatch._policy import (
    Timeout,
    Policy,
)

__all__ = (
    "coerce_args",
    "Dispatcher",
    "dispatcher",
    "Timeout",
    "Policy",
)
