"""
User list — the whole stack in one process.

Run: python -m examples.user_list.main
"""

import asyncio
import logging

from resolvent import dispatch as D
from resolvent import pubsub as P
from resolvent import schema as S
from resolvent import Ok, Error

from examples._infra import banner, run, show


def bootstrap() -> D.Dispatcher:
    schema = S.registry().discover("examples.user_list.resolvers", "*_resolver").build()
    return D.dispatcher(schema, P.Broker())


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    d = bootstrap()

    banner("Schema")
    print(S.to_sdl(d.schema))

    banner("Subscription + mutation")
    match d.subscribe("userAddedNotif"):
        case Ok(sub):
            pass
        case Error(e):
            raise SystemExit(str(e))

    async with sub:
        show("addUser", await d.invoke("write", "addUser", {"name": "Linus", "email": "l@x.org"}))
        print(f"   notified → {await asyncio.wait_for(sub.receive(), 1)}")

    banner("Queries")
    show("getOneUserByName", await d.invoke("read", "getOneUserByName", {"name": "Ada"}))
    show("getOneUserByName", await d.invoke("read", "getOneUserByName", {"name": "Nobody"}))
    show("getAllUsers", await d.invoke("read", "getAllUsers"))
    show("bad args", await d.invoke("read", "getOneUserByName", {"name": 42}))
    show("unknown", await d.invoke("read", "getUserById", {"id": "x"}))


if __name__ == "__main__":
    run(main)
