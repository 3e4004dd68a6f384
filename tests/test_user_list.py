"""End to end: a write publishes, a subscriber receives the shaped entity."""

import asyncio

import pytest

from resolvent import Ok, Error
from resolvent import dispatch as D
from resolvent import pubsub as P
from resolvent import schema as S

from tests.domain import UserDb


@pytest.mark.asyncio
async def test_subscriber_receives_shaped_user_after_write(
    dispatcher: D.Dispatcher,
    db: UserDb,
) -> None:
    match dispatcher.subscribe("userAddedNotif"):
        case Ok(sub):
            pass
        case Error(e):
            pytest.fail(str(e))

    result = await dispatcher.invoke("write", "addUser", {"name": "Ada", "email": "a@x.com"})
    assert isinstance(result, Ok)

    notified = await asyncio.wait_for(sub.receive(), 1)
    created = db.users[-1]

    assert notified == {
        "name": "Ada",
        "email": "a@x.com",
        "id": created.id,
        "flatInfos": f"Ada:a@x.com:{created.id}",
    }
    assert notified == result.value


@pytest.mark.asyncio
async def test_write_without_subscribers_still_succeeds(dispatcher: D.Dispatcher) -> None:
    result = await dispatcher.invoke("write", "addUser", {"name": "Ada", "email": "a@x.com"})
    assert isinstance(result, Ok)


@pytest.mark.asyncio
async def test_each_subscriber_gets_its_own_copy(dispatcher: D.Dispatcher) -> None:
    subs = [dispatcher.subscribe("userAddedNotif").value for _ in range(3)]

    await dispatcher.invoke("write", "addUser", {"name": "Ada", "email": "a@x.com"})
    await dispatcher.invoke("write", "addUser", {"name": "Grace", "email": "g@x.com"})

    for sub in subs:
        names = [(await sub.receive())["name"] for _ in range(2)]
        assert names == ["Ada", "Grace"]


@pytest.mark.asyncio
async def test_rejected_write_publishes_nothing(dispatcher: D.Dispatcher) -> None:
    sub = dispatcher.subscribe("userAddedNotif").value

    result = await dispatcher.invoke("write", "addUser", {"name": "Ada"})

    assert isinstance(result, Error)
    assert sub.pending == 0


def test_sdl_export(schema: S.Schema) -> None:
    sdl = S.to_sdl(schema)

    assert "type User {\n  name: String!\n  email: String!\n  id: ID!\n  flatInfos: String!\n}" in sdl
    assert "  author: User!" in sdl
    assert "  getAllUsers: [User]!" in sdl
    assert "  getOneUserByName(name: String!): User\n" in sdl
    assert "  addUser(name: String!, email: String!): User!" in sdl
    assert "type Subscription {\n  userAddedNotif: User!\n}" in sdl


def test_sdl_renders_defaults_and_descriptions() -> None:
    @S.read(name="search")
    def search(q: str, limit: int = 10, tag: str | None = None) -> list[str]:
        """Full text search."""
        return []

    sdl = S.to_sdl(S.registry().register(search).build())

    assert '  "Full text search."\n' in sdl
    assert "  search(q: String!, limit: Int! = 10, tag: String = null): [String]!" in sdl
    assert "type Mutation" not in sdl


def test_dispatcher_factory_creates_broker(schema: S.Schema) -> None:
    d = D.dispatcher(schema)
    assert isinstance(d.broker, P.Broker)
