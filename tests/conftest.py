import pytest

from resolvent import dispatch as D
from resolvent import pubsub as P
from resolvent import schema as S
from resolvent import DeliveryError

from tests.domain import User, UserDb, build_schema


@pytest.fixture
def db() -> UserDb:
    return UserDb(users=[User("Ada", "a@x.com"), User("Grace", "g@x.com")])


@pytest.fixture
def schema(db: UserDb) -> S.Schema:
    return build_schema(db)


@pytest.fixture
def reported() -> list[DeliveryError]:
    return []


@pytest.fixture
def broker(reported: list[DeliveryError]) -> P.Broker:
    return P.Broker(on_error=reported.append)


@pytest.fixture
def dispatcher(schema: S.Schema, broker: P.Broker) -> D.Dispatcher:
    return D.dispatcher(schema, broker)
