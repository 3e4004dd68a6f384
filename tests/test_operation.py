"""Operation declaration and signature inference."""

import pytest

from resolvent import Context, InvalidOperationError, Kind
from resolvent import schema as S

from tests.domain import User


def test_read_infers_arguments_and_return_type() -> None:
    @S.read(name="findUsers")
    def find_users(name: str, limit: int = 10, tag: str | None = None) -> list[User]:
        """Find users by name."""
        return []

    assert find_users.kind is Kind.READ
    assert find_users.name == "findUsers"
    assert [a.name for a in find_users.args] == ["name", "limit", "tag"]
    assert [a.required for a in find_users.args] == [True, False, False]
    assert find_users.arg("limit").default == 10
    assert str(find_users.returns) == "[User]!"
    assert find_users.context_param is None
    assert find_users.description == "Find users by name."


def test_bare_decorator_uses_function_name() -> None:
    @S.read
    def ping() -> str:
        return "pong"

    assert ping.name == "ping"
    assert ping() == "pong"


def test_write_context_parameter_is_not_an_argument() -> None:
    @S.write()
    async def rename(user_id: S.ID, name: str, ctx: Context) -> User | None:
        return None

    assert [a.name for a in rename.args] == ["user_id", "name"]
    assert rename.context_param == "ctx"
    assert rename.returns.nullable


def test_only_write_handlers_receive_context() -> None:
    with pytest.raises(InvalidOperationError):

        @S.read()
        def peek(ctx: Context) -> str:
            return ""


def test_event_source_binds_topics_and_takes_one_payload() -> None:
    @S.event("A", "B", name="changes")
    def changes(payload: User) -> User:
        return payload

    assert changes.kind is Kind.EVENT
    assert changes.topics == ("A", "B")
    assert changes.args == ()

    with pytest.raises(InvalidOperationError):

        @S.event("A")
        def two(a: User, b: User) -> User:
            return a


def test_event_requires_a_topic() -> None:
    with pytest.raises(ValueError):
        S.event()


def test_explicit_returns_and_args_override_inference() -> None:
    def handler(**kwargs: object) -> object:
        return kwargs

    op = S.read(
        handler,
        name="raw",
        returns=S.optional("User"),
        args=[S.arg("q", str), S.arg("page", int, default=1)],
    )
    assert [a.name for a in op.args] == ["q", "page"]
    assert str(op.returns) == "User"


def test_missing_types_are_rejected() -> None:
    with pytest.raises(InvalidOperationError):
        S.read(lambda name: name, name="untyped")

    def no_return(name: str):  # type: ignore[no-untyped-def]
        return name

    with pytest.raises(InvalidOperationError):
        S.read(no_return)


def test_duplicate_argument_names_are_rejected() -> None:
    with pytest.raises(InvalidOperationError):
        S.read(
            lambda **kw: None,
            name="dup",
            returns=str,
            args=[S.arg("q", str), S.arg("q", int)],
        )


def test_topics_only_on_event_sources() -> None:
    with pytest.raises(InvalidOperationError):
        S.Operation(
            kind=Kind.READ,
            name="bad",
            handler=lambda: None,
            returns=S.ref(str),
            topics=("T",),
        )
