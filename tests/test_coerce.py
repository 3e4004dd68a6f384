"""Argument coercion rules."""

from typing import Any

import pytest

from resolvent import ArgumentTypeError, Error, Ok
from resolvent import dispatch as D
from resolvent import schema as S

from tests.domain import Post, User, UserDb, build_schema


@pytest.fixture
def schema() -> S.Schema:
    return build_schema(UserDb())


def _op(*args: S.Arg) -> S.Operation:
    return S.read(lambda **kw: kw, name="echoArgs", returns=Any, args=list(args))


def _coerce(schema: S.Schema, op: S.Operation, raw: dict[str, Any]) -> Any:
    match D.coerce_args(schema, op, raw):
        case Ok(value):
            return value
        case Error(e):
            return e


@pytest.mark.parametrize(
    ("hint", "raw", "expected"),
    [
        (str, "a", "a"),
        (int, 3, 3),
        (float, 3, 3.0),
        (float, 2.5, 2.5),
        (bool, True, True),
        (S.ID, "u1", "u1"),
        (S.ID, 7, "7"),
        (list[int], (1, 2), [1, 2]),
        (Any, {"x": 1}, {"x": 1}),
    ],
)
def test_accepted_values(schema: S.Schema, hint: Any, raw: Any, expected: Any) -> None:
    op = _op(S.arg("v", hint))
    assert _coerce(schema, op, {"v": raw}) == {"v": expected}


@pytest.mark.parametrize(
    ("hint", "raw"),
    [
        (str, 1),
        (int, "1"),
        (int, True),
        (int, 1.5),
        (float, "1.5"),
        (bool, 1),
        (S.ID, 1.5),
        (list[int], 1),
        (list[int], [1, "2"]),
        (str, None),
    ],
)
def test_rejected_values_name_the_argument(schema: S.Schema, hint: Any, raw: Any) -> None:
    op = _op(S.arg("v", hint))
    err = _coerce(schema, op, {"v": raw})

    assert isinstance(err, ArgumentTypeError)
    assert err.operation == "echoArgs"
    assert err.argument == "v"


def test_missing_required_argument_fails(schema: S.Schema) -> None:
    op = _op(S.arg("name", str), S.arg("email", str))
    err = _coerce(schema, op, {"name": "Ada"})

    assert isinstance(err, ArgumentTypeError)
    assert err.argument == "email"
    assert "required" in str(err)


def test_defaults_and_nullable_arguments(schema: S.Schema) -> None:
    op = _op(S.arg("limit", int, default=10), S.arg("tag", str | None))

    assert _coerce(schema, op, {}) == {"limit": 10, "tag": None}
    assert _coerce(schema, op, {"tag": None}) == {"limit": 10, "tag": None}


def test_unknown_extra_arguments_are_ignored(schema: S.Schema) -> None:
    op = _op(S.arg("name", str))
    assert _coerce(schema, op, {"name": "Ada", "future": 1}) == {"name": "Ada"}


def test_entity_arguments(schema: S.Schema) -> None:
    op = _op(S.arg("user", User))
    ada = User("Ada", "a@x.com")

    assert _coerce(schema, op, {"user": ada}) == {"user": ada}

    built = _coerce(schema, op, {"user": {"name": "Grace", "email": "g@x.com"}})["user"]
    assert isinstance(built, User)
    assert built.flat_infos == f"Grace:g@x.com:{built.id}"

    assert isinstance(_coerce(schema, op, {"user": {"name": "Grace"}}), ArgumentTypeError)
    assert isinstance(_coerce(schema, op, {"user": "Ada"}), ArgumentTypeError)


def test_entity_mapping_fields_are_coerced(schema: S.Schema) -> None:
    op = _op(S.arg("user", User))

    err = _coerce(schema, op, {"user": {"name": 42, "email": "x@x.com"}})

    assert isinstance(err, ArgumentTypeError)
    assert err.argument == "user.name"
    assert "String" in err.reason


def test_nested_entity_mapping_becomes_an_entity(schema: S.Schema) -> None:
    op = _op(S.arg("post", Post))

    post = _coerce(
        schema, op, {"post": {"title": "Notes", "author": {"name": "Ada", "email": "a@x.com"}}}
    )["post"]

    assert isinstance(post, Post)
    assert isinstance(post.author, User)
    assert post.author.id
    assert post.author.flat_infos == f"Ada:a@x.com:{post.author.id}"

    err = _coerce(schema, op, {"post": {"title": "Notes", "author": {"name": "Ada", "email": 1}}})
    assert isinstance(err, ArgumentTypeError)
    assert err.argument == "post.author.email"
