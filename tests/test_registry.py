"""Registry: registration, validation at build(), frozen schema."""

import pytest

from resolvent import (
    DuplicateOperationError,
    DuplicateShapeError,
    Kind,
    UnresolvedReferenceError,
)
from resolvent import schema as S

from tests.domain import Post, User, UserDb, build_schema, user_operations


def test_build_collects_shapes_operations_and_topics() -> None:
    schema = build_schema(UserDb())

    assert list(schema.shapes) == ["User", "Post"]
    assert set(schema.operations[Kind.READ]) == {"getAllUsers", "getOneUserByName"}
    assert set(schema.operations[Kind.WRITE]) == {"addUser"}
    assert [op.name for op in schema.topics["USER_ADDED"]] == ["userAddedNotif"]
    assert schema.operation(Kind.READ, "getAllUsers") is not None
    assert schema.operation(Kind.WRITE, "getAllUsers") is None


def test_registry_is_immutable_builder() -> None:
    empty = S.registry()
    with_user = empty.register(User)

    assert empty.build().shapes == {}
    assert list(with_user.build().shapes) == ["User"]


def test_duplicate_shape_name_fails() -> None:
    clone = S.shape("User", S.field("id", S.ID))
    with pytest.raises(DuplicateShapeError) as exc:
        S.registry().register(User).register(clone).build()
    assert exc.value.name == "User"


def test_duplicate_operation_name_fails_within_kind_only() -> None:
    @S.read(name="users")
    def read_users() -> list[User]:
        return []

    @S.read(name="users")
    def read_users_again() -> list[User]:
        return []

    @S.write(name="users")
    def write_users() -> list[User]:
        return []

    reg = S.registry().register(User).register(read_users).register(write_users)
    assert reg.build().operation(Kind.WRITE, "users") is write_users

    with pytest.raises(DuplicateOperationError) as exc:
        reg.register(read_users_again)
    assert (exc.value.kind, exc.value.name) == ("read", "users")


def test_unresolved_return_type_fails_build() -> None:
    reg = S.registry()
    for op in user_operations(UserDb()):
        reg = reg.register(op)

    with pytest.raises(UnresolvedReferenceError) as exc:
        reg.build()
    assert exc.value.type_name == "User"


def test_unresolved_argument_type_fails_build() -> None:
    by_ref = S.read(
        lambda **kw: "",
        name="byRef",
        returns=str,
        args=[S.arg("ref", "Missing")],
    )

    with pytest.raises(UnresolvedReferenceError) as exc:
        S.registry().register(by_ref).build()
    assert exc.value.type_name == "Missing"
    assert "byRef" in exc.value.owner


def test_unresolved_field_type_fails_build() -> None:
    # Post.author references User
    with pytest.raises(UnresolvedReferenceError) as exc:
        S.registry().register(Post).build()
    assert exc.value.owner == "Post.author"


def test_register_rejects_unknown_items() -> None:
    with pytest.raises(TypeError):
        S.registry().register(object())


def test_schema_is_read_only() -> None:
    schema = build_schema(UserDb())
    with pytest.raises(TypeError):
        schema.shapes["Other"] = User.__shape__  # type: ignore[index]
    with pytest.raises(TypeError):
        schema.operations[Kind.READ]["x"] = None  # type: ignore[index]
    with pytest.raises(AttributeError):
        schema.shapes = {}  # type: ignore[misc]


def test_include_collects_from_modules_and_classes() -> None:
    from tests.sample_resolvers import post_resolver, user_resolver

    class AdminResolver:
        @S.read(name="adminCount")
        def admin_count() -> int:  # type: ignore[misc]
            return 0

    schema = S.registry().include(user_resolver, post_resolver, AdminResolver).build()

    assert set(schema.shapes) == {"User", "Post"}
    assert set(schema.operations[Kind.READ]) == {
        "countUsers",
        "firstUser",
        "latestPost",
        "adminCount",
    }


def test_discover_imports_matching_submodules() -> None:
    schema = S.registry().discover("tests.sample_resolvers", "*_resolver").build()

    assert set(schema.operations[Kind.READ]) == {"countUsers", "firstUser", "latestPost"}
    assert "notDiscovered" not in schema.operations[Kind.READ]
