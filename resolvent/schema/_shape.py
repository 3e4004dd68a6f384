"""
Entity shapes — stored and computed fields.

Two ways to declare a shape:

    # Imperative
    user = S.shape(
        "User",
        S.field("name", str),
        S.field("email", str),
        S.field("id", S.ID),
        S.computed_field("flatInfos", str, lambda u: f"{u.name}:{u.email}:{u.id}"),
    )

    # From a class
    @S.entity
    @dataclass(slots=True)
    class User:
        name: str
        email: str
        id: S.ID = field(default_factory=S.hex_id)

        @S.computed(name="flatInfos")
        def flat_infos(self) -> str:
            return ":".join((self.name, self.email, self.id))
"""

from __future__ import annotations

import dataclasses
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, get_type_hints

from resolvent._errors import DuplicateFieldError, ReadOnlyFieldError, SchemaError
from resolvent.schema._ref import ID, TypeRef

type IdFactory = Callable[[], Any]
"""Returns a value unique across all instances of a shape."""


def hex_id() -> ID:
    """128 random bits as 32 lowercase hex chars."""
    return ID(secrets.token_hex(16))


# ═══════════════════════════════════════════════════════════════════════════════
# Fields
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Field:
    """Stored field: read from the instance attribute (or mapping key)."""

    name: str
    type: TypeRef
    attr: str | None = None

    def read(self, instance: object) -> Any:
        """Absent reads as None for nullable fields; otherwise AttributeError."""
        key = self.attr or self.name
        if isinstance(instance, Mapping):
            if key in instance:
                return instance[key]
        elif hasattr(instance, key):
            return getattr(instance, key)
        if self.type.nullable:
            return None
        raise AttributeError(f"{type(instance).__name__!r} has no field {key!r}")


@dataclass(frozen=True, slots=True)
class Computed:
    """Computed field: `resolve(instance)` on every read, never stored."""

    name: str
    type: TypeRef
    resolve: Callable[[Any], Any]

    def read(self, instance: object) -> Any:
        return self.resolve(instance)


type Member = Field | Computed


def field(name: str, type: Any, *, attr: str | None = None) -> Field:
    return Field(name=name, type=TypeRef.from_hint(type), attr=attr)


def computed_field(name: str, type: Any, resolve: Callable[[Any], Any]) -> Computed:
    return Computed(name=name, type=TypeRef.from_hint(type), resolve=resolve)


# ═══════════════════════════════════════════════════════════════════════════════
# EntityShape
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class EntityShape:
    """
    Ordered field description of one entity type.

    Invariants (checked in __post_init__):
    - field names are unique
    - the id field, if any, is a stored field
    """

    name: str
    fields: tuple[Member, ...]
    id_field: str | None = "id"
    ids: IdFactory = hex_id
    cls: type[Any] | None = None

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for m in self.fields:
            if m.name in seen:
                raise DuplicateFieldError(self.name, m.name)
            seen.add(m.name)
        if self.id_field is not None:
            id_member = self.member(self.id_field)
            if not isinstance(id_member, Field):
                raise SchemaError(
                    f"{self.name}: id field {self.id_field!r} must be a stored field"
                )

    @property
    def stored(self) -> tuple[Field, ...]:
        return tuple(m for m in self.fields if isinstance(m, Field))

    @property
    def computed(self) -> tuple[Computed, ...]:
        return tuple(m for m in self.fields if isinstance(m, Computed))

    def member(self, name: str) -> Member | None:
        for m in self.fields:
            if m.name == name:
                return m
        return None

    def new(self, **values: Any) -> Any:
        """
        Construct an instance.

        Assigns the id field from `ids` when not given. Computed names
        are rejected.
        """
        for m in self.computed:
            if m.name in values:
                raise ReadOnlyFieldError(self.name, m.name)
        if self.id_field is not None and values.get(self.id_field) is None:
            values[self.id_field] = self.ids()

        if self.cls is not None:
            kwargs = {}
            for f in self.stored:
                if f.name in values:
                    kwargs[f.attr or f.name] = values.pop(f.name)
            kwargs.update(values)
            return self.cls(**kwargs)
        return SimpleNamespace(**values)

    def read(self, instance: object, name: str) -> Any:
        m = self.member(name)
        if m is None:
            raise KeyError(f"{self.name} has no field {name!r}")
        return m.read(instance)


def shape(
    name: str,
    *members: Member,
    id_field: str | None = "id",
    ids: IdFactory = hex_id,
    cls: type[Any] | None = None,
) -> EntityShape:
    """Declare a shape imperatively."""
    return EntityShape(name=name, fields=members, id_field=id_field, ids=ids, cls=cls)


# ═══════════════════════════════════════════════════════════════════════════════
# Class declaration — @entity + @computed
# ═══════════════════════════════════════════════════════════════════════════════


class computed[T]:
    """
    Read-only computed field on an entity class.

        @S.computed(name="flatInfos")
        def flat_infos(self) -> str: ...

    Behaves like a property on instances; assignment raises ReadOnlyFieldError.
    """

    def __init__(
        self,
        fn: Callable[[Any], T] | None = None,
        *,
        name: str | None = None,
        returns: Any = None,
    ) -> None:
        self.fn = fn
        self.name = name
        self.returns = returns
        self.owner: str = "?"

    def __call__(self, fn: Callable[[Any], T]) -> computed[T]:
        self.fn = fn
        return self

    def __set_name__(self, owner: type[Any], attr: str) -> None:
        self.owner = owner.__name__
        if self.name is None:
            self.name = attr

    def __get__(self, instance: object, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        if self.fn is None:
            raise AttributeError(f"computed field {self.name!r} has no getter")
        return self.fn(instance)

    def __set__(self, instance: object, value: object) -> None:
        raise ReadOnlyFieldError(self.owner, self.name or "?")

    def to_member(self) -> Computed:
        if self.fn is None or self.name is None:
            raise SchemaError(f"{self.owner}: computed field without getter")
        returns = self.returns
        if returns is None:
            returns = get_type_hints(self.fn).get("return")
        if returns is None:
            raise SchemaError(f"{self.owner}.{self.name}: missing return type")
        return Computed(name=self.name, type=TypeRef.from_hint(returns), resolve=self.fn)


def _class_members(cls: type[Any]) -> tuple[Member, ...]:
    # The class is not bound in its module yet: self-references need it in locals
    hints = get_type_hints(cls, localns={cls.__name__: cls})
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    else:
        names = [n for n in getattr(cls, "__annotations__", {}) if not n.startswith("_")]

    members: list[Member] = [
        Field(name=n, type=TypeRef.from_hint(hints[n])) for n in names
    ]
    for klass in reversed(cls.__mro__):
        for value in vars(klass).values():
            if isinstance(value, computed):
                members.append(value.to_member())
    return tuple(members)


def entity[C: type[Any]](
    cls: C | None = None,
    *,
    name: str | None = None,
    id_field: str | None = "id",
    ids: IdFactory = hex_id,
) -> Any:
    """
    Attach an EntityShape to a class as `__shape__`.

    Stored fields come from dataclass fields (or annotations), computed
    fields from @computed descriptors. Usable bare or with options.
    """

    def wrap(c: C) -> C:
        c.__shape__ = EntityShape(  # type: ignore[attr-defined]
            name=name or c.__name__,
            fields=_class_members(c),
            id_field=id_field,
            ids=ids,
            cls=c,
        )
        return c

    if cls is None:
        return wrap
    return wrap(cls)


def shape_of(obj: object) -> EntityShape | None:
    """Shape of an EntityShape, an entity class or an entity instance."""
    if isinstance(obj, EntityShape):
        return obj
    found = getattr(obj, "__shape__", None)
    return found if isinstance(found, EntityShape) else None


__all__ = (
    "IdFactory",
    "hex_id",
    "Field",
    "Computed",
    "Member",
    "field",
    "computed_field",
    "EntityShape",
    "shape",
    "computed",
    "entity",
    "shape_of",
)
