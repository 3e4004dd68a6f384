"""
Type references — what an argument, field or return value holds.
"""

from __future__ import annotations

import types
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any, NewType, Union, get_args, get_origin

ID = NewType("ID", str)
"""Opaque identifier scalar. Accepts str or int on input, always str."""

SCALARS: dict[object, str] = {
    str: "String",
    int: "Int",
    float: "Float",
    bool: "Boolean",
    ID: "ID",
    Any: "JSON",
}

_LIST_ORIGINS = (list, tuple, Sequence)


# ═══════════════════════════════════════════════════════════════════════════════
# TypeRef
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypeRef:
    """
    Reference to a scalar or an entity.

    `of` is a scalar marker (str, int, float, bool, ID, Any), an entity class
    or an entity name. Entity references are resolved by name at build().
    """

    of: Any
    many: bool = False
    nullable: bool = False

    @property
    def is_scalar(self) -> bool:
        return not isinstance(self.of, str) and self.of in SCALARS

    @property
    def name(self) -> str:
        """Scalar name (String, Int, ...) or entity name."""
        if isinstance(self.of, str):
            return self.of
        if self.of in SCALARS:
            return SCALARS[self.of]
        shape = getattr(self.of, "__shape__", None)
        if shape is not None:
            return shape.name
        return getattr(self.of, "__name__", repr(self.of))

    @classmethod
    def from_hint(cls, hint: Any) -> TypeRef:
        """
        Build from a type hint.

            str            -> String!
            User | None    -> User
            list[User]     -> [User]!
            "User"         -> User!
        """
        if isinstance(hint, TypeRef):
            return hint
        if hint is None or hint is type(None):
            raise TypeError("None is not a type reference")

        origin = get_origin(hint)
        if origin is Union or origin is types.UnionType:
            members = [a for a in get_args(hint) if a is not type(None)]
            if len(members) != 1:
                raise TypeError(f"unsupported union: {hint!r}")
            return replace(cls.from_hint(members[0]), nullable=True)

        if origin in _LIST_ORIGINS:
            args = get_args(hint)
            item = args[0] if args else Any
            return TypeRef(of=cls.from_hint(item).of, many=True)

        if isinstance(hint, type) or isinstance(hint, str) or hint in SCALARS:
            return TypeRef(of=hint)

        raise TypeError(f"unsupported type hint: {hint!r}")

    def __str__(self) -> str:
        inner = f"[{self.name}]" if self.many else self.name
        return inner if self.nullable else f"{inner}!"


def ref(of: Any) -> TypeRef:
    """Non-null reference: ref(User), ref(str), ref("User")."""
    return TypeRef.from_hint(of)


def list_of(of: Any) -> TypeRef:
    return replace(TypeRef.from_hint(of), many=True)


def optional(of: Any) -> TypeRef:
    return replace(TypeRef.from_hint(of), nullable=True)


__all__ = ("ID", "SCALARS", "TypeRef", "ref", "list_of", "optional")
