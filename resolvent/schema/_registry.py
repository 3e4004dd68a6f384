"""
Registry — collects shapes and operations, freezes them into a Schema.

    schema = (
        S.registry()
        .register(User)
        .register(get_all_users)
        .register(add_user)
        .register(user_added)
        .build()
    )

Or collect everything declared in a module / resolver class:

    schema = S.registry().include(types_module, UserResolver).build()
    schema = S.registry().discover("app.resolvers", "*_resolver").build()
"""

from __future__ import annotations

import fnmatch
import importlib
import logging
import pkgutil
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType, ModuleType
from typing import Any

from resolvent._errors import (
    DuplicateOperationError,
    DuplicateShapeError,
    UnresolvedReferenceError,
)
from resolvent._types import Kind
from resolvent.schema._operation import Operation
from resolvent.schema._ref import TypeRef
from resolvent.schema._shape import EntityShape, shape_of

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Schema — frozen description
# ═══════════════════════════════════════════════════════════════════════════════


def _frozen[K, V](d: dict[K, V]) -> Mapping[K, V]:
    return MappingProxyType(dict(d))


@dataclass(frozen=True, slots=True)
class Schema:
    """
    Immutable schema description.

    Safe for unsynchronized concurrent reads. Shared by the dispatcher and
    by whatever transport exposes it.
    """

    shapes: Mapping[str, EntityShape]
    operations: Mapping[Kind, Mapping[str, Operation]]
    topics: Mapping[str, tuple[Operation, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def operation(self, kind: Kind, name: str) -> Operation | None:
        return self.operations.get(kind, {}).get(name)

    def shape_for(self, ref: TypeRef) -> EntityShape | None:
        """Registered shape a reference points at, None for scalars."""
        if ref.is_scalar:
            return None
        return self.shapes.get(ref.name)

    def all_operations(self) -> Iterator[Operation]:
        for kind in Kind:
            yield from self.operations.get(kind, {}).values()


# ═══════════════════════════════════════════════════════════════════════════════
# Registry — immutable builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Registry:
    """Builder for a Schema. Every call returns a new Registry."""

    _shapes: tuple[EntityShape, ...] = ()
    _operations: tuple[Operation, ...] = ()

    def register(self, item: object) -> Registry:
        """
        Add an EntityShape, an @entity class or an Operation.

        Raises DuplicateShapeError / DuplicateOperationError on collision.
        """
        if isinstance(item, Operation):
            for op in self._operations:
                if op.kind is item.kind and op.name == item.name:
                    raise DuplicateOperationError(item.kind.value, item.name)
            logger.debug("registered %s operation %s", item.kind.value, item.name)
            return Registry(_shapes=self._shapes, _operations=(*self._operations, item))

        found = shape_of(item)
        if found is not None:
            if any(s.name == found.name for s in self._shapes):
                raise DuplicateShapeError(found.name)
            logger.debug("registered shape %s", found.name)
            return Registry(_shapes=(*self._shapes, found), _operations=self._operations)

        raise TypeError(f"cannot register {item!r}: not a shape, entity class or operation")

    def include(self, *namespaces: object) -> Registry:
        """
        Register every entity class and operation found in modules or classes.

        The same object seen twice (e.g. an entity imported by several
        resolver modules) is registered once.
        """
        reg = self
        for ns in namespaces:
            for value in list(vars(ns).values()):
                if isinstance(value, Operation):
                    if any(op is value for op in reg._operations):
                        continue
                    reg = reg.register(value)
                elif isinstance(value, type) and (found := shape_of(value)) is not None:
                    if any(s is found for s in reg._shapes):
                        continue
                    reg = reg.register(value)
        return reg

    def discover(self, package: str, pattern: str = "*") -> Registry:
        """Import submodules of `package` matching `pattern` and include them."""
        pkg = importlib.import_module(package)
        modules: list[ModuleType] = []
        for info in pkgutil.iter_modules(getattr(pkg, "__path__", [])):
            if fnmatch.fnmatch(info.name, pattern):
                modules.append(importlib.import_module(f"{package}.{info.name}"))
        logger.debug("discovered %d module(s) in %s", len(modules), package)
        return self.include(*sorted(modules, key=lambda m: m.__name__))

    def build(self) -> Schema:
        """
        Freeze into a Schema.

        Raises UnresolvedReferenceError if any reference names an entity
        that was never registered.
        """
        shapes = {s.name: s for s in self._shapes}

        def check(owner: str, ref: TypeRef) -> None:
            if not ref.is_scalar and ref.name not in shapes:
                raise UnresolvedReferenceError(owner, ref.name)

        for s in self._shapes:
            for m in s.fields:
                check(f"{s.name}.{m.name}", m.type)

        operations: dict[Kind, dict[str, Operation]] = {k: {} for k in Kind}
        topics: dict[str, list[Operation]] = {}
        for op in self._operations:
            check(f"{op.kind.value} {op.name}", op.returns)
            for a in op.args:
                check(f"{op.kind.value} {op.name}({a.name})", a.type)
            operations[op.kind][op.name] = op
            for t in op.topics:
                topics.setdefault(t, []).append(op)

        logger.info(
            "schema built: %d shape(s), %d operation(s), %d topic(s)",
            len(shapes), len(self._operations), len(topics),
        )
        return Schema(
            shapes=_frozen(shapes),
            operations=_frozen({k: _frozen(v) for k, v in operations.items()}),
            topics=_frozen({t: tuple(ops) for t, ops in topics.items()}),
        )


def registry() -> Registry:
    """Create an empty registry: registry().register(...).build()"""
    return Registry()


__all__ = ("Schema", "Registry", "registry")
