"""
Schema — entity shapes, operations and the registry that freezes them.

    from resolvent import schema as S

    @S.entity
    @dataclass(slots=True)
    class User:
        name: str
        email: str
        id: S.ID = field(default_factory=S.hex_id)

    @S.read(name="getAllUsers")
    def get_all_users() -> list[User]:
        return users

    schema = S.registry().register(User).register(get_all_users).build()
"""

from resolvent.schema._ref import (
    ID,
    TypeRef,
    ref,
    list_of,
    optional,
)
from resolvent.schema._shape import (
    IdFactory,
    hex_id,
    Field,
    Computed,
    EntityShape,
    field,
    computed_field,
    shape,
    computed,
    entity,
    shape_of,
)
from resolvent.schema._operation import (
    MISSING,
    Arg,
    arg,
    Operation,
    operation,
    read,
    write,
    event,
)
from resolvent.schema._registry import (
    Schema,
    Registry,
    registry,
)
from resolvent.schema._shaping import render
from resolvent.schema._sdl import to_sdl

__all__ = (
    # Types
    "ID",
    "TypeRef",
    "ref",
    "list_of",
    "optional",
    # Shapes
    "IdFactory",
    "hex_id",
    "Field",
    "Computed",
    "EntityShape",
    "field",
    "computed_field",
    "shape",
    "computed",
    "entity",
    "shape_of",
    # Operations
    "MISSING",
    "Arg",
    "arg",
    "Operation",
    "operation",
    "read",
    "write",
    "event",
    # Registry
    "Schema",
    "Registry",
    "registry",
    # Output
    "render",
    "to_sdl",
)
