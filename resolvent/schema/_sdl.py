"""
SDL export — GraphQL schema text for transport bindings.

    print(S.to_sdl(schema))

    type User {
      name: String!
      email: String!
      id: ID!
      flatInfos: String!
    }

    type Query {
      getAllUsers: [User]!
      getOneUserByName(name: String!): User
    }
"""

from __future__ import annotations

import json

from resolvent._types import Kind
from resolvent.schema._operation import MISSING, Operation
from resolvent.schema._registry import Schema

_ROOTS: dict[Kind, str] = {
    Kind.READ: "Query",
    Kind.WRITE: "Mutation",
    Kind.EVENT: "Subscription",
}


def _default(value: object) -> str:
    if value is None:
        return "null"
    return json.dumps(value, default=str)


def _signature(op: Operation) -> str:
    if not op.args:
        return op.name
    parts = []
    for a in op.args:
        part = f"{a.name}: {a.type}"
        if a.default is not MISSING:
            part += f" = {_default(a.default)}"
        parts.append(part)
    return f"{op.name}({', '.join(parts)})"


def _description(text: str | None, indent: str) -> list[str]:
    if not text:
        return []
    first = text.strip().splitlines()[0].replace('"', '\\"')
    return [f'{indent}"{first}"']


def to_sdl(schema: Schema) -> str:
    """Render the schema as GraphQL SDL."""
    blocks: list[str] = []

    for shape in schema.shapes.values():
        lines = [f"type {shape.name} {{"]
        lines += [f"  {m.name}: {m.type}" for m in shape.fields]
        lines.append("}")
        blocks.append("\n".join(lines))

    for kind, root in _ROOTS.items():
        ops = schema.operations.get(kind, {})
        if not ops:
            continue
        lines = [f"type {root} {{"]
        for op in ops.values():
            lines += _description(op.description, "  ")
            lines.append(f"  {_signature(op)}: {op.returns}")
        lines.append("}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks) + "\n"


__all__ = ("to_sdl",)
