"""
Argument coercion — raw request values against declared argument types.

Input rules follow GraphQL scalar coercion:
    String   str
    ID       str | int  -> str
    Int      int (not bool)
    Float    int | float -> float
    Boolean  bool
Lists accept list or tuple. Entity arguments accept an instance of the
entity class or a mapping of stored fields, each coerced by its field type.

Unknown extra arguments are ignored; missing required ones are rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from kungfu import Result, Ok, Error

from resolvent._errors import ArgumentTypeError, SchemaError
from resolvent.schema import ID, MISSING, EntityShape, Operation, Schema, TypeRef


class _Mismatch(Exception):
    def __init__(self, reason: str, path: tuple[str, ...] = ()) -> None:
        super().__init__(reason)
        self.reason = reason
        self.path = path

    def under(self, name: str) -> _Mismatch:
        return _Mismatch(self.reason, (name, *self.path))


def _scalar(ref: TypeRef, value: Any) -> Any:
    of = ref.of
    if of is Any:
        return value
    if of is bool:
        if isinstance(value, bool):
            return value
    elif of is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif of is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif of is ID:
        if isinstance(value, str):
            return ID(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return ID(str(value))
    elif of is str:
        if isinstance(value, str):
            return value
    raise _Mismatch(f"expected {ref.name}, got {type(value).__name__}")


def _coerce(schema: Schema, ref: TypeRef, value: Any) -> Any:
    if value is None:
        if ref.nullable:
            return None
        raise _Mismatch(f"expected {ref}, got null")

    if ref.many:
        if not isinstance(value, (list, tuple)):
            raise _Mismatch(f"expected {ref}, got {type(value).__name__}")
        item = TypeRef(of=ref.of)
        return [_coerce(schema, item, v) for v in value]

    if ref.is_scalar:
        return _scalar(ref, value)

    shape = schema.shape_for(ref)
    if shape is None:
        raise _Mismatch(f"unknown entity {ref.name}")
    if shape.cls is not None and isinstance(value, shape.cls):
        return value
    if isinstance(value, Mapping):
        return _build(schema, shape, value)
    raise _Mismatch(f"expected {ref.name}, got {type(value).__name__}")


def _build(schema: Schema, shape: EntityShape, value: Mapping[str, Any]) -> Any:
    """Coerce each stored field, then construct through the shape."""
    values = dict(value)
    for f in shape.stored:
        if f.name not in values:
            continue
        # Absent id is assigned by shape.new
        if f.name == shape.id_field and values[f.name] is None:
            continue
        try:
            values[f.name] = _coerce(schema, f.type, values[f.name])
        except _Mismatch as e:
            raise e.under(f.name) from None
    try:
        return shape.new(**values)
    except (TypeError, SchemaError) as e:
        raise _Mismatch(f"cannot build {shape.name}: {e}") from e


def coerce_args(
    schema: Schema,
    op: Operation,
    raw: Mapping[str, Any] | None,
) -> Result[dict[str, Any], ArgumentTypeError]:
    """Coerce raw args for `op`. Error names the first offending argument."""
    raw = raw or {}
    out: dict[str, Any] = {}
    for a in op.args:
        if a.name not in raw:
            if a.required:
                return Error(ArgumentTypeError(op.name, a.name, "is required"))
            out[a.name] = None if a.default is MISSING else a.default
            continue
        try:
            out[a.name] = _coerce(schema, a.type, raw[a.name])
        except _Mismatch as e:
            return Error(ArgumentTypeError(op.name, ".".join((a.name, *e.path)), e.reason))
    return Ok(out)


__all__ = ("coerce_args",)
