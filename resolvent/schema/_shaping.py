"""
Shaping — field-by-field output of a value against a TypeRef.
"""

from __future__ import annotations

from typing import Any

from resolvent._errors import ShapingError
from resolvent.schema._ref import TypeRef
from resolvent.schema._shape import Field
from resolvent.schema._registry import Schema


def render(schema: Schema, ref: TypeRef, value: Any) -> Any:
    """
    Shape `value` as `ref`.

    - None stays None (no shaping)
    - lists are shaped element-wise
    - scalars pass through
    - entities become a dict of every declared field, in declaration order;
      stored fields read from the instance, computed fields recomputed

    Raises ShapingError on reference cycles, unknown entities or a missing
    non-null stored field.
    """
    return _render(schema, ref, value, ())


def _render(schema: Schema, ref: TypeRef, value: Any, path: tuple[int, ...]) -> Any:
    if value is None:
        return None

    if ref.many:
        if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            raise ShapingError(str(ref), f"expected a list, got {type(value).__name__}")
        item = TypeRef(of=ref.of)
        return [_render(schema, item, v, path) for v in value]

    if ref.is_scalar:
        return value

    shape = schema.shape_for(ref)
    if shape is None:
        raise ShapingError(ref.name, "entity is not registered")
    if id(value) in path:
        raise ShapingError(ref.name, "reference cycle")

    inner = (*path, id(value))
    out: dict[str, Any] = {}
    for m in shape.fields:
        if isinstance(m, Field):
            try:
                raw = m.read(value)
            except AttributeError:
                raise ShapingError(shape.name, f"missing field {m.name!r}") from None
        else:
            raw = m.read(value)
        out[m.name] = _render(schema, m.type, raw, inner)
    return out


__all__ = ("render",)
