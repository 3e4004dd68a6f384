"""
Operations — named read, write and event units.

Handlers are plain functions (sync or async). Arguments and return type
are inferred from the signature unless given explicitly:

    @S.read()
    def get_one_user_by_name(name: str) -> User | None: ...

    @S.write(name="addUser")
    async def add_user(name: str, email: str, ctx: Context) -> User: ...

    @S.event("USER_ADDED", name="userAddedNotif")
    def user_added(user: User) -> User:
        return user

Decorated functions become Operation objects that still forward calls
to the handler.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, get_type_hints

from resolvent._errors import InvalidOperationError
from resolvent._types import Context, Kind
from resolvent.schema._ref import TypeRef


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

type Handler = Callable[..., Any]


# ═══════════════════════════════════════════════════════════════════════════════
# Arg / Operation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Arg:
    name: str
    type: TypeRef
    default: Any = MISSING

    @property
    def required(self) -> bool:
        return self.default is MISSING and not self.type.nullable


def arg(name: str, type: Any, default: Any = MISSING) -> Arg:
    return Arg(name=name, type=TypeRef.from_hint(type), default=default)


@dataclass(frozen=True, slots=True)
class Operation:
    """
    Registration: kind + name → handler, argument and return types.

    `context_param` names the handler parameter that receives the request
    Context (write kind only). `topics` is non-empty for event kind only.
    """

    kind: Kind
    name: str
    handler: Handler
    returns: TypeRef
    args: tuple[Arg, ...] = ()
    topics: tuple[str, ...] = ()
    context_param: str | None = None
    timeout: float | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.kind is Kind.EVENT and not self.topics:
            raise InvalidOperationError(self.name, "event source must be bound to a topic")
        if self.kind is not Kind.EVENT and self.topics:
            raise InvalidOperationError(self.name, "only event sources have topics")
        if self.context_param is not None and self.kind is not Kind.WRITE:
            raise InvalidOperationError(self.name, "only write handlers receive a context")
        names = [a.name for a in self.args]
        if len(names) != len(set(names)):
            raise InvalidOperationError(self.name, "duplicate argument name")

    def arg(self, name: str) -> Arg | None:
        for a in self.args:
            if a.name == name:
                return a
        return None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.handler(*args, **kwargs)


# ═══════════════════════════════════════════════════════════════════════════════
# Signature inference
# ═══════════════════════════════════════════════════════════════════════════════


def _infer(
    kind: Kind,
    name: str,
    handler: Handler,
) -> tuple[tuple[Arg, ...], str | None, Any]:
    """(args, context_param, return hint) from the handler signature."""
    sig = inspect.signature(handler)
    try:
        hints = get_type_hints(handler)
    except NameError as e:
        raise InvalidOperationError(name, f"unresolvable annotation: {e}") from e

    params = [
        p for p in sig.parameters.values()
        if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]

    if kind is Kind.EVENT:
        # Single positional payload parameter, no typed arguments
        if len(params) != 1:
            raise InvalidOperationError(name, "event transform takes exactly one payload")
        return (), None, hints.get("return", inspect.Signature.empty)

    args: list[Arg] = []
    context_param: str | None = None
    for p in params:
        ptype = hints.get(p.name, p.annotation)
        if ptype is Context:
            context_param = p.name
            continue
        if ptype is inspect.Parameter.empty:
            raise InvalidOperationError(name, f"argument {p.name!r} has no type")
        default = MISSING if p.default is inspect.Parameter.empty else p.default
        try:
            args.append(Arg(name=p.name, type=TypeRef.from_hint(ptype), default=default))
        except TypeError as e:
            raise InvalidOperationError(name, f"argument {p.name!r}: {e}") from e
    return tuple(args), context_param, hints.get("return", inspect.Signature.empty)


def operation(
    kind: Kind,
    handler: Handler,
    *,
    name: str | None = None,
    returns: Any = None,
    args: Sequence[Arg] | None = None,
    topics: Sequence[str] = (),
    timeout: float | None = None,
    description: str | None = None,
) -> Operation:
    """Build an Operation, inferring what is not given."""
    op_name = name or handler.__name__
    inferred_args, context_param, hint = _infer(kind, op_name, handler)

    if returns is None:
        returns = None if hint is inspect.Signature.empty else hint
    if returns is None:
        raise InvalidOperationError(op_name, "missing return type")
    try:
        returns_ref = TypeRef.from_hint(returns)
    except TypeError as e:
        raise InvalidOperationError(op_name, f"return type: {e}") from e

    return Operation(
        kind=kind,
        name=op_name,
        handler=handler,
        returns=returns_ref,
        args=tuple(args) if args is not None else inferred_args,
        topics=tuple(topics),
        context_param=context_param,
        timeout=timeout,
        description=description if description is not None else inspect.getdoc(handler),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Decorators — read / write / event
# ═══════════════════════════════════════════════════════════════════════════════


def _declare(kind: Kind, handler: Handler | None, **options: Any) -> Any:
    if handler is not None:
        return operation(kind, handler, **options)

    def wrap(fn: Handler) -> Operation:
        return operation(kind, fn, **options)

    return wrap


def read(
    handler: Handler | None = None,
    *,
    name: str | None = None,
    returns: Any = None,
    args: Sequence[Arg] | None = None,
    timeout: float | None = None,
    description: str | None = None,
) -> Any:
    """Declare a read: side-effect free, returns entity, list or null."""
    return _declare(
        Kind.READ, handler,
        name=name, returns=returns, args=args, timeout=timeout, description=description,
    )


def write(
    handler: Handler | None = None,
    *,
    name: str | None = None,
    returns: Any = None,
    args: Sequence[Arg] | None = None,
    timeout: float | None = None,
    description: str | None = None,
) -> Any:
    """Declare a write: may have side effects, may receive a Context."""
    return _declare(
        Kind.WRITE, handler,
        name=name, returns=returns, args=args, timeout=timeout, description=description,
    )


def event(
    *topics: str,
    name: str | None = None,
    returns: Any = None,
    description: str | None = None,
) -> Callable[[Handler], Operation]:
    """Declare an event source bound to one or more topics."""
    if not topics:
        raise ValueError("event() needs at least one topic")

    def wrap(fn: Handler) -> Operation:
        return operation(
            Kind.EVENT, fn,
            name=name, returns=returns, topics=topics, description=description,
        )

    return wrap


__all__ = (
    "MISSING",
    "Handler",
    "Arg",
    "arg",
    "Operation",
    "operation",
    "read",
    "write",
    "event",
)
