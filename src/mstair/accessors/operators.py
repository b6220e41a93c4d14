# File: src/mstair/accessors/operators.py
"""
Generic operator forwarding.

Every operator an accessor supports is generated here from one table, instead
of being written out per operator. Each generated dunder reduces accessor
operands to their `read()` value and applies the plain `operator` function, so
an accessor interoperates with plain values and with other accessors on either
side of an expression:

    a + 1      -> operator.add(a.read(), 1)
    1 + a      -> operator.add(1, a.read())
    a + b      -> operator.add(a.read(), b.read())
    a += 1     -> a.write(operator.add(a.read(), 1)); a

An operator the wrapped value does not support fails the way it would on the
plain value (TypeError), and nothing is retried or converted.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from typing import Any, Final, TypeVar

from mstair.accessors.errors import CapabilityError


__all__ = [
    "BINARY_OPERATORS",
    "COMPARISON_OPERATORS",
    "CONVERSIONS",
    "UNARY_OPERATORS",
    "AccessorLike",
    "installs",
    "mutating_operators",
    "operand_value",
    "read_operators",
]

BINARY_OPERATORS: Final[dict[str, Callable[[Any, Any], Any]]] = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "truediv": operator.truediv,
    "floordiv": operator.floordiv,
    "mod": operator.mod,
    "pow": operator.pow,
    "matmul": operator.matmul,
    "lshift": operator.lshift,
    "rshift": operator.rshift,
    "and": operator.and_,
    "or": operator.or_,
    "xor": operator.xor,
    "divmod": divmod,
}

_NO_INPLACE_FORM: Final[frozenset[str]] = frozenset({"divmod"})

COMPARISON_OPERATORS: Final[dict[str, Callable[[Any, Any], Any]]] = {
    "lt": operator.lt,
    "le": operator.le,
    "gt": operator.gt,
    "ge": operator.ge,
    "eq": operator.eq,
    "ne": operator.ne,
}

UNARY_OPERATORS: Final[dict[str, Callable[[Any], Any]]] = {
    "neg": operator.neg,
    "pos": operator.pos,
    "invert": operator.invert,
    "abs": operator.abs,
    "trunc": math.trunc,
    "floor": math.floor,
    "ceil": math.ceil,
}

CONVERSIONS: Final[dict[str, Callable[[Any], Any]]] = {
    "bool": bool,
    "int": int,
    "float": float,
    "complex": complex,
    "index": operator.index,
    "str": str,
}

C = TypeVar("C", bound=type)


class AccessorLike:
    """Marker base for objects whose operand value is obtained through `read()`."""

    __slots__ = ()

    _has_getter: bool = False
    _has_setter: bool = False


def operand_value(obj: Any) -> Any:
    """Return the plain value of an operand: `read()` for accessors, else the object."""
    if isinstance(obj, AccessorLike):
        if not obj._has_getter:
            raise CapabilityError(f"{type(obj).__name__} has no getter and cannot supply a value")
        return obj.read()  # type: ignore[attr-defined]
    return obj


def _named(func: Callable[..., Any], name: str) -> Callable[..., Any]:
    func.__name__ = name
    func.__qualname__ = name
    return func


def _forward_binary(op: Callable[[Any, Any], Any], name: str) -> Callable[[Any, Any], Any]:
    def forward(self: Any, other: Any) -> Any:
        return op(self.read(), operand_value(other))

    return _named(forward, name)


def _forward_reflected(op: Callable[[Any, Any], Any], name: str) -> Callable[[Any, Any], Any]:
    def forward(self: Any, other: Any) -> Any:
        return op(operand_value(other), self.read())

    return _named(forward, name)


def _forward_comparison(op: Callable[[Any, Any], Any], name: str) -> Callable[[Any, Any], Any]:
    def forward(self: Any, other: Any) -> Any:
        if isinstance(other, AccessorLike) and not other._has_getter:
            return NotImplemented
        return op(self.read(), operand_value(other))

    return _named(forward, name)


def _forward_unary(op: Callable[[Any], Any], name: str) -> Callable[[Any], Any]:
    def forward(self: Any) -> Any:
        return op(self.read())

    return _named(forward, name)


def _forward_inplace(op: Callable[[Any, Any], Any], name: str) -> Callable[[Any, Any], Any]:
    def forward(self: Any, other: Any) -> Any:
        self.write(op(self.read(), operand_value(other)))
        return self

    return _named(forward, name)


def read_operators() -> dict[str, Callable[..., Any]]:
    """Dunders that only need a getter: binary, reflected, comparison, unary, conversion."""
    namespace: dict[str, Callable[..., Any]] = {}
    for name, op in BINARY_OPERATORS.items():
        namespace[f"__{name}__"] = _forward_binary(op, f"__{name}__")
        namespace[f"__r{name}__"] = _forward_reflected(op, f"__r{name}__")
    for name, op in COMPARISON_OPERATORS.items():
        namespace[f"__{name}__"] = _forward_comparison(op, f"__{name}__")
    for name, op in UNARY_OPERATORS.items():
        namespace[f"__{name}__"] = _forward_unary(op, f"__{name}__")
    for name, op in CONVERSIONS.items():
        namespace[f"__{name}__"] = _forward_unary(op, f"__{name}__")
    return namespace


def mutating_operators() -> dict[str, Callable[..., Any]]:
    """Compound-assignment dunders; they need both a getter and a setter."""
    return {
        f"__i{name}__": _forward_inplace(op, f"__i{name}__")
        for name, op in BINARY_OPERATORS.items()
        if name not in _NO_INPLACE_FORM
    }


def installs(namespace: dict[str, Callable[..., Any]]) -> Callable[[C], C]:
    """
    Class decorator adding the given dunders, leaving explicitly defined ones alone.

    Pass a freshly built namespace (read_operators() / mutating_operators()) per class.
    """

    def decorate(cls: C) -> C:
        for name, func in namespace.items():
            if name in cls.__dict__:
                continue
            func.__qualname__ = f"{cls.__qualname__}.{name}"
            setattr(cls, name, func)
        return cls

    return decorate


# End of file: src/mstair/accessors/operators.py
