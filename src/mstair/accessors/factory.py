# File: src/mstair/accessors/factory.py
"""
Construction protocol: pick the accessor shape from the strategies supplied.

    make_accessor(getter)                 -> ReadOnlyAccessor
    make_accessor(getter, setter)         -> ReadWriteAccessor
    make_accessor(setter=setter)          -> WriteOnlyAccessor
    make_self_storage(initial)            -> SelfStorageAccessor
    make_self_storage(initial, read_only=True) -> ReadOnlySelfStorageAccessor

Getters and setters may be callables, `direct_get(...)` / `direct_set(...)`
strategies, or bare `Ref` objects. A single positional argument is always a
getter: Python cannot reliably tell a zero-argument callable from a
one-argument one for every callable, so the write-only shape is requested
with `setter=` or with `make_write_only()`.
"""

from __future__ import annotations

from typing import Any

from mstair.accessors.accessor import (
    AccessorBase,
    ReadOnlyAccessor,
    ReadWriteAccessor,
    WriteOnlyAccessor,
)
from mstair.accessors.operators import AccessorLike
from mstair.accessors.self_storage import ReadOnlySelfStorageAccessor, SelfStorageAccessor
from mstair.accessors.strategies import ABSENT, ReturnKind, direct_get, direct_set, resolve_strategies


__all__ = [
    "can_assign",
    "direct_get",
    "direct_set",
    "make_accessor",
    "make_read_only",
    "make_self_storage",
    "make_write_only",
]


def make_accessor(
    getter: Any = None,
    setter: Any = None,
    *,
    returns: ReturnKind | str | None = None,
    entity_type: type | None = None,
    name: str = "",
) -> AccessorBase:
    """
    Build the accessor shape that matches the supplied strategies.

    With a reference return kind and a function getter, the getter is called
    twice during construction when `reference_checks_enabled()` is true, to
    confirm it hands out stable storage. Getters with side effects, or that
    read state the owner has not set up yet, should be built with checks off
    (`reference_checks_context(False)`).

    :param getter: Zero-argument callable, direct getter or Ref; None for write-only.
    :param setter: One-argument callable, direct setter or Ref; None for read-only.
    :param returns: Return kind; defaults to CONST_REFERENCE for a direct getter, else VALUE.
    :param entity_type: Declared type of the value, checked against annotations and refs.
    :param name: Label used in repr and log records.
    :return: ReadWriteAccessor, ReadOnlyAccessor or WriteOnlyAccessor.
    :raises AccessorConstructionError: If the strategies cannot form an accessor.
    """
    strategies = resolve_strategies(getter, setter, returns=returns, entity_type=entity_type)
    shape: type[AccessorBase]
    if strategies.getter is ABSENT:
        shape = WriteOnlyAccessor
    elif strategies.setter is ABSENT:
        shape = ReadOnlyAccessor
    else:
        shape = ReadWriteAccessor
    return shape.from_strategies(strategies, name)


def make_read_only(
    getter: Any,
    *,
    returns: ReturnKind | str | None = None,
    entity_type: type | None = None,
    name: str = "",
) -> ReadOnlyAccessor:
    """Build a ReadOnlyAccessor; a missing getter is a construction error."""
    return ReadOnlyAccessor(getter, returns=returns, entity_type=entity_type, name=name)


def make_write_only(setter: Any, *, entity_type: type | None = None, name: str = "") -> WriteOnlyAccessor:
    """Build a WriteOnlyAccessor; a missing setter is a construction error."""
    return WriteOnlyAccessor(setter, entity_type=entity_type, name=name)


def make_self_storage(
    initial: Any = None,
    *,
    read_only: bool = False,
    entity_type: type | None = None,
    name: str = "",
) -> SelfStorageAccessor | ReadOnlySelfStorageAccessor:
    """Build an accessor that owns `initial` instead of referring to outside storage."""
    if read_only:
        return ReadOnlySelfStorageAccessor(initial, entity_type=entity_type, name=name)
    return SelfStorageAccessor(initial, entity_type=entity_type, name=name)


def can_assign(target: Any, source: Any) -> bool:
    """
    Return True if `target.assign(source)` is a legal combination of shapes.

    The target needs a setter; an accessor source also needs a getter to supply
    the value. Plain values can always be a source.
    """
    if not isinstance(target, AccessorLike) or not target._has_setter:
        return False
    return not isinstance(source, AccessorLike) or source._has_getter


# End of file: src/mstair/accessors/factory.py
