# File: src/mstair/accessors/refs.py
"""
Non-owning handles to existing storage.

A direct strategy needs "a reference to a field". Python has no pointers to
variables, so storage is named instead: an attribute of an object
(`AttrRef`), an item of a container (`ItemRef`), or a standalone box
(`Cell`). All three share the small `Ref` interface: `get()`, `set(value)`,
`entity_type` and `alive`.

`AttrRef` reads and writes through `object.__getattribute__` /
`object.__setattr__`, so an owner's attribute hooks never intercept access to
its own backing field.

`dereference()` is the rule `Accessor.deref()` applies to the value it reads:
refs and weak references are followed, `None` is an empty optional.
"""

from __future__ import annotations

import contextlib
import types
import typing
import weakref
from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping, MutableSequence
from typing import Any, Generic, TypeVar


__all__ = [
    "AttrRef",
    "Cell",
    "ItemRef",
    "Ref",
    "dereference",
    "ref_to",
]

T = TypeVar("T")


class Ref(ABC, Generic[T]):
    """Named location of a value that the holder does not own."""

    __slots__ = ("_entity_type",)

    def __init__(self, entity_type: type | None = None) -> None:
        self._entity_type = entity_type

    @property
    def entity_type(self) -> type | None:
        """Declared type of the referenced value, if known."""
        return self._entity_type

    @property
    def alive(self) -> bool:
        """False once the storage behind a weak reference has been collected."""
        return True

    @abstractmethod
    def get(self) -> T: ...

    @abstractmethod
    def set(self, value: T) -> None: ...

    def __copy__(self) -> Ref[T]:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Ref[T]:
        return self


class AttrRef(Ref[T]):
    """Reference to `owner.<name>`."""

    __slots__ = ("_owner", "_name", "_weak")

    def __init__(self, owner: object, name: str, entity_type: type | None = None, *, weak: bool = False) -> None:
        if not isinstance(name, str) or not name:
            raise TypeError(f"Attribute name must be a non-empty str, not {name!r}")
        if entity_type is None:
            entity_type = _annotated_type(type(owner), name)
        super().__init__(entity_type)
        self._name = name
        self._weak = weak
        self._owner: Any = weakref.ref(owner) if weak else owner

    @property
    def name(self) -> str:
        return self._name

    @property
    def alive(self) -> bool:
        return not self._weak or self._owner() is not None

    def _target(self) -> object:
        if not self._weak:
            return self._owner
        owner = self._owner()
        if owner is None:
            raise ReferenceError(f"Owner of attribute {self._name!r} no longer exists")
        return owner

    def get(self) -> T:
        return object.__getattribute__(self._target(), self._name)

    def set(self, value: T) -> None:
        object.__setattr__(self._target(), self._name, value)

    def __repr__(self) -> str:
        owner = self._owner() if self._weak else self._owner
        owner_name = type(owner).__name__ if owner is not None else "<dead>"
        return f"AttrRef({owner_name}.{self._name})"


class ItemRef(Ref[T]):
    """Reference to `container[key]`."""

    __slots__ = ("_container", "_key")

    def __init__(
        self,
        container: MutableMapping[Any, Any] | MutableSequence[Any],
        key: Any,
        entity_type: type | None = None,
    ) -> None:
        if not hasattr(container, "__getitem__") or not hasattr(container, "__setitem__"):
            raise TypeError(f"{type(container).__name__!r} does not support item assignment")
        super().__init__(entity_type)
        self._container = container
        self._key = key

    @property
    def key(self) -> Any:
        return self._key

    def get(self) -> T:
        return self._container[self._key]

    def set(self, value: T) -> None:
        self._container[self._key] = value

    def __repr__(self) -> str:
        return f"ItemRef({type(self._container).__name__}[{self._key!r}])"


class Cell(Ref[T]):
    """A standalone mutable box; also serves as a pointer-like value."""

    __slots__ = ("_value",)

    def __init__(self, value: T | None = None, entity_type: type | None = None) -> None:
        super().__init__(entity_type)
        self._value = value

    def get(self) -> T:
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> None:
        self._value = value

    def __getattr__(self, name: str) -> Any:
        # Arrow semantics: cell.attr reaches into the boxed value.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._value, name)

    def __repr__(self) -> str:
        return f"Cell({self._value!r})"


def ref_to(target: Any, name_or_key: Any, entity_type: type | None = None) -> Ref[Any]:
    """
    Build the appropriate Ref for `target` and `name_or_key`.

    Mappings and mutable sequences get an ItemRef; anything else, addressed by a
    string, gets an AttrRef.
    """
    if isinstance(target, (Mapping, MutableSequence)):
        return ItemRef(target, name_or_key, entity_type)  # type: ignore[arg-type]
    if isinstance(name_or_key, str):
        return AttrRef(target, name_or_key, entity_type)
    raise TypeError(
        f"Cannot reference {name_or_key!r} in {type(target).__name__!r}: "
        "use an attribute name or a mapping/sequence key"
    )


def dereference(value: Any) -> Any:
    """
    Follow one level of indirection.

    - Ref: the referenced value.
    - weakref.ref: the referent; ReferenceError if it was collected.
    - None: ValueError, the optional is empty.
    - anything else: returned unchanged, it is already the contained value.
    """
    if isinstance(value, Ref):
        return value.get()
    if isinstance(value, weakref.ref):
        referent = value()
        if referent is None:
            raise ReferenceError("Dereferenced a dead weak reference")
        return referent
    if value is None:
        raise ValueError("Dereferenced an empty optional (None)")
    return value


def _annotated_type(owner_type: type, name: str) -> type | None:
    """Return the class-level annotation for `name` when it resolves to a plain class."""
    hints: dict[str, Any] = {}
    with contextlib.suppress(Exception):
        hints = typing.get_type_hints(owner_type)
    annotation = hints.get(name)
    if annotation is Any or isinstance(annotation, types.GenericAlias):
        return None
    return annotation if isinstance(annotation, type) else None


# End of file: src/mstair/accessors/refs.py
