# File: src/mstair/accessors/self_storage.py
"""
Accessors that own their value.

`SelfStorageAccessor` gives an owner accessor syntax without a separate
backing field: the value lives inside the accessor, `read()` returns it and
`write()` replaces it. There are no strategies to call. Unlike the
strategy-backed shapes, self-storage accessors can be copied; a copy owns a
copy of the value and is independent of the original.

`ReadOnlySelfStorageAccessor` owns a value fixed at construction.
"""

from __future__ import annotations

import copy
from typing import Any

from mstair.accessors.accessor import AccessorBase, MutableMixin, ReadableMixin
from mstair.accessors.operators import operand_value
from mstair.accessors.strategies import ABSENT, ReturnKind, StrategySet


__all__ = [
    "ReadOnlySelfStorageAccessor",
    "SelfStorageAccessor",
]


class OwnedValueMixin(AccessorBase):
    """Stores the entity inline; read() hands out the owned value itself."""

    __slots__ = ("_value",)

    _value: Any

    def __init__(self, initial: Any = None, *, entity_type: type | None = None, name: str = "") -> None:
        """
        :param initial: Initial value, stored as a shallow copy; an accessor is read first.
        :param entity_type: Declared type; defaults to the type of a non-None initial value.
        :param name: Label used in repr and log records.
        """
        initial = operand_value(initial)
        if entity_type is None and initial is not None:
            entity_type = type(initial)
        object.__setattr__(self, "_value", copy.copy(initial))
        self._bind(StrategySet(ABSENT, ABSENT, ReturnKind.CONST_REFERENCE, entity_type), name)

    def read(self) -> Any:
        value = self._value
        self._trace("read", value)
        return value

    def _store(self, value: Any) -> None:
        object.__setattr__(self, "_value", value)

    def __copy__(self) -> Any:
        return type(self)(self._value, entity_type=self._entity_type, name=self._name)

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        return type(self)(copy.deepcopy(self._value, memo), entity_type=self._entity_type, name=self._name)


class SelfStorageAccessor(OwnedValueMixin, MutableMixin):
    """Read-write accessor that owns its value."""

    __slots__ = ()

    def write(self, value: Any) -> None:
        value = operand_value(value)
        self._trace("write", value)
        self._store(value)


class ReadOnlySelfStorageAccessor(OwnedValueMixin, ReadableMixin):
    """Read-only accessor that owns a value fixed at construction."""

    __slots__ = ()


# End of file: src/mstair/accessors/self_storage.py
