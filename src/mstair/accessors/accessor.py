# File: src/mstair/accessors/accessor.py
"""
The accessor core and its three strategy-backed shapes.

An accessor exposes one field of an owning object through `read()` /
`write(value)`, with the storage behind it supplied as strategies (see
`strategies`). Which operations exist is decided by the class, not by a
runtime flag:

    ReadOnlyAccessor   = ReadableMixin                            + AccessorBase
    WriteOnlyAccessor  = WritableMixin                            + AccessorBase
    ReadWriteAccessor  = MutableMixin + WritableMixin + ReadableMixin + AccessorBase

So `ReadOnlyAccessor` simply has no `write`, `assign`, `+=` or
`post_increment`, and `WriteOnlyAccessor` has no `read`, `+`, `==` or `[]`.
Asking for a missing capability raises AttributeError (for methods) or
TypeError (for operators), the same way any Python object without that
method would.

Accessors are bound to their owner for life: they cannot be copied, pickled,
or have their strategies replaced. Only the value behind them changes.
"""

from __future__ import annotations

import copy
from typing import Any, ClassVar, Final, NoReturn

from mstair.accessors import config as cfg
from mstair.accessors.errors import AccessorConstructionError, CapabilityError
from mstair.accessors.operators import (
    AccessorLike,
    installs,
    mutating_operators,
    operand_value,
    read_operators,
)
from mstair.accessors.refs import dereference
from mstair.accessors.strategies import (
    ABSENT,
    GetterStrategy,
    ReturnKind,
    SetterStrategy,
    StrategySet,
    resolve_strategies,
)
from mstair.accessors.xlogging.logger_constants import TRACE
from mstair.accessors.xlogging.logger_factory import create_logger


__all__ = [
    "AccessorBase",
    "MutableMixin",
    "ReadOnlyAccessor",
    "ReadWriteAccessor",
    "ReadableMixin",
    "WritableMixin",
    "WriteOnlyAccessor",
]

_LOG = create_logger(__name__)

_INTERNAL_SLOTS: Final[frozenset[str]] = frozenset(
    {"_getter", "_setter", "_returns", "_entity_type", "_name", "_value"}
)
_ACCESSOR_API: Final[frozenset[str]] = frozenset(
    {
        "read",
        "write",
        "assign",
        "deref",
        "pre_increment",
        "post_increment",
        "pre_decrement",
        "post_decrement",
        "logical_and",
        "logical_or",
        "logical_not",
    }
)


class AccessorBase(AccessorLike):
    """
    Holds one getter slot and one setter slot, fixed at construction.

    Subclasses declare their capabilities through the `_has_getter` /
    `_has_setter` class flags (set by the mixins); construction fails when the
    supplied strategies do not match them.
    """

    __slots__ = ("_getter", "_setter", "_returns", "_entity_type", "_name", "__weakref__")

    _has_getter: ClassVar[bool] = False
    _has_setter: ClassVar[bool] = False

    _getter: GetterStrategy | Any
    _setter: SetterStrategy | Any
    _returns: ReturnKind
    _entity_type: type | None
    _name: str

    def __init__(
        self,
        getter: Any = None,
        setter: Any = None,
        *,
        returns: ReturnKind | str | None = None,
        entity_type: type | None = None,
        name: str = "",
    ) -> None:
        """
        :param getter: Zero-argument callable, direct getter, Ref, or None.
        :param setter: One-argument callable, direct setter, Ref, or None.
        :param returns: ReturnKind (or its name); default depends on the getter kind.
        :param entity_type: Declared type of the value, checked against annotations.
        :param name: Label used in repr and log records.
        :raises AccessorConstructionError: If the strategies do not form this shape.

        A function getter with a reference return kind is called twice here
        when `reference_checks_enabled()` is true; see `resolve_strategies`.
        """
        strategies = resolve_strategies(getter, setter, returns=returns, entity_type=entity_type)
        self._check_shape(strategies)
        self._bind(strategies, name)

    @classmethod
    def from_strategies(cls, strategies: StrategySet, name: str = "") -> AccessorBase:
        """Build an accessor of this shape from an already validated StrategySet."""
        accessor = cls.__new__(cls)
        accessor._check_shape(strategies)
        accessor._bind(strategies, name)
        return accessor

    def _check_shape(self, strategies: StrategySet) -> None:
        shape = type(self).__name__
        problems: list[str] = []
        if self._has_getter and strategies.getter is ABSENT:
            problems.append("requires a getter")
        if not self._has_getter and strategies.getter is not ABSENT:
            problems.append("does not take a getter")
        if self._has_setter and strategies.setter is ABSENT:
            problems.append("requires a setter")
        if not self._has_setter and strategies.setter is not ABSENT:
            problems.append("does not take a setter")
        if problems:
            message = f"{shape} {' and '.join(problems)}"
            _LOG.debug("Rejected accessor construction: %s", message)
            raise AccessorConstructionError(message)

    def _bind(self, strategies: StrategySet, name: str) -> None:
        object.__setattr__(self, "_getter", strategies.getter)
        object.__setattr__(self, "_setter", strategies.setter)
        object.__setattr__(self, "_returns", strategies.returns)
        object.__setattr__(self, "_entity_type", strategies.entity_type)
        object.__setattr__(self, "_name", name)
        _LOG.construct(
            type(self),
            name or "<unnamed>",
            {
                "returns": strategies.returns.value,
                "entity_type": getattr(strategies.entity_type, "__name__", None),
                "getter": repr(strategies.getter),
                "setter": repr(strategies.setter),
            },
        )

    def bind_name(self, name: str) -> None:
        """Give an unnamed accessor a label; a name, once set, is kept."""
        if not self._name:
            object.__setattr__(self, "_name", name)

    @property
    def accessor_name(self) -> str:
        return self._name

    @property
    def return_kind(self) -> ReturnKind:
        return self._returns

    @property
    def declared_type(self) -> type | None:
        return self._entity_type

    @property
    def getter_strategy(self) -> GetterStrategy | Any:
        return self._getter

    @property
    def setter_strategy(self) -> SetterStrategy | Any:
        return self._setter

    def __repr__(self) -> str:
        parts = [type(self).__name__]
        if self._name:
            parts.append(repr(self._name))
        parts.append(self._returns.value)
        if self._entity_type is not None:
            parts.append(self._entity_type.__name__)
        return f"<{' '.join(parts)}>"

    def __getattr__(self, name: str) -> Any:
        if name in _ACCESSOR_API:
            raise AttributeError(f"{type(self).__name__} does not support {name}()")
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _INTERNAL_SLOTS or name in _ACCESSOR_API or hasattr(type(self), name):
            raise AttributeError(f"{type(self).__name__}.{name} is fixed at construction")
        self._forward_setattr(name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Cannot delete {name!r} from {type(self).__name__}")

    def _forward_setattr(self, name: str, value: Any) -> None:
        raise CapabilityError(f"{type(self).__name__} cannot forward assignment to attribute {name!r}")

    def __copy__(self) -> NoReturn:
        raise TypeError(f"{type(self).__name__} is bound to its owner and cannot be copied; copy read() instead")

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        raise TypeError(f"{type(self).__name__} is bound to its owner and cannot be copied; copy read() instead")

    def __reduce_ex__(self, protocol: Any) -> NoReturn:
        raise TypeError(f"{type(self).__name__} cannot be pickled")

    def _trace(self, action: str, value: Any) -> None:
        if _LOG.isEnabledFor(TRACE) and cfg.trace_access_enabled():
            label = self._name or type(self).__name__
            _LOG.trace("%s %s %r", action, label, value, accessor_name=self._name, stacklevel=3)


@installs(read_operators())
class ReadableMixin(AccessorBase):
    """
    Getter capability: `read()` and every operator that only needs the value.

    Besides the generated arithmetic/bitwise/comparison/unary/conversion
    dunders, this provides:
    - ``accessor()``: same as read()
    - ``accessor.attr``: attribute forwarding to the value (arrow)
    - ``accessor.deref()``: dereference of pointer-like / optional-like values
    - ``accessor[key]``, ``len()``, ``iter()``, ``in``: container forwarding
    - item / attribute assignment forwarded into the value, for REFERENCE accessors only
    """

    __slots__ = ()

    _has_getter: ClassVar[bool] = True

    __hash__ = None  # type: ignore[assignment]

    def read(self) -> Any:
        """Return the getter result unchanged."""
        value = self._getter()
        self._trace("read", value)
        return value

    def __call__(self) -> Any:
        return self.read()

    def deref(self) -> Any:
        """Follow the value one level: Ref -> referenced value, weakref -> referent, None -> ValueError."""
        return dereference(self.read())

    def __getattr__(self, name: str) -> Any:
        if name in _INTERNAL_SLOTS or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        if name in _ACCESSOR_API:
            return super().__getattr__(name)
        return getattr(self.read(), name)

    def __getitem__(self, key: Any) -> Any:
        return self.read()[operand_value(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._require_reference("item assignment")
        self.read()[operand_value(key)] = operand_value(value)

    def __delitem__(self, key: Any) -> None:
        self._require_reference("item deletion")
        del self.read()[operand_value(key)]

    def __iter__(self) -> Any:
        return iter(self.read())

    def __len__(self) -> int:
        return len(self.read())

    def __contains__(self, item: Any) -> bool:
        return operand_value(item) in self.read()

    def __format__(self, format_spec: str) -> str:
        return format(self.read(), format_spec)

    def __round__(self, ndigits: int | None = None) -> Any:
        return round(self.read(), ndigits)

    def logical_and(self, other: Any) -> bool:
        return bool(self.read()) and bool(operand_value(other))

    def logical_or(self, other: Any) -> bool:
        return bool(self.read()) or bool(operand_value(other))

    def logical_not(self) -> bool:
        return not self.read()

    def _forward_setattr(self, name: str, value: Any) -> None:
        self._require_reference(f"assignment to attribute {name!r}")
        setattr(self.read(), name, operand_value(value))

    def _require_reference(self, what: str) -> None:
        if self._returns is not ReturnKind.REFERENCE:
            raise CapabilityError(
                f"{what} through {self!r} needs ReturnKind.REFERENCE, not {self._returns}"
            )


class WritableMixin(AccessorBase):
    """Setter capability: `write()` and `assign()`."""

    __slots__ = ()

    _has_setter: ClassVar[bool] = True

    def write(self, value: Any) -> None:
        """Store `value` through the setter; an accessor argument is read first."""
        value = operand_value(value)
        self._trace("write", value)
        self._setter(value)

    def assign(self, value: Any) -> Any:
        """
        Assignment-expression semantics: write `value` and return a copy of it.

        The result is the value as it was assigned, independent of whatever the
        getter reports afterwards. An accessor on the right-hand side is read
        through its own getter.

        :raises CapabilityError: If `value` is an accessor without a getter.
        """
        source = operand_value(value)
        right = copy.copy(source)
        self.write(source)
        return right


@installs(mutating_operators())
class MutableMixin(ReadableMixin, WritableMixin):
    """Read-modify-write operations; they need both capabilities."""

    __slots__ = ()

    def pre_increment(self) -> Any:
        """``++a``: write value + 1 and return the value written."""
        return self.assign(self.read() + 1)

    def post_increment(self) -> Any:
        """``a++``: write value + 1 and return the value before the write."""
        previous = self.read()
        self.assign(previous + 1)
        return previous

    def pre_decrement(self) -> Any:
        """``--a``: write value - 1 and return the value written."""
        return self.assign(self.read() - 1)

    def post_decrement(self) -> Any:
        """``a--``: write value - 1 and return the value before the write."""
        previous = self.read()
        self.assign(previous - 1)
        return previous


class ReadWriteAccessor(MutableMixin):
    """
    Accessor with both a getter and a setter.

    Construction may call the getter twice, as described on `AccessorBase.__init__`.
    """

    __slots__ = ()


class ReadOnlyAccessor(ReadableMixin):
    """Accessor with a getter only; it cannot be assigned."""

    __slots__ = ()

    def __init__(
        self,
        getter: Any,
        *,
        returns: ReturnKind | str | None = None,
        entity_type: type | None = None,
        name: str = "",
    ) -> None:
        super().__init__(getter, None, returns=returns, entity_type=entity_type, name=name)


class WriteOnlyAccessor(WritableMixin):
    """Accessor with a setter only; it can be assigned but not read."""

    __slots__ = ()

    def __init__(self, setter: Any, *, entity_type: type | None = None, name: str = "") -> None:
        super().__init__(None, setter, entity_type=entity_type, name=name)


# End of file: src/mstair/accessors/accessor.py
