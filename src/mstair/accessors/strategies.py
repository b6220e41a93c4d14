# File: src/mstair/accessors/strategies.py
"""
Getter and setter strategies, and the construction rules that combine them.

A getter slot holds one of:
- FunctionGetter: a zero-argument callable supplied by the owner.
- DirectGetter: a Ref to existing storage, exposed read-only.
- ABSENT.

A setter slot holds one of:
- FunctionSetter: a one-argument callable; its return value is ignored.
- DirectSetter: a Ref that is assigned to directly.
- ABSENT.

`resolve_strategies()` applies every construction rule in one place and
either returns a `StrategySet` or raises an `AccessorConstructionError`
subclass; no partially constructed accessor ever exists.
"""

from __future__ import annotations

import contextlib
import enum
import inspect
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Final

from mstair.accessors import config as cfg
from mstair.accessors.errors import (
    AccessorConstructionError,
    DanglingReferenceError,
    DirectGetterKindError,
    EntityTypeMismatchError,
)
from mstair.accessors.refs import Ref, ref_to
from mstair.accessors.xlogging.logger_factory import create_logger


__all__ = [
    "ABSENT",
    "DirectGetter",
    "DirectSetter",
    "FunctionGetter",
    "FunctionSetter",
    "GetterStrategy",
    "ReturnKind",
    "SetterStrategy",
    "StrategySet",
    "as_getter",
    "as_setter",
    "direct_get",
    "direct_set",
    "resolve_strategies",
]

_LOG = create_logger(__name__)


class ReturnKind(enum.Enum):
    """
    What the getter result is to the accessor.

    `read()` always returns the getter result unchanged. The kind decides whether
    the result must be stable storage (the two reference kinds, checked at
    construction) and whether item and attribute assignment may be forwarded
    into it (REFERENCE only).
    """

    VALUE = "value"
    """The getter result as returned; the accessor refuses to forward mutation into it."""

    REFERENCE = "reference"
    """The getter result itself; mutation may be forwarded through the accessor."""

    CONST_REFERENCE = "const_reference"
    """The getter result itself; the accessor refuses to forward mutation."""

    @property
    def is_reference(self) -> bool:
        return self is not ReturnKind.VALUE


class _Absent:
    """Marker for an unpopulated strategy slot."""

    _instance: ClassVar[_Absent | None] = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final[_Absent] = _Absent()


class GetterStrategy:
    """Produces the current value of the entity."""

    __slots__ = ()

    is_direct: ClassVar[bool] = False

    @property
    def entity_type(self) -> type | None:
        return None

    def __call__(self) -> Any:
        raise NotImplementedError


class SetterStrategy:
    """Stores a new value of the entity."""

    __slots__ = ()

    is_direct: ClassVar[bool] = False

    @property
    def entity_type(self) -> type | None:
        return None

    def __call__(self, value: Any) -> None:
        raise NotImplementedError


class FunctionGetter(GetterStrategy):
    """Getter backed by a zero-argument callable."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[[], Any]) -> None:
        if not callable(func):
            raise AccessorConstructionError(f"Getter must be callable, not {type(func).__name__!r}")
        _require_arity(func, 0, "getter")
        hints = _type_hints(func)
        if "return" in hints and hints["return"] is type(None):
            raise AccessorConstructionError(f"Getter {_describe(func)} is annotated to return None")
        self.func = func

    @property
    def entity_type(self) -> type | None:
        return _plain_class(_type_hints(self.func).get("return"))

    def __call__(self) -> Any:
        return self.func()

    def __repr__(self) -> str:
        return f"FunctionGetter({_describe(self.func)})"


class FunctionSetter(SetterStrategy):
    """Setter backed by a one-argument callable."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[[Any], Any]) -> None:
        if not callable(func):
            raise AccessorConstructionError(f"Setter must be callable, not {type(func).__name__!r}")
        _require_arity(func, 1, "setter")
        hints = _type_hints(func)
        if hints.get("return", type(None)) is not type(None):
            raise AccessorConstructionError(
                f"Setter {_describe(func)} must return None, it is annotated to return {hints['return']!r}"
            )
        self.func = func

    @property
    def entity_type(self) -> type | None:
        hints = _type_hints(self.func)
        with contextlib.suppress(TypeError, ValueError):
            first = next(iter(inspect.signature(self.func).parameters))
            return _plain_class(hints.get(first))
        return None

    def __call__(self, value: Any) -> None:
        self.func(value)

    def __repr__(self) -> str:
        return f"FunctionSetter({_describe(self.func)})"


class DirectGetter(GetterStrategy):
    """Getter that reads a Ref; only legal for CONST_REFERENCE accessors."""

    __slots__ = ("ref",)

    is_direct = True

    def __init__(self, ref: Ref[Any]) -> None:
        if not isinstance(ref, Ref):
            raise AccessorConstructionError(f"Direct getter needs a Ref, not {type(ref).__name__!r}")
        self.ref = ref

    @property
    def entity_type(self) -> type | None:
        return self.ref.entity_type

    def __call__(self) -> Any:
        return self.ref.get()

    def __repr__(self) -> str:
        return f"DirectGetter({self.ref!r})"


class DirectSetter(SetterStrategy):
    """Setter that assigns through a Ref."""

    __slots__ = ("ref",)

    is_direct = True

    def __init__(self, ref: Ref[Any]) -> None:
        if not isinstance(ref, Ref):
            raise AccessorConstructionError(f"Direct setter needs a Ref, not {type(ref).__name__!r}")
        self.ref = ref

    @property
    def entity_type(self) -> type | None:
        return self.ref.entity_type

    def __call__(self, value: Any) -> None:
        self.ref.set(value)

    def __repr__(self) -> str:
        return f"DirectSetter({self.ref!r})"


_NO_KEY: Final[object] = object()


def direct_get(target: Any, name_or_key: Any = _NO_KEY, entity_type: type | None = None) -> DirectGetter:
    """
    Build a direct getter.

    >>> direct_get(Cell(1.0))               # an existing Ref
    >>> direct_get(self, "_num")            # attribute of an object
    >>> direct_get(settings, "timeout")     # key of a mapping
    """
    return DirectGetter(_as_ref(target, name_or_key, entity_type))


def direct_set(target: Any, name_or_key: Any = _NO_KEY, entity_type: type | None = None) -> DirectSetter:
    """Build a direct setter; arguments as for direct_get()."""
    return DirectSetter(_as_ref(target, name_or_key, entity_type))


def as_getter(obj: Any) -> GetterStrategy | _Absent:
    """Normalize a user-supplied getter argument into a strategy or ABSENT."""
    if obj is None or obj is ABSENT:
        return ABSENT
    if isinstance(obj, GetterStrategy):
        return obj
    if isinstance(obj, SetterStrategy):
        raise AccessorConstructionError(f"{obj!r} is a setter strategy, not a getter")
    if isinstance(obj, Ref):
        return DirectGetter(obj)
    return FunctionGetter(obj)


def as_setter(obj: Any) -> SetterStrategy | _Absent:
    """Normalize a user-supplied setter argument into a strategy or ABSENT."""
    if obj is None or obj is ABSENT:
        return ABSENT
    if isinstance(obj, SetterStrategy):
        return obj
    if isinstance(obj, GetterStrategy):
        raise AccessorConstructionError(f"{obj!r} is a getter strategy, not a setter")
    if isinstance(obj, Ref):
        return DirectSetter(obj)
    return FunctionSetter(obj)


@dataclass(frozen=True, slots=True)
class StrategySet:
    """The validated result of combining a getter and a setter."""

    getter: GetterStrategy | _Absent
    setter: SetterStrategy | _Absent
    returns: ReturnKind
    entity_type: type | None


def resolve_strategies(
    getter: Any,
    setter: Any,
    *,
    returns: ReturnKind | str | None = None,
    entity_type: type | None = None,
) -> StrategySet:
    """
    Combine a getter and a setter argument into a validated StrategySet.

    Rules:
    - At least one of getter/setter must be supplied.
    - Default return kind is CONST_REFERENCE for a direct getter, VALUE otherwise.
    - A direct getter requires CONST_REFERENCE.
    - Getter and setter entity types must agree (a subclass relation counts).
    - A reference return kind over a function getter is probed for temporaries
      when reference checks are enabled. The probe calls the getter twice.
      A VALUE getter is never called here.

    :raises AccessorConstructionError: If any rule is violated.
    """
    get_strategy = as_getter(getter)
    set_strategy = as_setter(setter)
    if get_strategy is ABSENT and set_strategy is ABSENT:
        raise _rejected(AccessorConstructionError("An accessor needs a getter, a setter, or both"))

    if returns is None:
        kind = (
            ReturnKind.CONST_REFERENCE
            if isinstance(get_strategy, DirectGetter)
            else ReturnKind.VALUE
        )
    else:
        kind = _coerce_kind(returns)

    if isinstance(get_strategy, DirectGetter) and kind is not ReturnKind.CONST_REFERENCE:
        raise _rejected(
            DirectGetterKindError(
                f"A direct getter only supports ReturnKind.CONST_REFERENCE, not {kind}"
            )
        )

    resolved_type = _agree_entity_type(entity_type, get_strategy, set_strategy)

    if isinstance(get_strategy, FunctionGetter) and kind.is_reference and cfg.reference_checks_enabled():
        _probe_for_temporaries(get_strategy, kind)

    return StrategySet(get_strategy, set_strategy, kind, resolved_type)


def _agree_entity_type(
    explicit: type | None,
    getter: GetterStrategy | _Absent,
    setter: SetterStrategy | _Absent,
) -> type | None:
    """Return the single entity type all sources agree on, or raise EntityTypeMismatchError."""
    sources: list[tuple[str, type]] = []
    if explicit is not None:
        sources.append(("entity_type", explicit))
    if getter is not ABSENT and (t := getter.entity_type) is not None:
        sources.append((repr(getter), t))
    if setter is not ABSENT and (t := setter.entity_type) is not None:
        sources.append((repr(setter), t))
    if not sources:
        return None

    label, chosen = sources[0]
    for other_label, other in sources[1:]:
        if not (issubclass(other, chosen) or issubclass(chosen, other)):
            raise _rejected(
                EntityTypeMismatchError(
                    f"Entity type mismatch: {label} uses {chosen.__name__}, "
                    f"{other_label} uses {other.__name__}"
                )
            )
    return chosen


def _probe_for_temporaries(getter: FunctionGetter, kind: ReturnKind) -> None:
    """
    Reject a reference-returning getter whose result is not stable storage.

    Calls the getter twice; a getter that returns a reference hands back the same
    object both times, one that builds a temporary does not.
    """
    first = getter()
    second = getter()
    if first is not second:
        raise _rejected(
            DanglingReferenceError(
                f"{getter!r} returns a new {type(first).__name__} object on each call, "
                f"so it cannot back a {kind} accessor; use ReturnKind.VALUE"
            )
        )


def _coerce_kind(returns: ReturnKind | str) -> ReturnKind:
    """Accept a ReturnKind, its value ("const_reference") or its name ("CONST_REFERENCE")."""
    if isinstance(returns, ReturnKind):
        return returns
    if isinstance(returns, str):
        with contextlib.suppress(ValueError):
            return ReturnKind(returns.lower())
        with contextlib.suppress(KeyError):
            return ReturnKind[returns.upper()]
    raise _rejected(AccessorConstructionError(f"Unknown return kind {returns!r}"))


def _rejected(error: AccessorConstructionError) -> AccessorConstructionError:
    _LOG.debug("Rejected accessor construction: %s", str(error), stacklevel=3)
    return error


def _as_ref(target: Any, name_or_key: Any, entity_type: type | None) -> Ref[Any]:
    if name_or_key is _NO_KEY:
        if not isinstance(target, Ref):
            raise AccessorConstructionError(
                f"Direct strategy needs a Ref or (target, name), got {type(target).__name__!r}"
            )
        return target
    try:
        return ref_to(target, name_or_key, entity_type)
    except TypeError as exc:
        raise AccessorConstructionError(str(exc)) from exc


def _require_arity(func: Callable[..., Any], count: int, role: str) -> None:
    """Raise if `func` cannot be called with exactly `count` positional arguments."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return  # builtins without signature metadata
    try:
        signature.bind(*([None] * count))
    except TypeError as exc:
        raise AccessorConstructionError(
            f"A {role} must accept {count} positional argument{'s' if count != 1 else ''}; "
            f"{_describe(func)}{signature} does not ({exc})"
        ) from exc


def _type_hints(func: Callable[..., Any]) -> dict[str, Any]:
    with contextlib.suppress(Exception):
        return typing.get_type_hints(func)
    return {}


def _plain_class(annotation: Any) -> type | None:
    if annotation is Any or isinstance(annotation, types.GenericAlias) or not isinstance(annotation, type):
        return None
    return annotation if annotation is not type(None) else None


def _describe(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or type(func).__name__


# End of file: src/mstair/accessors/strategies.py
