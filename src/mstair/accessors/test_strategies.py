# File: src/mstair/accessors/test_strategies.py
"""
Tests for strategy normalization and the construction rules in
resolve_strategies(): shape, return kind, entity type agreement, and the
dangling-reference probe.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from mstair.accessors import config as cfg
from mstair.accessors.errors import (
    AccessorConstructionError,
    DanglingReferenceError,
    DirectGetterKindError,
    EntityTypeMismatchError,
)
from mstair.accessors.refs import Cell
from mstair.accessors.strategies import (
    ABSENT,
    DirectGetter,
    DirectSetter,
    FunctionGetter,
    FunctionSetter,
    ReturnKind,
    as_getter,
    as_setter,
    direct_get,
    direct_set,
    resolve_strategies,
)


class Base:
    pass


class Derived(Base):
    pass


class Box:
    def __init__(self) -> None:
        self.items: list[int] = [1, 2]
        self.num = 1.0

    def get_num(self) -> float:
        return self.num

    def set_num(self, value: float) -> None:
        self.num = value

    def get_label(self) -> str:
        return "label"

    def fresh_items(self) -> list[int]:
        return list(self.items)


@pytest.fixture
def checks_on() -> Iterator[None]:
    with cfg.reference_checks_context(True):
        yield


# ----------------------------------------------------------------------
# ReturnKind / ABSENT
# ----------------------------------------------------------------------


def test_return_kind_reference_flag() -> None:
    assert not ReturnKind.VALUE.is_reference
    assert ReturnKind.REFERENCE.is_reference
    assert ReturnKind.CONST_REFERENCE.is_reference


def test_absent_is_a_falsy_singleton() -> None:
    assert not ABSENT
    assert repr(ABSENT) == "ABSENT"
    assert type(ABSENT)() is ABSENT


# ----------------------------------------------------------------------
# Normalization
# ----------------------------------------------------------------------


def test_as_getter_and_as_setter_normalize_arguments() -> None:
    box = Box()
    assert as_getter(None) is ABSENT
    assert as_setter(None) is ABSENT
    assert isinstance(as_getter(box.get_num), FunctionGetter)
    assert isinstance(as_setter(box.set_num), FunctionSetter)
    assert isinstance(as_getter(Cell(1)), DirectGetter)
    assert isinstance(as_setter(Cell(1)), DirectSetter)


def test_strategy_in_the_wrong_slot_is_rejected() -> None:
    box = Box()
    with pytest.raises(AccessorConstructionError):
        as_getter(direct_set(box, "num"))
    with pytest.raises(AccessorConstructionError):
        as_setter(direct_get(box, "num"))


def test_function_getter_arity_is_checked() -> None:
    with pytest.raises(AccessorConstructionError, match="0 positional"):
        FunctionGetter(lambda x: x)
    with pytest.raises(AccessorConstructionError, match="1 positional"):
        FunctionSetter(lambda: None)
    with pytest.raises(AccessorConstructionError):
        FunctionGetter(42)  # type: ignore[arg-type]


def test_function_getter_annotated_none_is_rejected() -> None:
    def nothing() -> None:
        return None

    with pytest.raises(AccessorConstructionError, match="return None"):
        FunctionGetter(nothing)


def test_function_setter_must_not_declare_a_result() -> None:
    def returns_int(value: int) -> int:
        return value

    with pytest.raises(AccessorConstructionError, match="must return None"):
        FunctionSetter(returns_int)


def test_entity_types_come_from_annotations() -> None:
    box = Box()
    assert FunctionGetter(box.get_num).entity_type is float
    assert FunctionSetter(box.set_num).entity_type is float
    assert FunctionGetter(lambda: 1).entity_type is None


def test_direct_strategies_need_a_ref_or_a_name() -> None:
    with pytest.raises(AccessorConstructionError):
        direct_get(Box())
    with pytest.raises(AccessorConstructionError):
        direct_set(Box(), 3)
    getter = direct_get({"a": 1}, "a")
    assert getter() == 1


# ----------------------------------------------------------------------
# resolve_strategies
# ----------------------------------------------------------------------


def test_neither_getter_nor_setter_is_rejected() -> None:
    with pytest.raises(AccessorConstructionError, match="getter, a setter, or both"):
        resolve_strategies(None, None)


def test_default_return_kind_depends_on_getter_kind() -> None:
    box = Box()
    assert resolve_strategies(box.get_num, None).returns is ReturnKind.VALUE
    assert resolve_strategies(direct_get(box, "num"), None).returns is ReturnKind.CONST_REFERENCE
    assert resolve_strategies(None, box.set_num).returns is ReturnKind.VALUE


def test_return_kind_accepts_names() -> None:
    box = Box()
    assert resolve_strategies(box.get_num, None, returns="value").returns is ReturnKind.VALUE
    assert resolve_strategies(direct_get(box, "num"), None, returns="CONST_REFERENCE").returns is (
        ReturnKind.CONST_REFERENCE
    )
    with pytest.raises(AccessorConstructionError, match="Unknown return kind"):
        resolve_strategies(box.get_num, None, returns="pointer")


@pytest.mark.parametrize("kind", [ReturnKind.VALUE, ReturnKind.REFERENCE])
def test_direct_getter_requires_const_reference(kind: ReturnKind) -> None:
    with pytest.raises(DirectGetterKindError):
        resolve_strategies(direct_get(Box(), "num"), None, returns=kind)


def test_entity_type_mismatch_is_rejected() -> None:
    box = Box()
    with pytest.raises(EntityTypeMismatchError, match="float"):
        resolve_strategies(box.get_label, box.set_num)
    with pytest.raises(EntityTypeMismatchError):
        resolve_strategies(box.get_num, None, entity_type=str)


def test_entity_type_subclass_relation_is_accepted() -> None:
    def get_derived() -> Derived:
        return Derived()

    strategies = resolve_strategies(get_derived, None, entity_type=Base)
    assert strategies.entity_type is Base


def test_entity_type_from_annotated_ref() -> None:
    assert resolve_strategies(direct_get(Cell(1, int)), None).entity_type is int


def test_temporary_behind_reference_is_rejected(checks_on: None) -> None:
    box = Box()
    with pytest.raises(DanglingReferenceError, match="new list"):
        resolve_strategies(box.fresh_items, None, returns=ReturnKind.REFERENCE)
    with pytest.raises(DanglingReferenceError):
        resolve_strategies(box.fresh_items, None, returns=ReturnKind.CONST_REFERENCE)


def test_stable_storage_behind_reference_is_accepted(checks_on: None) -> None:
    box = Box()
    strategies = resolve_strategies(lambda: box.items, None, returns=ReturnKind.REFERENCE)
    assert strategies.getter() is box.items


def test_probe_is_skipped_when_checks_are_off() -> None:
    box = Box()
    with cfg.reference_checks_context(False):
        strategies = resolve_strategies(box.fresh_items, None, returns=ReturnKind.REFERENCE)
    assert strategies.returns is ReturnKind.REFERENCE


def test_rejection_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="mstair.accessors.strategies")
    with pytest.raises(AccessorConstructionError):
        resolve_strategies(None, None)
    assert any("Rejected accessor construction" in r.getMessage() for r in caplog.records)


# End of file: src/mstair/accessors/test_strategies.py
