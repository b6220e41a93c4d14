# File: src/mstair/accessors/errors.py
"""
Exception types raised by the accessor package itself.

Construction failures and capability violations both derive from TypeError,
so callers that only care about "this accessor cannot be formed / used this
way" can keep catching TypeError. Errors raised by user-supplied getters and
setters are never wrapped; they propagate unchanged.
"""

from __future__ import annotations


__all__ = [
    "AccessorConstructionError",
    "AccessorError",
    "CapabilityError",
    "DanglingReferenceError",
    "DirectGetterKindError",
    "EntityTypeMismatchError",
]


class AccessorError(Exception):
    """Base class for errors raised by the accessor machinery."""


class AccessorConstructionError(AccessorError, TypeError):
    """The supplied strategies cannot form an accessor; no accessor is created."""


class DanglingReferenceError(AccessorConstructionError):
    """A reference-returning accessor was backed by a getter that produces temporaries."""


class EntityTypeMismatchError(AccessorConstructionError):
    """Getter and setter disagree on the entity type."""


class DirectGetterKindError(AccessorConstructionError):
    """A direct getter was requested for a return kind other than CONST_REFERENCE."""


class CapabilityError(AccessorError, TypeError):
    """The accessor's shape does not support the requested operation."""


# End of file: src/mstair/accessors/errors.py
