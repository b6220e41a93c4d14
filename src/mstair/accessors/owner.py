# File: src/mstair/accessors/owner.py
"""
Owner-side integration: assignment syntax for accessor fields.

Without help, `obj.num = 5.0` would rebind the attribute and throw the
accessor away. `AccessorOwnerMixin` routes such assignments into the accessor
instead, so an owning class reads naturally:

>>> class A(AccessorOwnerMixin):
...     def __init__(self):
...         self._num = 0.0
...         self.num = make_accessor(direct_get(self, "_num"), self._set_num)
...     def _set_num(self, value: float) -> None:
...         if value < 0:
...             raise ValueError("num must not be negative")
...         self._num = value
...
>>> a = A()
>>> a.num = 5.0          # calls a.num.assign(5.0)
>>> a.num + 1
6.0

Rules
-----
- Assigning an accessor to an attribute that does not yet hold one binds it
  and names it after the attribute.
- Assigning to an attribute that holds an accessor calls its `assign()`; an
  accessor without a setter refuses with CapabilityError.
- Assigning the same accessor object again is a no-op; assigning another
  accessor assigns that accessor's value.
- Deleting an accessor attribute raises AttributeError.
- Dunders are never intercepted.
"""

from __future__ import annotations

from typing import Any

from mstair.accessors.accessor import AccessorBase
from mstair.accessors.errors import CapabilityError
from mstair.accessors.factory import make_accessor
from mstair.accessors.strategies import ReturnKind
from mstair.accessors.xlogging.logger_factory import create_logger


__all__ = [
    "AccessorOwnerMixin",
]

_LOG = create_logger(__name__)


class AccessorOwnerMixin:
    """Routes attribute assignment into accessor fields held by the instance."""

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("__") and name.endswith("__"):
            object.__setattr__(self, name, value)
            return

        current = self._bound_accessor(name)
        if current is None:
            if isinstance(value, AccessorBase):
                value.bind_name(name)
                _LOG.debug("Bound accessor %r as %s.%s", value, type(self).__name__, name)
            object.__setattr__(self, name, value)
            return

        if value is current:
            return
        if not current._has_setter:
            raise CapabilityError(f"{type(self).__name__}.{name} is read-only ({current!r})")
        current.assign(value)

    def __delattr__(self, name: str) -> None:
        if self._bound_accessor(name) is not None:
            raise AttributeError(f"Accessor {type(self).__name__}.{name} is bound for the owner's lifetime")
        object.__delattr__(self, name)

    def _bound_accessor(self, name: str) -> AccessorBase | None:
        try:
            current = object.__getattribute__(self, name)
        except AttributeError:
            return None
        return current if isinstance(current, AccessorBase) else None

    def bind_accessor(
        self,
        name: str,
        getter: Any = None,
        setter: Any = None,
        *,
        returns: ReturnKind | str | None = None,
        entity_type: type | None = None,
    ) -> AccessorBase:
        """Build an accessor from the given strategies and bind it as `name`."""
        accessor = make_accessor(getter, setter, returns=returns, entity_type=entity_type, name=name)
        setattr(self, name, accessor)
        return accessor

    def bind_hooks(self, *names: str, returns: ReturnKind | str | None = None) -> None:
        """
        Bind an accessor per name from `_get_{name}` / `_set_{name}` methods.

        Either hook may be missing; the shape follows the hooks that exist.
        A name with neither hook raises AttributeError.
        """
        for name in names:
            getter = getattr(self, f"_get_{name}", None)
            setter = getattr(self, f"_set_{name}", None)
            if not callable(getter) and not callable(setter):
                raise AttributeError(f"{type(self).__name__} defines neither _get_{name} nor _set_{name}")
            self.bind_accessor(
                name,
                getter if callable(getter) else None,
                setter if callable(setter) else None,
                returns=returns,
            )


# End of file: src/mstair/accessors/owner.py
