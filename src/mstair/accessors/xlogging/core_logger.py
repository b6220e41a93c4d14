# File: src/mstair/accessors/xlogging/core_logger.py
"""
Structured logging with environment-driven configuration.

Example:
    >>> from mstair.accessors.xlogging.logger_factory import create_logger
    >>> LOG = create_logger(__name__)
    >>> LOG.construct("ReadWriteAccessor", "num", {"returns": "CONST_REFERENCE"})
    >>> with LOG.prefix_with("[owner]"):
    ...     LOG.debug("binding accessors")

Features:
- Custom levels: TRACE (below DEBUG) and CONSTRUCT (below INFO)
- Per-logger levels from LOG_LEVEL / LOG_LEVELS / LOG_LEVEL_<NAME>
- Caller class name recorded on every record (``%(klassAndMethod)s``)
- Context-local message prefixes
- Non-primitive arguments rendered with a bounded repr

Design:
- Only the root logger owns a handler; CoreLogger instances propagate.
- initialize_root() is the only entry point for root setup and is idempotent.
"""

from __future__ import annotations

import contextvars
import inspect
import logging
import reprlib
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from fractions import Fraction
from types import FrameType
from typing import Any, ClassVar, TextIO

from .logger_constants import CONSTRUCT, K_KLASS_NAME, TRACE, initialize_logger_constants
from .logger_formatter import CoreFormatter
from .logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "initialize_root",
]

_LOG_KWARGS_FORBIDDEN: set[str] = {"filename", "lineno", "msg", "args", "levelname", "levelno"}
_LOG_KWARGS_STANDARD: set[str] = {"exc_info", "stack_info", "stacklevel", "extra"}
_LOG_ROOT_ATTR_NAME = "_mstair_accessors_corelogger_initialized"
_PRIMITIVE_TYPES: tuple[type, ...] = (str, int, float, complex, bool, Decimal, Fraction, type(None))

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")

_repr = reprlib.Repr()
_repr.maxstring = 80
_repr.maxother = 80


class CoreLogger(logging.Logger):
    """
    Application logger that extends logging.Logger with:

    - Custom levels: TRACE, CONSTRUCT.
    - The calling class name on each record.
    - Bounded repr of non-primitive args.
    - Structured .construct() events.
    - Prefix context manager for scoped message prefixes.
    """

    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 2  # _core_log() + public wrapper (log/debug/info/...)

    def __init__(self, name: str, level: int | str = logging.NOTSET) -> None:
        """
        :param name: The name of the logger, typically the module name.
        :param level: Initial level; NOTSET resolves it from the environment.
        """
        initialize_logger_constants()
        if level in {logging.NOTSET, "NOTSET", ""}:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        """Emit a record at an explicit level."""
        self._core_log(level, msg, args, kwargs)

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self._core_log(TRACE, msg, args, kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._core_log(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._core_log(logging.INFO, msg, args, kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._core_log(logging.WARNING, msg, args, kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._core_log(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._core_log(logging.CRITICAL, msg, args, kwargs)

    def exception(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        kwargs.setdefault("exc_info", True)
        self._core_log(logging.ERROR, msg, args, kwargs)

    def construct(self, type_: type | str, id: str, *details: Any, **kwargs: Any) -> None:
        """
        Log a construction event at CONSTRUCT level.

        The message is the short type name and the instance id, followed by a bounded
        repr of each detail. The first detail is never treated as a format string.

        :param type_: Type (or type name) of the constructed object.
        :param id: Instance identifier, e.g. the accessor name.
        :param details: Optional metadata such as a dict of construction parameters.
        """
        if not self.isEnabledFor(CONSTRUCT):
            return
        type_name = type_.rsplit(".", 1)[-1] if isinstance(type_, str) else type_.__name__
        text = f"{type_name}: {id}"
        for detail in details:
            text += f", {_repr.repr(detail)}"
        self._core_log(CONSTRUCT, "%s", (text,), kwargs)

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix all log messages emitted within the current context.

        Nested prefixes accumulate. Uses contextvars, so it is safe across threads
        and asyncio tasks.
        """
        current = _log_prefix.get()
        token = _log_prefix.set(f"{current}{prefix} > ")
        try:
            yield
        finally:
            _log_prefix.reset(token)

    def _core_log(self, level: int, msg: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        initialize_root()
        if not self.isEnabledFor(level):
            return

        extra: dict[str, Any] = dict(kwargs.pop("extra", None) or {})
        for key in list(kwargs):
            if key in _LOG_KWARGS_FORBIDDEN:
                raise ValueError(f"Invalid keyword argument '{key}={kwargs[key]!r}'")
            if key not in _LOG_KWARGS_STANDARD:
                extra[key] = kwargs.pop(key)

        stacklevel: int = kwargs.pop("stacklevel", 1) + self._INTERNAL_FRAME_OFFSET
        klass_name = _caller_class_name(stacklevel)
        if klass_name:
            extra.setdefault(K_KLASS_NAME, klass_name)

        if prefix := _log_prefix.get():
            msg = f"{prefix}{msg}"

        super().log(
            level,
            msg,
            *(a if isinstance(a, _PRIMITIVE_TYPES) else _repr.repr(a) for a in args),
            exc_info=kwargs.get("exc_info"),
            stack_info=kwargs.get("stack_info", False),
            stacklevel=stacklevel,
            extra=extra,
        )


def initialize_root(level: int | str | None = None, *, force: bool = False, stream: TextIO | None = None) -> None:
    """
    Idempotently configure the root logger for CoreLogger.

    - Ensures exactly one stderr StreamHandler with CoreFormatter exists.
    - `force=True` removes and recreates that handler.
    - Sets root level to `level` if provided, otherwise WARNING if root is NOTSET.
    - Never modifies handlers owned by the host application.

    :param level: Root logger level (int or name).
    :param force: Reinitialize even if already initialized.
    :param stream: Stream for the managed handler (default: sys.stderr).
    """
    root = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    target = stream or sys.stderr
    if force:
        root.handlers = [h for h in root.handlers if not getattr(h, _LOG_ROOT_ATTR_NAME, False)]
    if not any(getattr(h, _LOG_ROOT_ATTR_NAME, False) for h in root.handlers):
        handler = logging.StreamHandler(target)
        handler.setFormatter(CoreFormatter())
        setattr(handler, _LOG_ROOT_ATTR_NAME, True)
        root.addHandler(handler)

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.level == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _caller_class_name(stacklevel: int) -> str:
    """Return the class name of `self`/`cls` in the frame `stacklevel - 1` frames above _core_log()."""
    frame: FrameType | None = inspect.currentframe()
    try:
        frame = frame.f_back if frame else None  # _core_log()
        for _ in range(stacklevel - 1):
            if frame is None:
                return ""
            frame = frame.f_back
        if frame is None:
            return ""
        f_locals = frame.f_locals
        if (zelf := f_locals.get("self")) is not None:
            return type(zelf).__name__
        if isinstance(cls := f_locals.get("cls"), type):
            return cls.__name__
        return ""
    finally:
        # Break reference cycle: frame -> f_locals -> frame
        del frame


# End of file: src/mstair/accessors/xlogging/core_logger.py
