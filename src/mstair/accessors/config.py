# File: src/mstair/accessors/config.py
"""
Runtime switches for the accessor package.

This module decides which optional checks the accessor machinery performs.
It uses thread-local storage so that overrides are isolated per thread, and
reads defaults from the environment (after loading a `.env` file once).

Exports:
- in_test_mode(): check or override whether code is in test mode.
- reference_checks_enabled(): check or override the dangling-reference probe.
- reference_checks_context(): context manager for a scoped override.
- trace_access_enabled(): check or override TRACE logging of reads/writes.
- load_environment(): load `.env` values into os.environ (idempotent).

Environment:
- ACCESSOR_CHECK_REFERENCES: "1/true/yes/on" or "0/false/no/off".
  Default: on in test mode or when Python runs without -O.
- ACCESSOR_TRACE: same boolean spellings. Default: off.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

import dotenv


__all__ = [
    "ENV_CHECK_REFERENCES",
    "ENV_TRACE",
    "in_test_mode",
    "load_environment",
    "reference_checks_context",
    "reference_checks_enabled",
    "trace_access_enabled",
]

ENV_CHECK_REFERENCES: Final[str] = "ACCESSOR_CHECK_REFERENCES"
ENV_TRACE: Final[str] = "ACCESSOR_TRACE"

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})

_tls = threading.local()
_environment_loaded = False


@dataclass
class TLSAttrs:
    """Thread-local overrides for accessor behavior."""

    in_test_mode_override: bool | None = None
    reference_checks_override: bool | None = None
    trace_access_override: bool | None = None


def _get_tls() -> TLSAttrs:
    """Return the current thread's TLSAttrs instance, initializing if needed."""
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


def load_environment(*, force: bool = False) -> bool:
    """
    Load variables from the nearest `.env` file into os.environ, once per process.

    Existing environment variables are never overridden.

    :param force: Load again even if a previous call already loaded the file.
    :return: True if a `.env` file was found and loaded on this call.
    """
    global _environment_loaded
    if _environment_loaded and not force:
        return False
    _environment_loaded = True
    path = dotenv.find_dotenv(usecwd=True)
    if not path:
        return False
    return dotenv.load_dotenv(dotenv_path=path, override=False)


def _env_flag(name: str) -> bool | None:
    """Return the boolean value of an environment flag, or None if unset/unrecognized."""
    load_environment()
    raw = os.environ.get(name)
    if raw is None:
        return None
    word = raw.strip().strip("\"'").lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def in_test_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running in test mode, with optional override.

    Detection order:
      1. Explicit override (thread-local).
      2. Presence of pytest/unittest in sys.modules.
      3. Known environment variables (e.g. PYTEST_CURRENT_TEST, CI).

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if test mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_test_mode_override = None
    if override is not None:
        tls.in_test_mode_override = override
        return override
    if tls.in_test_mode_override is not None:
        return tls.in_test_mode_override
    if "pytest" in sys.modules or "unittest" in sys.modules:
        return True

    env = os.environ
    return bool(
        any(env.get(k) for k in ("PYTEST_CURRENT_TEST", "PYTEST_RUNNING", "UNITTEST_RUNNING"))
        or env.get("CI") == "true"
    )


def reference_checks_enabled(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check whether reference-returning accessors probe their getter at construction.

    Rules:
      - Explicit override wins.
      - ACCESSOR_CHECK_REFERENCES wins over the defaults.
      - On in test mode and whenever assertions are enabled (no -O).

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if the dangling-reference probe should run.
    """
    tls = _get_tls()
    if unset_override:
        tls.reference_checks_override = None
    if override is not None:
        tls.reference_checks_override = override
        return override
    if tls.reference_checks_override is not None:
        return tls.reference_checks_override

    env_value = _env_flag(ENV_CHECK_REFERENCES)
    if env_value is not None:
        return env_value
    return in_test_mode() or __debug__


@contextmanager
def reference_checks_context(enabled: bool) -> Iterator[None]:
    """
    Temporarily force the dangling-reference probe on or off for this thread.

    Restores the previous override on exit. Nested contexts are supported.
    """
    tls = _get_tls()
    previous = tls.reference_checks_override
    tls.reference_checks_override = enabled
    try:
        yield
    finally:
        tls.reference_checks_override = previous


def trace_access_enabled(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check whether accessor reads and writes are logged at TRACE level.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if access tracing is on.
    """
    tls = _get_tls()
    if unset_override:
        tls.trace_access_override = None
    if override is not None:
        tls.trace_access_override = override
        return override
    if tls.trace_access_override is not None:
        return tls.trace_access_override
    return bool(_env_flag(ENV_TRACE))


# End of file: src/mstair/accessors/config.py
