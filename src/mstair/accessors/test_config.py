# File: src/mstair/accessors/test_config.py
"""
Tests for mstair.accessors.config: thread-local overrides, environment flags
and `.env` loading.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest

from mstair.accessors import config as cfg


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear accessor env flags and thread-local overrides; never read a real .env."""
    monkeypatch.setattr(cfg, "_environment_loaded", True)
    monkeypatch.delenv(cfg.ENV_CHECK_REFERENCES, raising=False)
    monkeypatch.delenv(cfg.ENV_TRACE, raising=False)
    cfg.reference_checks_enabled(unset_override=True)
    cfg.trace_access_enabled(unset_override=True)
    yield
    cfg.reference_checks_enabled(unset_override=True)
    cfg.trace_access_enabled(unset_override=True)
    cfg.in_test_mode(unset_override=True)


# ----------------------------------------------------------------------
# in_test_mode
# ----------------------------------------------------------------------


def test_in_test_mode_detects_pytest(clean_env: None) -> None:
    assert cfg.in_test_mode() is True


def test_in_test_mode_override(clean_env: None) -> None:
    assert cfg.in_test_mode(override=False) is False
    assert cfg.in_test_mode() is False
    assert cfg.in_test_mode(unset_override=True) is True


# ----------------------------------------------------------------------
# reference_checks_enabled
# ----------------------------------------------------------------------


def test_reference_checks_default_on_in_tests(clean_env: None) -> None:
    assert cfg.reference_checks_enabled() is True


@pytest.mark.parametrize(("raw", "expected"), [("0", False), ("off", False), ("yes", True), ("'TRUE'", True)])
def test_reference_checks_from_environment(
    monkeypatch: pytest.MonkeyPatch, clean_env: None, raw: str, expected: bool
) -> None:
    monkeypatch.setenv(cfg.ENV_CHECK_REFERENCES, raw)
    assert cfg.reference_checks_enabled() is expected


def test_unrecognized_environment_value_falls_back(monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
    monkeypatch.setenv(cfg.ENV_CHECK_REFERENCES, "maybe")
    assert cfg.reference_checks_enabled() is True


def test_override_beats_environment(monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
    monkeypatch.setenv(cfg.ENV_CHECK_REFERENCES, "1")
    assert cfg.reference_checks_enabled(override=False) is False
    assert cfg.reference_checks_enabled() is False
    assert cfg.reference_checks_enabled(unset_override=True) is True


def test_reference_checks_context_nests_and_restores(clean_env: None) -> None:
    with cfg.reference_checks_context(False):
        assert cfg.reference_checks_enabled() is False
        with cfg.reference_checks_context(True):
            assert cfg.reference_checks_enabled() is True
        assert cfg.reference_checks_enabled() is False
    assert cfg.reference_checks_enabled() is True


def test_overrides_are_thread_local(clean_env: None) -> None:
    seen: list[bool] = []

    def worker() -> None:
        seen.append(cfg.reference_checks_enabled())

    with cfg.reference_checks_context(False):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
    assert seen == [True]


# ----------------------------------------------------------------------
# trace_access_enabled
# ----------------------------------------------------------------------


def test_trace_access_default_off(clean_env: None) -> None:
    assert cfg.trace_access_enabled() is False


def test_trace_access_from_environment(monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
    monkeypatch.setenv(cfg.ENV_TRACE, "on")
    assert cfg.trace_access_enabled() is True


# ----------------------------------------------------------------------
# load_environment
# ----------------------------------------------------------------------


def test_load_environment_reads_dotenv_once(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> None:
    name = "MSTAIR_ACCESSORS_DOTENV_PROBE"
    (tmp_path / ".env").write_text(f"{name}=loaded\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cfg, "_environment_loaded", False)
    try:
        assert cfg.load_environment() is True
        assert os.environ[name] == "loaded"
        assert cfg.load_environment() is False
    finally:
        os.environ.pop(name, None)


def test_load_environment_does_not_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> None:
    (tmp_path / ".env").write_text(f"{cfg.ENV_TRACE}=1\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(cfg.ENV_TRACE, "0")
    cfg.load_environment(force=True)
    assert cfg.trace_access_enabled() is False


# End of file: src/mstair/accessors/test_config.py
