# File: src/mstair/accessors/xlogging/test_core_logger.py
"""
Tests for CoreLogger, its factory and CoreFormatter.

Confirms that:
- create_logger() returns CoreLogger instances wired into the hierarchy.
- Custom levels, construct() events and prefixes reach caplog.
- Extra keyword arguments become record attributes; reserved ones are refused.
- initialize_root() installs exactly one managed handler.
- CoreFormatter renders the accessor name and honors color/timezone settings.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest

from mstair.accessors.xlogging import logger_util as lu
from mstair.accessors.xlogging.core_logger import CoreLogger, initialize_root
from mstair.accessors.xlogging.logger_constants import CONSTRUCT, K_KLASS_NAME, TRACE
from mstair.accessors.xlogging.logger_factory import create_logger
from mstair.accessors.xlogging.logger_formatter import CoreFormatter, get_color_code, rgb_code


_ROOT_ATTR = "_mstair_accessors_corelogger_initialized"


@pytest.fixture
def clean_logging() -> Iterator[None]:
    """Reset root logger state (handlers, level, init flag) around a test."""
    root = logging.getLogger()
    prev_level = root.level
    prev_handlers = list(root.handlers)
    prev_attr = getattr(root, _ROOT_ATTR, None)

    root.handlers = []
    root.setLevel(logging.WARNING)
    if hasattr(root, _ROOT_ATTR):
        delattr(root, _ROOT_ATTR)

    yield

    root.handlers = prev_handlers
    root.setLevel(prev_level)
    if prev_attr is not None:
        setattr(root, _ROOT_ATTR, prev_attr)
    elif hasattr(root, _ROOT_ATTR):
        delattr(root, _ROOT_ATTR)


class Emitter:
    def __init__(self, logger: CoreLogger) -> None:
        self.logger = logger

    def emit(self) -> None:
        self.logger.warning("from a method")


# ----------------------------------------------------------------------
# Factory
# ----------------------------------------------------------------------


def test_create_logger_returns_core_logger() -> None:
    logger = create_logger("mstair.accessors.tests.factory")
    assert isinstance(logger, CoreLogger)
    assert create_logger("mstair.accessors.tests.factory") is logger
    assert logger.parent is not None


def test_create_logger_applies_level() -> None:
    logger = create_logger("mstair.accessors.tests.level", level=logging.ERROR)
    assert logger.level == logging.ERROR
    assert "ERROR" in repr(logger)


def test_level_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lu, "load_environment", lambda *a, **k: False)
    monkeypatch.setattr(lu, "_log_level_config_instance", None)
    monkeypatch.setenv("LOG_LEVELS", "mstair.accessors.tests.env*:DEBUG")
    logger = CoreLogger("mstair.accessors.tests.env_level")
    assert logger.level == logging.DEBUG


# ----------------------------------------------------------------------
# Records
# ----------------------------------------------------------------------


def test_trace_and_construct_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.levels")
    caplog.set_level(TRACE, logger=logger.name)
    logger.trace("tracing %d", 1)
    logger.construct("pkg.Widget", "w1", {"size": 3})
    levels = [r.levelno for r in caplog.records]
    assert levels == [TRACE, CONSTRUCT]
    assert caplog.records[0].getMessage() == "tracing 1"
    assert caplog.records[1].getMessage() == "Widget: w1, {'size': 3}"
    assert logging.getLevelName(TRACE) == "TRACE"


def test_construct_is_skipped_above_its_level(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.quiet")
    caplog.set_level(logging.INFO, logger=logger.name)
    logger.construct(int, "skipped")
    assert not caplog.records


def test_extra_keywords_become_record_attributes(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.extra")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    logger.debug("with extra", accessor_name="num")
    assert caplog.records[0].accessor_name == "num"


def test_reserved_keywords_are_refused(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.reserved")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with pytest.raises(ValueError, match="lineno"):
        logger.debug("bad", lineno=3)


def test_non_primitive_arguments_are_bounded(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.repr")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    logger.debug("%s", list(range(1000)))
    assert "..." in caplog.records[0].getMessage()


def test_prefix_with_nests(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.prefix")
    caplog.set_level(logging.INFO, logger=logger.name)
    with logger.prefix_with("outer"), logger.prefix_with("inner"):
        logger.info("message")
    logger.info("plain")
    assert [r.getMessage() for r in caplog.records] == ["outer > inner > message", "plain"]


def test_caller_class_is_recorded(caplog: pytest.LogCaptureFixture) -> None:
    logger = create_logger("mstair.accessors.tests.klass")
    caplog.set_level(logging.WARNING, logger=logger.name)
    Emitter(logger).emit()
    record = caplog.records[0]
    assert getattr(record, K_KLASS_NAME) == "Emitter"
    assert record.funcName == "emit"


# ----------------------------------------------------------------------
# Root handler
# ----------------------------------------------------------------------


def test_initialize_root_is_idempotent(clean_logging: None) -> None:
    stream = io.StringIO()
    initialize_root(stream=stream)
    initialize_root(stream=stream)
    managed = [h for h in logging.getLogger().handlers if getattr(h, _ROOT_ATTR, False)]
    assert len(managed) == 1
    assert isinstance(managed[0].formatter, CoreFormatter)


def test_initialize_root_force_and_level(clean_logging: None) -> None:
    initialize_root(stream=io.StringIO())
    initialize_root("DEBUG", force=True, stream=io.StringIO())
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len([h for h in root.handlers if getattr(h, _ROOT_ATTR, False)]) == 1


# ----------------------------------------------------------------------
# Formatter
# ----------------------------------------------------------------------


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("mstair.accessors", logging.WARNING, __file__, 12, "value %s", ("x",), None)
    record.funcName = "read"
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_renders_accessor_and_class() -> None:
    text = CoreFormatter(color=False).format(_record(accessor_name="num", klass_name="ReadWriteAccessor"))
    assert "WARNING" in text
    assert "ReadWriteAccessor.read()" in text
    assert "<num>" in text
    assert text.endswith("value x")
    assert "\033[" not in text


def test_formatter_colors_when_asked() -> None:
    text = CoreFormatter(color=True).format(_record())
    assert get_color_code("WARNING") in text


def test_formatter_timezone() -> None:
    formatter = CoreFormatter("%(asctime)s", datefmt="%Z", color=False, tz="US/Eastern")
    assert formatter.format(_record()) in {"EST", "EDT"}


def test_color_codes() -> None:
    assert rgb_code(300, -1, 16) == "\033[38;2;255;0;16m"
    assert get_color_code("#ff0000") == rgb_code(255, 0, 0)
    assert get_color_code("WARNING", enabled=False) == ""


# End of file: src/mstair/accessors/xlogging/test_core_logger.py
