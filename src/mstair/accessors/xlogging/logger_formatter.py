# File: src/mstair/accessors/xlogging/logger_formatter.py
"""
CoreFormatter: adds file/line, class/method and accessor-name fields to log
records, colors them by level with colorama, and renders timestamps in a
configurable timezone with pytz.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

import pytz
from colorama import Fore, Style

from .logger_constants import CONSTRUCT, K_ACCESSOR_NAME, K_COLOR, K_KLASS_NAME, TRACE


__all__ = ["CoreFormatter", "get_color_code", "rgb_code"]


FormatStyle = Literal["%", "{", "$"]

DEFAULT_FORMAT = r"%(levelName)s %(asctime)s %(fileAndLine)s %(klassAndMethod)s%(accessor)s %(message)s"
DEFAULT_DATEFMT = "%I:%M:%S%p"


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to an ANSI escape code for terminal color output.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    :return str: ANSI escape code for the specified RGB color.
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


COLOR_MAP: dict[str | int | None, str] = {
    "fileAndLine": rgb_code(64, 128, 160),
    "klassAndMethod": rgb_code(48, 192, 160),
    "accessor": Fore.CYAN,
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": Style.DIM,
    "CONSTRUCT": rgb_code(176, 176, 224),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.LIGHTRED_EX,
    "CRITICAL": Fore.RED + Style.BRIGHT,
    None: Style.RESET_ALL,
}


def get_color_code(key: Any = None, *, enabled: bool = True) -> str:
    """Return the ANSI code for a COLOR_MAP key, a '#rrggbb' string, or a colorama Fore name."""
    if not enabled:
        return ""
    if key in {"", "RESET"} or key is None:
        return Style.RESET_ALL
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    if isinstance(key, str) and key.startswith("#") and len(key) == 7:
        return rgb_code(*[int(key[i : i + 2], 16) for i in (1, 3, 5)])
    if isinstance(key, str) and key.upper() in dir(Fore):
        return getattr(Fore, key.upper())
    return Style.RESET_ALL


def _colors_wanted() -> bool:
    """Color when LOG_COLOR asks for it, else when stderr is a terminal."""
    raw = os.environ.get("LOG_COLOR", "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return bool(getattr(sys.stderr, "isatty", lambda: False)())


class CoreFormatter(logging.Formatter):
    """
    Formatter used by the root stderr handler that initialize_root() installs.

    Extra record fields available to format strings:
    - ``%(levelName)s``: colored level name
    - ``%(fileAndLine)s``: ``path/to/file.py:123``, relative to the working directory
    - ``%(klassAndMethod)s``: ``Klass.method()`` or ``function()``
    - ``%(accessor)s``: `` <name>`` when the record concerns a named accessor
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        color: bool | None = None,
        tz: str | None = None,
    ) -> None:
        """
        :param fmt: Format string; defaults to LOG_FORMAT or DEFAULT_FORMAT.
        :param datefmt: Date format; defaults to LOG_DATEFMT or DEFAULT_DATEFMT.
        :param style: Format string style.
        :param validate: Whether to validate the format string.
        :param color: Force colors on or off; None decides from LOG_COLOR / isatty.
        :param tz: Timezone name for timestamps; defaults to LOG_TZ or UTC.
        """
        super().__init__(
            fmt=fmt or os.environ.get("LOG_FORMAT", DEFAULT_FORMAT),
            datefmt=datefmt or os.environ.get("LOG_DATEFMT", DEFAULT_DATEFMT),
            style=style,
            validate=validate,
        )
        self.color = _colors_wanted() if color is None else color
        self.tz = pytz.timezone(tz or os.environ.get("LOG_TZ", "UTC"))

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.klassAndMethod = self.format_klassAndMethod(record)
        record.levelName = self._paint(record.levelname, record.levelname)
        accessor_name = getattr(record, K_ACCESSOR_NAME, "")
        record.accessor = f" {self._paint('accessor', '<' + accessor_name + '>')}" if accessor_name else ""

        message = super().format(record)
        color_key = getattr(record, K_COLOR, record.levelname)
        if record.levelno in {TRACE, CONSTRUCT} or color_key != record.levelname:
            message = self._paint(color_key, message)
        return message

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, self.tz)
        if not datefmt:
            return moment.isoformat()
        return moment.strftime(datefmt).lstrip("0").replace("AM", "am").replace("PM", "pm")

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        if not file:
            return "<unknown file>"
        path = Path(file)
        try:
            shown = path.relative_to(Path.cwd()).as_posix()
        except ValueError:
            shown = path.as_posix()
        return self._paint("fileAndLine", f"{shown}:{lineno}")

    def format_klassAndMethod(self, record: logging.LogRecord) -> str:
        klass_name: str = getattr(record, K_KLASS_NAME, "")
        if not klass_name:
            text = record.funcName if record.funcName == "<module>" else f"{record.funcName}()"
        elif record.funcName == "__init__":
            text = f"{klass_name}()"
        else:
            text = f"{klass_name}.{record.funcName}()"
        return self._paint("klassAndMethod", text)

    def _paint(self, key: Any, text: str) -> str:
        if not self.color:
            return text
        return get_color_code(key) + text + get_color_code()


# End of file: src/mstair/accessors/xlogging/logger_formatter.py
