"""Access-log formatting: colours, duration text and the default log line."""

from __future__ import annotations

import enum
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, TextIO, Union

from .recovery import time_format

GREEN = "\033[97;42m"
WHITE = "\033[90;47m"
YELLOW = "\033[90;43m"
RED = "\033[97;41m"
BLUE = "\033[97;44m"
MAGENTA = "\033[97;45m"
CYAN = "\033[97;46m"
RESET = "\033[0m"

_SECOND_NS = 1_000_000_000
_MINUTE_NS = 60 * _SECOND_NS

Duration = Union[int, float, timedelta]


class ColorMode(enum.Enum):
    """Whether log lines are coloured."""

    AUTO = "auto"
    DISABLE = "disable"
    FORCE = "force"


_color_mode = ColorMode.AUTO


def disable_console_color() -> None:
    """Never colour log output."""
    global _color_mode
    _color_mode = ColorMode.DISABLE


def force_console_color() -> None:
    """Always colour log output."""
    global _color_mode
    _color_mode = ColorMode.FORCE


def reset_console_color() -> None:
    """Colour log output only when it goes to a terminal."""
    global _color_mode
    _color_mode = ColorMode.AUTO


def console_color_mode() -> ColorMode:
    """Return the current colour mode."""
    return _color_mode


_METHOD_COLORS = {
    "GET": BLUE,
    "POST": CYAN,
    "PUT": YELLOW,
    "DELETE": RED,
    "PATCH": GREEN,
    "HEAD": MAGENTA,
    "OPTIONS": WHITE,
}


@dataclass
class LogFormatterParams:
    """Everything a formatter gets to describe one handled request."""

    request: Any = None
    timestamp: datetime = field(default_factory=datetime.now)
    status_code: int = 0
    latency: Duration = 0.0
    client_ip: str = ""
    method: str = ""
    path: str = ""
    error_message: str = ""
    is_term: bool = False
    body_size: int = 0
    keys: dict[str, Any] | None = None

    def status_code_color(self) -> str:
        """ANSI colour for the status code."""
        code = self.status_code
        if 100 <= code < 200:
            return WHITE
        if 200 <= code < 300:
            return GREEN
        if 300 <= code < 400:
            return WHITE
        if 400 <= code < 500:
            return YELLOW
        return RED

    def method_color(self) -> str:
        """ANSI colour for the HTTP method."""
        return _METHOD_COLORS.get(self.method, RESET)

    def reset_color(self) -> str:
        """ANSI sequence that resets all attributes."""
        return RESET

    def is_output_color(self) -> bool:
        """Whether the line should carry colours."""
        return _color_mode is ColorMode.FORCE or (
            _color_mode is ColorMode.AUTO and self.is_term
        )


def _to_nanoseconds(value: Duration) -> int:
    if isinstance(value, timedelta):
        return (value.days * 86400 + value.seconds) * _SECOND_NS + value.microseconds * 1000
    if isinstance(value, int):
        return value * _SECOND_NS
    return round(value * _SECOND_NS)


def _fraction(amount: int, scale: int) -> str:
    whole, rest = divmod(amount, scale)
    if not rest:
        return str(whole)
    digits = len(str(scale)) - 1
    return f"{whole}.{str(rest).zfill(digits).rstrip('0')}"


def _format_ns(ns: int) -> str:
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    u = abs(ns)
    if u < _SECOND_NS:
        if u < 1000:
            return f"{sign}{u}ns"
        if u < 1_000_000:
            return f"{sign}{_fraction(u, 1000)}µs"
        return f"{sign}{_fraction(u, 1_000_000)}ms"
    total_seconds, frac = divmod(u, _SECOND_NS)
    seconds = _fraction((total_seconds % 60) * _SECOND_NS + frac, _SECOND_NS)
    minutes = total_seconds // 60
    if minutes == 0:
        return f"{sign}{seconds}s"
    hours, minutes = divmod(minutes, 60)
    text = f"{minutes}m{seconds}s"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def format_duration(seconds: Duration) -> str:
    """Format a duration as e.g. ``1.5ms``, ``5s`` or ``2h3m4.5s``."""
    return _format_ns(_to_nanoseconds(seconds))


_QUOTE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(s: str) -> str:
    out: list[str] = []
    for char in s:
        code = ord(char)
        if char in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[char])
        elif char.isprintable():
            out.append(char)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code <= 0xFFFF:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    return '"' + "".join(out) + '"'


def default_log_formatter(params: LogFormatterParams) -> str:
    """Format one access-log line."""
    status_color = method_color = reset_color = ""
    if params.is_output_color():
        status_color = params.status_code_color()
        method_color = params.method_color()
        reset_color = params.reset_color()

    latency = _to_nanoseconds(params.latency)
    if latency > _MINUTE_NS:
        latency -= latency % _SECOND_NS

    return (
        f"[GIN] {time_format(params.timestamp)} "
        f"|{status_color} {params.status_code:3d} {reset_color}"
        f"| {_format_ns(latency):>13} "
        f"| {params.client_ip:>15} "
        f"|{method_color} {params.method:<7} {reset_color} {_quote(params.path)}\n"
        f"{params.error_message}"
    )


LogFormatter = Callable[[LogFormatterParams], str]


@dataclass
class LoggerConfig:
    """Where and how access-log lines are written, and which are skipped."""

    formatter: LogFormatter | None = None
    output: TextIO | None = None
    skip_paths: Sequence[str] = ()
    skip: Callable[[Any], bool] | None = None
    _skipped_paths: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._skipped_paths = frozenset(self.skip_paths)

    @property
    def stream(self) -> TextIO:
        """The output stream; standard output unless one was given."""
        return self.output if self.output is not None else sys.stdout

    @property
    def is_term(self) -> bool:
        """Whether the output stream is an interactive terminal."""
        isatty = getattr(self.stream, "isatty", None)
        if not callable(isatty) or os.environ.get("TERM") == "dumb":
            return False
        try:
            return bool(isatty())
        except ValueError:
            return False

    def should_skip(self, path: str, context: Any) -> bool:
        """Whether the request for ``path`` is left out of the log."""
        if path in self._skipped_paths:
            return True
        return self.skip is not None and bool(self.skip(context))

    def emit(self, params: LogFormatterParams) -> str:
        """Format ``params``, write the line to the output and return it."""
        formatter = self.formatter or default_log_formatter
        line = formatter(replace(params, is_term=self.is_term))
        self.stream.write(line)
        return line