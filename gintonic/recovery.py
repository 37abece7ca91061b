"""Helpers for reporting recovered errors: stack dumps and request summaries."""

from __future__ import annotations

import itertools
import linecache
import traceback
from datetime import datetime

DUNNO = "???"
RESET = "\033[0m"


def source(lines: list[str], n: int) -> str:
    """Return the whitespace-trimmed 1-based line ``n`` of ``lines``, or ``???``."""
    n -= 1
    if n < 0 or n >= len(lines):
        return DUNNO
    return lines[n].strip()


def function_name(qualified_name: str) -> str:
    """Strip the package path and package name from a qualified function name."""
    name = qualified_name
    last_slash = name.rfind("/")
    if last_slash >= 0:
        name = name[last_slash + 1:]
    period = name.find(".")
    if period >= 0:
        name = name[period + 1:]
    return name.replace("·", ".")


def stack(skip: int = 0) -> str:
    """Return a formatted dump of the current call stack, innermost frame first.

    ``skip`` frames are left out, counting this function itself as frame 0.
    """
    frames = reversed(traceback.extract_stack())
    parts: list[str] = []
    lines: list[str] = []
    last_file: str | None = None
    for frame in itertools.islice(frames, skip, None):
        lineno = frame.lineno or 0
        parts.append(f"{frame.filename}:{lineno}\n")
        if frame.filename != last_file:
            file_lines = linecache.getlines(frame.filename)
            if not file_lines:
                continue
            lines = file_lines
            last_file = frame.filename
        parts.append(f"\t{function_name(frame.name)}: {source(lines, lineno)}\n")
    return "".join(parts)


def time_format(t: datetime) -> str:
    """Format a timestamp the way log lines show it."""
    return t.strftime("%Y/%m/%d - %H:%M:%S")


def mask_authorization(request_dump: str) -> str:
    """Replace the value of any Authorization header line in a request dump."""
    headers = request_dump.split("\r\n")
    masked = [
        "Authorization: *" if line.split(":")[0] == "Authorization" else line
        for line in headers
    ]
    return "\r\n".join(masked)


def _is_broken_pipe(error: object) -> bool:
    return isinstance(error, (BrokenPipeError, ConnectionResetError))


def format_panic_report(
    error: object,
    request_dump: str,
    stack_text: str,
    when: datetime,
    debug: bool,
) -> str:
    """Build the log text for a recovered error.

    A dead client connection gets a short report without a stack; otherwise
    the request headers appear only in debug mode.
    """
    headers = mask_authorization(request_dump)
    if _is_broken_pipe(error):
        return f"{error}\n{headers}{RESET}"
    if debug:
        return (
            f"[Recovery] {time_format(when)} panic recovered:\n"
            f"{headers}\n{error}\n{stack_text}{RESET}"
        )
    return (
        f"[Recovery] {time_format(when)} panic recovered:\n"
        f"{error}\n{stack_text}{RESET}"
    )