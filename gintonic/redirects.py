"""Route bookkeeping and the helpers behind redirects and error responses."""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .response_writer import ResponseWriter

DEFAULT_404_BODY = b"404 page not found"
DEFAULT_405_BODY = b"405 method not allowed"

MIME_PLAIN = "text/plain"

STATUS_MOVED_PERMANENTLY = 301
STATUS_TEMPORARY_REDIRECT = 307

_UNSAFE_PREFIX_CHARS = re.compile(r"[^a-zA-Z0-9/-]+")
_REPEATED_SLASHES = re.compile(r"/{2,}")

_log = logging.getLogger(__name__)

HandlerFunc = Callable[[Any], Any]


class HandlersChain(list):
    """An ordered list of handlers; the last one is the main handler."""

    def last(self) -> HandlerFunc | None:
        """Return the last handler, or None if the chain is empty."""
        return self[-1] if self else None


@dataclass
class RouteInfo:
    """A registered route: its method, path and main handler."""

    method: str
    path: str
    handler: str
    handler_func: HandlerFunc | None = None


def _clean(p: str) -> str:
    if not p:
        return "."
    cleaned = posixpath.normpath(p)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def safe_forwarded_prefix(prefix: str) -> str | None:
    """Sanitise an X-Forwarded-Prefix value.

    The value is cleaned like a path; if nothing is left, None is returned.
    Otherwise every character outside letters, digits, ``/`` and ``-`` is
    removed and runs of slashes collapse into one.
    """
    cleaned = _clean(prefix or "")
    if cleaned == ".":
        return None
    cleaned = _UNSAFE_PREFIX_CHARS.sub("", cleaned)
    return _REPEATED_SLASHES.sub("/", cleaned)


def trailing_slash_target(path: str, forwarded_prefix: str = "") -> str:
    """Return the path a trailing-slash redirect points to.

    A trailing slash is removed if present and added otherwise; a sanitised
    forwarded prefix is put in front, joined with a slash.
    """
    p = path
    prefix = safe_forwarded_prefix(forwarded_prefix)
    if prefix is not None:
        p = prefix + "/" + path
    if len(p) > 1 and p.endswith("/"):
        return p[:-1]
    return p + "/"


def redirect_status(method: str) -> int:
    """301 for GET requests, 307 for every other method."""
    if method == "GET":
        return STATUS_MOVED_PERMANENTLY
    return STATUS_TEMPORARY_REDIRECT


def serve_error(writer: ResponseWriter, code: int, default_message: bytes) -> None:
    """Finish an error response after the error handlers have run.

    The caller sets ``writer.status`` to ``code`` before running the
    handlers. If they wrote nothing and left the status alone, a plain-text
    ``default_message`` is sent; if they changed the status, only the
    header is sent; if they wrote a response, nothing more happens.
    """
    if writer.written:
        return
    if writer.status == code:
        writer.header.set_all("Content-Type", [MIME_PLAIN])
        try:
            writer.write(default_message)
        except OSError as error:
            _log.warning("cannot write message to writer during serve error: %s", error)
        return
    writer.write_header_now()