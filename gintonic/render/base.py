"""Renderer interface and the plain renderers: raw data, strings, streams, redirects."""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, BinaryIO, Mapping
from urllib.parse import urlsplit

from ..response_writer import Header

PLAIN_CONTENT_TYPE = ["text/plain; charset=utf-8"]
HTML_CONTENT_TYPE = "text/html; charset=utf-8"

_COPY_CHUNK = 32 * 1024


class Render(ABC):
    """Something that can write itself, with its content type, to a response."""

    @abstractmethod
    def render(self, writer: Any) -> None:
        """Write the content type and body to ``writer``."""

    @abstractmethod
    def write_content_type(self, writer: Any) -> None:
        """Write the content type header to ``writer``."""


def write_content_type(writer: Any, value: Sequence[str] | str) -> None:
    """Set Content-Type on ``writer`` unless one is already present."""
    values = [value] if isinstance(value, str) else list(value)
    header = writer.header
    if "Content-Type" not in header:
        header.set_all("Content-Type", values)


@dataclass
class Data(Render):
    """Raw bytes with a custom content type."""

    content_type: str
    data: bytes = b""

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        writer.write(self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, [self.content_type])


def write_string(writer: Any, format: str, data: Sequence[Any] = ()) -> None:
    """Write plain text; ``format`` is interpolated only when ``data`` is given."""
    write_content_type(writer, PLAIN_CONTENT_TYPE)
    if data:
        writer.write((format % tuple(data)).encode("utf-8"))
    else:
        writer.write(format.encode("utf-8"))


@dataclass
class String(Render):
    """Plain text built from a printf-style format and its arguments."""

    format: str
    data: Sequence[Any] = ()

    def render(self, writer: Any) -> None:
        write_string(writer, self.format, self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, PLAIN_CONTENT_TYPE)


@dataclass
class Reader(Render):
    """A stream copied to the response, with optional length and extra headers."""

    content_type: str
    content_length: int
    reader: BinaryIO
    headers: Mapping[str, str] | None = None

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        headers = dict(self.headers or {})
        if self.content_length >= 0:
            headers["Content-Length"] = str(self.content_length)
        header = writer.header
        for key, value in headers.items():
            if header.get(key) == "":
                header.set(key, value)
        while chunk := self.reader.read(_COPY_CHUNK):
            writer.write(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, [self.content_type])


@dataclass
class Request:
    """The parts of an incoming request that a redirect needs."""

    method: str = "GET"
    path: str = "/"
    header: Header = field(default_factory=Header)


def _clean(p: str) -> str:
    cleaned = posixpath.normpath(p)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _hex_escape_non_ascii(s: str) -> str:
    return "".join(
        f"%{byte:x}" if byte >= 0x80 else chr(byte) for byte in s.encode("utf-8")
    )


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&#34;")
        .replace("'", "&#39;")
    )


def _status_text(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def _resolve_location(request: Request, location: str) -> str:
    try:
        parts = urlsplit(location)
    except ValueError:
        return location
    if parts.scheme or parts.netloc:
        return location
    old_path = request.path or "/"
    if not location.startswith("/"):
        location = old_path[: old_path.rfind("/") + 1] + location
    location, sep, query = location.partition("?")
    trailing = location.endswith("/")
    location = _clean(location)
    if trailing and not location.endswith("/"):
        location += "/"
    return location + sep + query


def _http_redirect(writer: Any, request: Request, location: str, code: int) -> None:
    location = _resolve_location(request, location)
    header = writer.header
    had_content_type = "Content-Type" in header
    header.set("Location", _hex_escape_non_ascii(location))
    if not had_content_type and request.method in ("GET", "HEAD"):
        header.set("Content-Type", HTML_CONTENT_TYPE)
    writer.write_header(code)
    if not had_content_type and request.method == "GET":
        body = f'<a href="{_html_escape(location)}">{_status_text(code)}</a>.\n\n'
        writer.write(body.encode("utf-8"))


@dataclass
class Redirect(Render):
    """A redirect of ``request`` to ``location`` with status ``code``."""

    code: int
    request: Request
    location: str

    def render(self, writer: Any) -> None:
        if (self.code < 300 or self.code > 308) and self.code != 201:
            raise ValueError(f"Cannot redirect with status code {self.code}")
        _http_redirect(writer, self.request, self.location, self.code)

    def write_content_type(self, writer: Any) -> None:
        """Redirects carry no content type of their own."""