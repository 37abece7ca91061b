"""JSON renderers: plain, indented, secure, JSONP, ASCII-only and unescaped."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .base import Render, write_content_type

JSON_CONTENT_TYPE = ["application/json; charset=utf-8"]
JSONP_CONTENT_TYPE = ["application/javascript; charset=utf-8"]
JSON_ASCII_CONTENT_TYPE = ["application/json"]

_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}
_LINE_ESCAPES = {"\u2028": "\\u2028", "\u2029": "\\u2029"}

_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "=": "\\u003D",
}


def _dumps(obj: Any, indent: str | None, escape_html: bool) -> str:
    separators = (",", ": ") if indent is not None else (",", ":")
    text = json.dumps(
        obj,
        ensure_ascii=False,
        allow_nan=False,
        sort_keys=True,
        indent=indent,
        separators=separators,
    )
    escapes = dict(_LINE_ESCAPES)
    if escape_html:
        escapes.update(_HTML_ESCAPES)
    for char, replacement in escapes.items():
        text = text.replace(char, replacement)
    return text


def marshal(obj: Any, indent: str | None = None) -> bytes:
    """Encode ``obj`` as JSON with sorted keys and HTML-safe escaping.

    With ``indent`` each nesting level is indented by that string.
    Raises TypeError or ValueError for values JSON cannot represent.
    """
    return _dumps(obj, indent, escape_html=True).encode("utf-8")


def js_escape_string(s: str) -> str:
    """Escape ``s`` for safe embedding in JavaScript source."""
    out: list[str] = []
    for char in s:
        if char in _JS_ESCAPES:
            out.append(_JS_ESCAPES[char])
        elif char < " ":
            out.append(f"\\u{ord(char):04X}")
        elif ord(char) >= 0x80 and not char.isprintable():
            out.append(f"\\u{ord(char):04X}")
        else:
            out.append(char)
    return "".join(out)


def write_json(writer: Any, obj: Any) -> None:
    """Set the JSON content type and write ``obj`` encoded."""
    write_content_type(writer, JSON_CONTENT_TYPE)
    writer.write(marshal(obj))


@dataclass
class JSON(Render):
    """Compact JSON."""

    data: Any

    def render(self, writer: Any) -> None:
        write_json(writer, self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)


@dataclass
class IndentedJSON(Render):
    """JSON indented by four spaces per level."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        writer.write(marshal(self.data, indent="    "))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)


@dataclass
class SecureJSON(Render):
    """JSON whose top-level arrays are preceded by a guard prefix."""

    prefix: str
    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        encoded = marshal(self.data)
        if encoded.startswith(b"[") and encoded.endswith(b"]"):
            writer.write(self.prefix.encode("utf-8"))
        writer.write(encoded)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)


@dataclass
class JsonpJSON(Render):
    """JSON wrapped in a call to ``callback``; plain JSON if no callback."""

    callback: str
    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        encoded = marshal(self.data)
        if not self.callback:
            writer.write(encoded)
            return
        writer.write(js_escape_string(self.callback).encode("utf-8"))
        writer.write(b"(")
        writer.write(encoded)
        writer.write(b");")

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSONP_CONTENT_TYPE)


@dataclass
class AsciiJSON(Render):
    """JSON with every non-ASCII character written as a \\u escape."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        text = marshal(self.data).decode("utf-8")
        ascii_text = "".join(
            f"\\u{ord(char):04x}" if ord(char) >= 128 else char for char in text
        )
        writer.write(ascii_text.encode("ascii"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_ASCII_CONTENT_TYPE)


@dataclass
class PureJSON(Render):
    """JSON without HTML escaping, terminated by a newline."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        writer.write((_dumps(self.data, None, escape_html=False) + "\n").encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, JSON_CONTENT_TYPE)