"""Response writer that tracks status and body size over an underlying writer."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .mode import is_debugging

NO_WRITTEN = -1
DEFAULT_STATUS = 200

_log = logging.getLogger(__name__)


def _canonical_key(key: str) -> str:
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


class Header:
    """Case-insensitive multi-valued HTTP header collection."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, list[str]] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    def get(self, key: str, default: str = "") -> str:
        """Return the first value for ``key`` or ``default``."""
        values = self._values.get(_canonical_key(key))
        return values[0] if values else default

    def get_all(self, key: str) -> list[str]:
        """Return every value stored for ``key``."""
        return list(self._values.get(_canonical_key(key), []))

    def set(self, key: str, value: str) -> None:
        """Replace the values of ``key`` with a single value."""
        self._values[_canonical_key(key)] = [value]

    def add(self, key: str, value: str) -> None:
        """Append a value to ``key``."""
        self._values.setdefault(_canonical_key(key), []).append(value)

    def set_all(self, key: str, values: Iterable[str]) -> None:
        """Replace the values of ``key`` with ``values``."""
        self._values[_canonical_key(key)] = list(values)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(self._values.get(_canonical_key(key)))

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __delitem__(self, key: str) -> None:
        self._values.pop(_canonical_key(key), None)

    def __repr__(self) -> str:
        return f"Header({self._values!r})"


class ResponseRecorder:
    """In-memory response target that records status, headers and body."""

    def __init__(self) -> None:
        self.code = DEFAULT_STATUS
        self.header = Header()
        self.body = bytearray()
        self.wrote_header = False
        self.flushed = False

    def write_header(self, code: int) -> None:
        """Record the status code; only the first call takes effect."""
        if not 100 <= code <= 999:
            raise ValueError(f"invalid WriteHeader code {code}")
        if self.wrote_header:
            return
        self.code = code
        self.wrote_header = True

    def write(self, data: bytes) -> int:
        """Append ``data`` to the body and return its length."""
        if not self.wrote_header:
            self.write_header(DEFAULT_STATUS)
        self.body.extend(data)
        return len(data)

    def flush(self) -> None:
        """Mark the response flushed, committing the header first."""
        if not self.wrote_header:
            self.write_header(DEFAULT_STATUS)
        self.flushed = True

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")


class ResponseWriter:
    """Wraps a response target, deferring the status until the first write."""

    def __init__(self, writer: Any = None) -> None:
        self.writer: Any = None
        self.size = NO_WRITTEN
        self.status = DEFAULT_STATUS
        self.reset(writer)

    def reset(self, writer: Any) -> None:
        """Attach a new underlying writer and clear the state."""
        self.writer = writer
        self.size = NO_WRITTEN
        self.status = DEFAULT_STATUS

    def unwrap(self) -> Any:
        """Return the underlying writer."""
        return self.writer

    @property
    def header(self) -> Header:
        return self.writer.header

    @property
    def written(self) -> bool:
        """True once the header has been sent."""
        return self.size != NO_WRITTEN

    def write_header(self, code: int) -> None:
        """Set the pending status code unless the header is already sent."""
        if code > 0 and self.status != code:
            if self.written:
                if is_debugging():
                    _log.warning(
                        "[WARNING] Headers were already written. "
                        "Wanted to override status code %d with %d",
                        self.status,
                        code,
                    )
                return
            self.status = code

    def write_header_now(self) -> None:
        """Send the status code to the underlying writer if not sent yet."""
        if not self.written:
            self.size = 0
            self.writer.write_header(self.status)

    def write(self, data: bytes) -> int:
        """Write body bytes and return how many were written."""
        self.write_header_now()
        n = self.writer.write(data)
        self.size += n
        return n

    def write_string(self, s: str) -> int:
        """Write a string as UTF-8 and return the number of bytes written."""
        return self.write(s.encode("utf-8"))

    def flush(self) -> None:
        """Send the header and flush the underlying writer."""
        self.write_header_now()
        flush = getattr(self.writer, "flush", None)
        if flush is None:
            raise TypeError("underlying writer does not support flushing")
        flush()

    def hijack(self) -> Any:
        """Take over the connection from the underlying writer."""
        if self.size < 0:
            self.size = 0
        hijack = getattr(self.writer, "hijack", None)
        if hijack is None:
            raise TypeError("underlying writer does not support hijacking")
        return hijack()

    def close_notify(self) -> Any:
        """Return the close notification of the underlying writer."""
        close_notify = getattr(self.writer, "close_notify", None)
        if close_notify is None:
            raise TypeError("underlying writer does not support close notification")
        return close_notify()

    def pusher(self) -> Any:
        """Return the underlying writer if it supports server push, else None."""
        if callable(getattr(self.writer, "push", None)):
            return self.writer
        return None