"""Canonical cleaning of URL paths."""

from __future__ import annotations


def clean_path(p: str) -> str:
    """Return the canonical form of URL path ``p``.

    Repeated slashes collapse to one, ``.`` elements are dropped, ``..``
    removes the element before it and never climbs above the root. The
    result is always rooted; a trailing slash (or a final ``.`` element)
    is kept unless the result is the root itself.
    """
    if not p:
        return "/"

    segments = p.split("/")
    trailing = (len(p) > 1 and p.endswith("/")) or segments[-1] == "."

    parts: list[str] = []
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)

    if not parts:
        return "/"
    result = "/" + "/".join(parts)
    return result + "/" if trailing else result