"""HTML renderers backed by Jinja2 templates."""

from __future__ import annotations

import glob as _glob
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

import jinja2

from .base import HTML_CONTENT_TYPE, Render, write_content_type

TemplateSource = Union[jinja2.Environment, jinja2.Template]


@dataclass(frozen=True)
class Delims:
    """Left and right delimiters of template expressions."""

    left: str = "{{"
    right: str = "}}"


def load_templates(
    files: Sequence[str] = (),
    glob: str = "",
    delims: Delims | None = None,
    func_map: Mapping[str, Callable[..., Any]] | None = None,
) -> jinja2.Environment:
    """Load templates from ``files`` or, if none are given, from ``glob``.

    Each template is named after the base name of its file. Functions in
    ``func_map`` are available both as globals and as filters. Every
    template is compiled up front, so syntax errors surface here.
    """
    if files:
        paths = list(files)
    elif glob:
        paths = sorted(_glob.glob(glob))
        if not paths:
            raise ValueError(f"html/template: pattern matches no files: {glob!r}")
    else:
        raise ValueError("the HTML debug render was created without files or glob pattern")

    sources: dict[str, str] = {}
    for path in paths:
        with open(path, encoding="utf-8") as handle:
            sources[os.path.basename(path)] = handle.read()

    delims = delims or Delims()
    environment = jinja2.Environment(
        loader=jinja2.DictLoader(sources),
        variable_start_string=delims.left,
        variable_end_string=delims.right,
        autoescape=True,
    )
    functions = dict(func_map or {})
    environment.globals.update(functions)
    environment.filters.update(functions)
    for name in sources:
        environment.get_template(name)
    return environment


def _context(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    return {"data": data}


def _execute(template: TemplateSource, name: str, data: Any) -> str:
    context = _context(data)
    if isinstance(template, jinja2.Template):
        if name and name != template.name:
            raise jinja2.TemplateNotFound(name)
        return template.render(context)
    if not name:
        raise ValueError("html/template: no template name given")
    return template.get_template(name).render(context)


@dataclass
class HTML(Render):
    """A named template rendered with ``data``."""

    template: TemplateSource
    name: str
    data: Any = None

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        writer.write(_execute(self.template, self.name, self.data).encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, HTML_CONTENT_TYPE)


@dataclass
class HTMLProduction:
    """Templates loaded once and reused for every response."""

    template: TemplateSource
    delims: Delims = field(default_factory=Delims)

    def instance(self, name: str, data: Any) -> HTML:
        """Return a renderer for template ``name`` with ``data``."""
        return HTML(self.template, name, data)


@dataclass
class HTMLDebug:
    """Templates reloaded from disk on every response."""

    files: Sequence[str] = ()
    glob: str = ""
    delims: Delims = field(default_factory=Delims)
    func_map: Mapping[str, Callable[..., Any]] | None = None

    def instance(self, name: str, data: Any) -> HTML:
        """Reload the templates and return a renderer for ``name``."""
        environment = load_templates(self.files, self.glob, self.delims, self.func_map)
        return HTML(environment, name, data)