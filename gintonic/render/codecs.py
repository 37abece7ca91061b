"""Renderers for MessagePack, Protocol Buffers, TOML, XML and YAML."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import msgpack
import tomli_w
import yaml

from .base import Render, write_content_type

MSGPACK_CONTENT_TYPE = ["application/msgpack; charset=utf-8"]
PROTOBUF_CONTENT_TYPE = ["application/x-protobuf"]
TOML_CONTENT_TYPE = ["application/toml; charset=utf-8"]
XML_CONTENT_TYPE = ["application/xml; charset=utf-8"]
YAML_CONTENT_TYPE = ["application/yaml; charset=utf-8"]


def write_msgpack(writer: Any, obj: Any) -> None:
    """Set the MessagePack content type and write ``obj`` encoded."""
    write_content_type(writer, MSGPACK_CONTENT_TYPE)
    writer.write(msgpack.packb(obj))


@dataclass
class MsgPack(Render):
    """MessagePack-encoded data."""

    data: Any

    def render(self, writer: Any) -> None:
        write_msgpack(writer, self.data)

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, MSGPACK_CONTENT_TYPE)


@dataclass
class ProtoBuf(Render):
    """A protocol buffer message in its wire format."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        serialize = getattr(self.data, "SerializeToString", None)
        if not callable(serialize):
            raise TypeError("protobuf: data is not a protocol buffer message")
        writer.write(serialize())

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, PROTOBUF_CONTENT_TYPE)


@dataclass
class TOML(Render):
    """A mapping encoded as a TOML document."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        if not isinstance(self.data, Mapping):
            raise TypeError(f"toml: cannot encode a top-level {type(self.data).__name__}")
        writer.write(tomli_w.dumps(self.data).encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, TOML_CONTENT_TYPE)


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _append(parent, tag, item)
        return
    element = ET.SubElement(parent, tag)
    if isinstance(value, Mapping):
        for key, item in value.items():
            _append(element, str(key), item)
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif isinstance(value, (str, int, float)):
        element.text = str(value)
    elif isinstance(value, (bytes, bytearray)):
        element.text = bytes(value).decode("utf-8")
    else:
        raise TypeError(f"xml: unsupported type: {type(value).__name__}")


def _to_element(data: Any) -> ET.Element:
    if ET.iselement(data):
        return data
    if isinstance(data, Mapping):
        root = ET.Element("map")
        for key, value in data.items():
            _append(root, str(key), value)
        return root
    raise TypeError(f"xml: unsupported type: {type(data).__name__}")


@dataclass
class XML(Render):
    """An element tree, or a mapping written as a ``<map>`` element."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        text = ET.tostring(_to_element(self.data), encoding="unicode", short_empty_elements=False)
        writer.write(text.encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, XML_CONTENT_TYPE)


@dataclass
class YAML(Render):
    """Data encoded as a YAML document."""

    data: Any

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        text = yaml.safe_dump(
            self.data, allow_unicode=True, sort_keys=True, default_flow_style=False
        )
        writer.write(text.encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, YAML_CONTENT_TYPE)