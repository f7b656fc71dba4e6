"""Protocol description parser using ElementTree."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable
from typing import Any

from .types import (
    INTERFACE_TYPES,
    ProtoArg,
    ProtoDescription,
    ProtoEnum,
    ProtoEnumEntry,
    ProtoEvent,
    ProtoInterface,
    Protocol,
    ProtoRequest,
    WlgenError,
)

logger = logging.getLogger(__name__)


class ParseError(WlgenError):
    """Raised when the protocol description is malformed."""


class ValidationError(WlgenError):
    """Raised when protocol validation fails."""


def _required(elem: ET.Element, attr: str) -> str:
    value = elem.get(attr)
    if value is None:
        raise ParseError(f"<{elem.tag}> is missing required attribute '{attr}'")
    return value


def _int(elem: ET.Element, attr: str, default: int) -> int:
    value = elem.get(attr)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ParseError(f"<{elem.tag}> attribute '{attr}' is not an integer: {value!r}") from None


def _bool(elem: ET.Element, attr: str) -> bool:
    value = elem.get(attr)
    if value is None or value == "false":
        return False
    if value == "true":
        return True
    raise ParseError(f"<{elem.tag}> attribute '{attr}' is not a boolean: {value!r}")


class TreeTransformer:
    """Transform an element tree into protocol types.

    Each method is named after the element tag it handles, and children are
    visited in document order.
    """

    def transform(self, elem: ET.Element) -> Any:
        handler: Callable[[ET.Element], Any] | None = getattr(self, elem.tag, None)
        if handler is None:
            raise ParseError(f"Unexpected element <{elem.tag}>")
        return handler(elem)

    def _children(self, elem: ET.Element, tag: str) -> list[Any]:
        return [self.transform(child) for child in elem.findall(tag)]

    def _description(self, elem: ET.Element) -> ProtoDescription | None:
        desc = elem.find("description")
        if desc is None:
            return None
        return self.description(desc)

    def description(self, elem: ET.Element) -> ProtoDescription:
        text = (elem.text or "").strip()
        return ProtoDescription(summary=elem.get("summary"), text=text or None)

    def protocol(self, elem: ET.Element) -> Protocol:
        copyright_elem = elem.find("copyright")
        copyright_text = None
        if copyright_elem is not None and copyright_elem.text:
            copyright_text = copyright_elem.text.strip() or None

        return Protocol(
            name=_required(elem, "name"),
            interfaces=self._children(elem, "interface"),
            copyright=copyright_text,
        )

    def interface(self, elem: ET.Element) -> ProtoInterface:
        return ProtoInterface(
            name=_required(elem, "name"),
            version=_int(elem, "version", 1),
            requests=self._children(elem, "request"),
            events=self._children(elem, "event"),
            enums=self._children(elem, "enum"),
            description=self._description(elem),
        )

    def request(self, elem: ET.Element) -> ProtoRequest:
        return ProtoRequest(
            name=_required(elem, "name"),
            args=self._children(elem, "arg"),
            type=elem.get("type"),
            since=_int(elem, "since", 1),
            description=self._description(elem),
        )

    def event(self, elem: ET.Element) -> ProtoEvent:
        return ProtoEvent(
            name=_required(elem, "name"),
            args=self._children(elem, "arg"),
            since=_int(elem, "since", 1),
            description=self._description(elem),
        )

    def arg(self, elem: ET.Element) -> ProtoArg:
        return ProtoArg(
            name=_required(elem, "name"),
            type=_required(elem, "type"),
            interface=elem.get("interface") or None,
            enum=elem.get("enum") or None,
            allow_null=_bool(elem, "allow-null"),
            summary=elem.get("summary"),
        )

    def enum(self, elem: ET.Element) -> ProtoEnum:
        return ProtoEnum(
            name=_required(elem, "name"),
            entries=self._children(elem, "entry"),
            bitfield=_bool(elem, "bitfield"),
            since=_int(elem, "since", 1),
            description=self._description(elem),
        )

    def entry(self, elem: ET.Element) -> ProtoEnumEntry:
        return ProtoEnumEntry(
            name=_required(elem, "name"),
            value=_required(elem, "value"),
            summary=elem.get("summary"),
            since=_int(elem, "since", 1),
        )


def validate(protocol: Protocol) -> None:
    """Validate cross references in a parsed protocol definition."""
    interface_names: set[str] = set()
    for iface in protocol.interfaces:
        if iface.name in interface_names:
            raise ValidationError(f"Interface {iface.name} declared more than once")
        interface_names.add(iface.name)

    # Interface-typed arguments may reference interfaces declared later on
    for iface in protocol.interfaces:
        for kind, messages in (("request", iface.requests), ("event", iface.events)):
            for message in messages:
                for arg in message.args:
                    if arg.type not in INTERFACE_TYPES or arg.interface is None:
                        continue
                    if arg.interface not in interface_names:
                        raise ValidationError(
                            f"{iface.name}.{message.name} ({kind}) argument {arg.name} "
                            f"references undeclared interface {arg.interface}"
                        )


def parse(text: str | bytes) -> Protocol:
    """Parse a protocol description document.

    Pass bytes to let the XML declaration choose the encoding.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ParseError(f"Malformed protocol description: {e}") from e

    if root.tag != "protocol":
        raise ParseError(f"Expected <protocol> root element, found <{root.tag}>")

    protocol = TreeTransformer().transform(root)
    logger.debug(
        "Parsed protocol %s with %d interface(s)", protocol.name, len(protocol.interfaces)
    )

    validate(protocol)

    return protocol


def parse_file(path: str) -> Protocol:
    """Read and parse a protocol description file."""
    with open(path, "rb") as f:
        data = f.read()

    return parse(data)
