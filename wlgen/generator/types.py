"""Type definitions for protocol parsing and code generation."""

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin


class WlgenError(RuntimeError):
    """Base class for all generator errors."""


class ArgKind(StrEnum):
    """Classification of an argument type."""

    PRIMITIVE = auto()
    OBJECT = auto()
    NEW_ID = auto()


@dataclass
class ProtoDescription(DataClassJsonMixin):
    """Represents a description element (summary attribute and body text)."""

    summary: str | None = None
    text: str | None = None


@dataclass
class ProtoArg(DataClassJsonMixin):
    """Represents a request or event argument.

    interface is None when the argument does not name an interface, which
    for object/new_id arguments means "any interface".
    """

    name: str
    type: str
    interface: str | None = None
    enum: str | None = None
    allow_null: bool = False
    summary: str | None = None

    @property
    def kind(self) -> ArgKind:
        if self.type == "object":
            return ArgKind.OBJECT
        if self.type == "new_id":
            return ArgKind.NEW_ID
        return ArgKind.PRIMITIVE


@dataclass
class ProtoRequest(DataClassJsonMixin):
    """Represents a request; its position in the interface is its opcode."""

    name: str
    args: list[ProtoArg]
    type: str | None = None
    since: int = 1
    description: ProtoDescription | None = None


@dataclass
class ProtoEvent(DataClassJsonMixin):
    """Represents an event."""

    name: str
    args: list[ProtoArg]
    since: int = 1
    description: ProtoDescription | None = None


@dataclass
class ProtoEnumEntry(DataClassJsonMixin):
    """Represents a single enum entry. The value is kept as written."""

    name: str
    value: str
    summary: str | None = None
    since: int = 1


@dataclass
class ProtoEnum(DataClassJsonMixin):
    """Represents an enum scoped to an interface."""

    name: str
    entries: list[ProtoEnumEntry]
    bitfield: bool = False
    since: int = 1
    description: ProtoDescription | None = None


@dataclass
class ProtoInterface(DataClassJsonMixin):
    """Represents an interface definition."""

    name: str
    version: int
    requests: list[ProtoRequest] = field(default_factory=list)
    events: list[ProtoEvent] = field(default_factory=list)
    enums: list[ProtoEnum] = field(default_factory=list)
    description: ProtoDescription | None = None


@dataclass
class Protocol(DataClassJsonMixin):
    """Represents a complete protocol definition."""

    name: str
    interfaces: list[ProtoInterface]
    copyright: str | None = None

    def interface(self, name: str) -> ProtoInterface | None:
        """Return the interface with the given native name, if declared."""
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None


PRIMITIVE_TYPES = frozenset(
    [
        "int",
        "uint",
        "string",
        "fd",
        "fixed",
        "array",
    ]
)

INTERFACE_TYPES = frozenset(["object", "new_id"])


def is_primitive(arg: ProtoArg) -> bool:
    """Check if an argument has a primitive type."""
    return arg.type in PRIMITIVE_TYPES
