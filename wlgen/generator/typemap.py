"""Mapping of protocol argument types to Go types."""

from collections.abc import Collection

from .registry import IdentifierRegistry
from .types import ArgKind, ProtoArg, WlgenError, is_primitive


class TypeMappingError(WlgenError):
    """Raised when an argument type has no Go equivalent."""


# Map protocol primitive types to Go types
PRIMITIVE_TYPE_MAP = {
    "int": "int32",
    "uint": "uint32",
    "string": "string",
    "fd": "uintptr",
    "fixed": "float32",
    "array": "[]int32",
}

# Type used where the interface of an object is only known at runtime
PROXY_TYPE = "Proxy"

GO_KEYWORDS = frozenset(
    [
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    ]
)


def go_name(name: str) -> str:
    """Escape a name that would clash with a Go keyword."""
    if name in GO_KEYWORDS:
        return f"{name}_"
    return name


def _map_primitive(arg: ProtoArg) -> str:
    if not is_primitive(arg):
        raise TypeMappingError(f"Unknown type {arg.type} for argument {arg.name}")
    return PRIMITIVE_TYPE_MAP[arg.type]


def _unused_name(name: str, reserved: Collection[str]) -> str:
    while name in reserved:
        name += "_"
    return name


def _pointer_to(interface: str, registry: IdentifierRegistry) -> str:
    return "*" + registry.lookup(interface)


def field_type(arg: ProtoArg, registry: IdentifierRegistry) -> str:
    """Go type of an argument stored in an event struct field."""
    if arg.kind == ArgKind.PRIMITIVE:
        return _map_primitive(arg)
    if arg.interface is None:
        return PROXY_TYPE
    return _pointer_to(arg.interface, registry)


def param_types(
    arg: ProtoArg,
    registry: IdentifierRegistry,
    reserved: Collection[str] = frozenset(),
) -> list[tuple[str, str]]:
    """(name, type) pairs an argument contributes to a request signature.

    A new_id with a known interface contributes nothing (the proxy is created
    by the method), while a new_id without one expands to the interface
    name, its version and a caller supplied proxy. The first two take a
    trailing underscore while their name is in ``reserved``.
    """
    name = go_name(arg.name)

    if arg.kind == ArgKind.NEW_ID:
        if arg.interface is not None:
            return []
        return [
            (_unused_name("iface", reserved), "string"),
            (_unused_name("version", reserved), "uint32"),
            (name, PROXY_TYPE),
        ]

    return [(name, field_type(arg, registry))]


def return_type(arg: ProtoArg, registry: IdentifierRegistry) -> str | None:
    """Go type an argument contributes to a request's return values, if any."""
    if arg.kind == ArgKind.NEW_ID and arg.interface is not None:
        return _pointer_to(arg.interface, registry)
    return None
