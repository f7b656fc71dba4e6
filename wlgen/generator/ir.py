"""Intermediate representation of the generated Go source.

The emitter first lowers a parsed protocol into these trees, with every name
and type already resolved, and only then renders them to text. Nothing in
here knows about templates.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GoConst:
    """A single constant: ``name [type] = value``."""

    name: str
    value: str
    type: str | None = None
    comment: str | None = None


@dataclass(frozen=True)
class GoConstGroup:
    """A named integer type together with its ``const ( ... )`` block.

    Attributes
    ----------
        type_name: Name of the declared type.
        underlying: Go type the named type is based on.
        consts: Constants in document order.
        comment: Optional doc comment for the type.

    """

    type_name: str
    underlying: str
    consts: tuple[GoConst, ...]
    comment: str | None = None


@dataclass(frozen=True)
class GoField:
    name: str
    type: str


@dataclass(frozen=True)
class GoStruct:
    """An event payload struct."""

    name: str
    fields: tuple[GoField, ...]
    comment: str | None = None


@dataclass(frozen=True)
class GoChannel:
    """An event delivery channel on an interface type."""

    name: str
    event_type: str


@dataclass(frozen=True)
class GoParam:
    name: str
    type: str


@dataclass(frozen=True)
class GoNewProxy:
    """A proxy a request method creates before dispatching.

    Attributes
    ----------
        var: Local variable holding the new proxy.
        interface: Generated interface type to construct.

    """

    var: str
    interface: str


@dataclass(frozen=True)
class GoMethod:
    """A request method.

    Attributes
    ----------
        name: Method name.
        code: Name of the request code constant passed to the dispatcher.
        params: Input parameters in signature order.
        results: Result types; always ends with ``error``.
        new_proxies: Proxies constructed in the body, in argument order.
        call_args: Expressions passed to the dispatcher after the code.
        comment: Optional doc comment.

    """

    name: str
    code: str
    params: tuple[GoParam, ...]
    results: tuple[str, ...]
    new_proxies: tuple[GoNewProxy, ...]
    call_args: tuple[str, ...]
    comment: str | None = None


@dataclass(frozen=True)
class GoInterface:
    """Everything generated for one protocol interface."""

    name: str
    events: tuple[GoStruct, ...]
    channels: tuple[GoChannel, ...]
    methods: tuple[GoMethod, ...]
    comment: str | None = None


@dataclass(frozen=True)
class GoFile:
    """A complete generated Go file."""

    package: str
    source: str
    copyright: tuple[str, ...]
    enums: tuple[GoConstGroup, ...]
    request_codes: tuple[GoConst, ...]
    interfaces: tuple[GoInterface, ...]
