"""Go code generator for wayland-style protocols."""

import logging
from dataclasses import dataclass

from jinja2 import Environment, PackageLoader

from .ir import (
    GoChannel,
    GoConst,
    GoConstGroup,
    GoField,
    GoFile,
    GoInterface,
    GoMethod,
    GoNewProxy,
    GoParam,
    GoStruct,
)
from .registry import DEFAULT_PREFIX, GenerationContext, to_camel_case
from .typemap import PROXY_TYPE, field_type, go_name, param_types, return_type
from .types import ProtoDescription, ProtoEnum, ProtoEvent, ProtoInterface, Protocol

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE = "wl"

# Enums are plain unsigned integers; bitfield values are passed through as-is
ENUM_UNDERLYING_TYPE = "uint"

env = Environment(
    loader=PackageLoader("wlgen.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

constants_template = env.get_template("go_constants.go.j2")
request_codes_template = env.get_template("go_request_codes.go.j2")
interfaces_template = env.get_template("go_interfaces.go.j2")


@dataclass(frozen=True)
class GoBlocks:
    """The three rendered output blocks, in the order they are written."""

    constants: str
    request_codes: str
    interfaces: str

    def __str__(self) -> str:
        return self.constants + self.request_codes + self.interfaces


def _summary(name: str, description: ProtoDescription | None) -> str | None:
    if description is None or not description.summary:
        return None
    return f"{name}: {' '.join(description.summary.split())}"


def _copyright_lines(text: str | None) -> tuple[str, ...]:
    if not text:
        return ()
    return tuple(line.strip() for line in text.strip().splitlines())


def request_code_name(iface_name: str, request_name: str) -> str:
    """Name of the constant holding a request's dispatch code.

    The leading underscore keeps the constant unexported.
    """
    return f"_{iface_name}_{request_name}".upper()


def constructor_name(iface_name: str) -> str:
    return "New" + iface_name


def _build_enum(enum: ProtoEnum, iface: ProtoInterface, ctx: GenerationContext) -> GoConstGroup:
    origin = f"enum {iface.name}.{enum.name}"
    type_name = ctx.declare(
        ctx.interfaces.lookup(iface.name) + ctx.members.register(enum.name), origin
    )
    consts = tuple(
        GoConst(
            name=ctx.declare(
                type_name + ctx.members.register(entry.name), f"{origin}.{entry.name}"
            ),
            value=entry.value,
            type=type_name,
            comment=" ".join(entry.summary.split()) if entry.summary else None,
        )
        for entry in enum.entries
    )

    comment = _summary(type_name, enum.description)
    if enum.bitfield:
        comment = f"{comment} (bitfield)" if comment else f"{type_name}: bitfield"

    return GoConstGroup(
        type_name=type_name,
        underlying=ENUM_UNDERLYING_TYPE,
        consts=consts,
        comment=comment,
    )


def _build_event(event: ProtoEvent, iface: ProtoInterface, ctx: GenerationContext) -> GoStruct:
    struct_name = ctx.declare(
        ctx.interfaces.lookup(iface.name) + ctx.members.register(event.name) + "Event",
        f"event {iface.name}.{event.name}",
    )
    fields = tuple(
        GoField(name=to_camel_case(arg.name, ctx.prefix), type=field_type(arg, ctx.interfaces))
        for arg in event.args
    )
    return GoStruct(
        name=struct_name,
        fields=fields,
        comment=_summary(struct_name, event.description),
    )


def _build_interface(
    iface: ProtoInterface, ctx: GenerationContext
) -> tuple[list[GoConstGroup], list[GoConst], GoInterface]:
    iface_name = ctx.interfaces.lookup(iface.name)

    events: list[GoStruct] = []
    channels: list[GoChannel] = []
    for event in iface.events:
        struct = _build_event(event, iface, ctx)
        events.append(struct)
        channels.append(
            GoChannel(name=ctx.members.lookup(event.name) + "Chan", event_type=struct.name)
        )

    # Request order is the wire opcode
    codes: list[GoConst] = []
    methods: list[GoMethod] = []
    for opcode, request in enumerate(iface.requests):
        method_name = ctx.members.register(request.name)
        code = ctx.declare(
            request_code_name(iface_name, method_name), f"request {iface.name}.{request.name}"
        )
        codes.append(GoConst(name=code, value=str(opcode)))

        params: list[GoParam] = []
        results: list[str] = []
        new_proxies: list[GoNewProxy] = []
        call_args: list[str] = []
        taken = {go_name(arg.name) for arg in request.args}
        for arg in request.args:
            for name, type_ in param_types(arg, ctx.interfaces, reserved=taken):
                taken.add(name)
                params.append(GoParam(name=name, type=type_))
                call_args.append(name)

            ret = return_type(arg, ctx.interfaces)
            if ret is not None:
                proxy = GoNewProxy(var=go_name(arg.name), interface=ret.lstrip("*"))
                new_proxies.append(proxy)
                results.append(ret)
                call_args.append(f"{PROXY_TYPE}({proxy.var})")
        results.append("error")

        methods.append(
            GoMethod(
                name=method_name,
                code=code,
                params=tuple(params),
                results=tuple(results),
                new_proxies=tuple(new_proxies),
                call_args=tuple(call_args),
                comment=_summary(method_name, request.description),
            )
        )

    enums = [_build_enum(enum, iface, ctx) for enum in iface.enums]

    go_iface = GoInterface(
        name=iface_name,
        events=tuple(events),
        channels=tuple(channels),
        methods=tuple(methods),
        comment=_summary(iface_name, iface.description),
    )
    return enums, codes, go_iface


def build(
    proto: Protocol,
    *,
    package: str = DEFAULT_PACKAGE,
    prefix: str = DEFAULT_PREFIX,
) -> GoFile:
    """Lower a protocol definition to the Go intermediate representation."""
    ctx = GenerationContext(prefix)

    # Arguments may reference interfaces declared further down, so every
    # interface is registered before anything else is built.
    for iface in proto.interfaces:
        iface_name = ctx.interfaces.register(iface.name)
        origin = f"interface {iface.name}"
        ctx.declare(iface_name, origin)
        ctx.declare(constructor_name(iface_name), origin)
    logger.debug("Registered %d interface(s)", len(ctx.interfaces))

    enums: list[GoConstGroup] = []
    codes: list[GoConst] = []
    interfaces: list[GoInterface] = []
    for iface in proto.interfaces:
        iface_enums, iface_codes, go_iface = _build_interface(iface, ctx)
        enums.extend(iface_enums)
        codes.extend(iface_codes)
        interfaces.append(go_iface)

    return GoFile(
        package=package,
        source=proto.name,
        copyright=_copyright_lines(proto.copyright),
        enums=tuple(enums),
        request_codes=tuple(codes),
        interfaces=tuple(interfaces),
    )


def _format_params(method: GoMethod) -> str:
    return ", ".join(f"{param.name} {param.type}" for param in method.params)


def _format_results(method: GoMethod) -> str:
    if len(method.results) == 1:
        return method.results[0]
    return f"({', '.join(method.results)})"


def _format_return(method: GoMethod) -> str:
    values = [proxy.var for proxy in method.new_proxies]
    args = ", ".join(["p", method.code, *method.call_args])
    values.append(f"p.Connection().SendRequest({args})")
    return ", ".join(values)


def render_blocks(go_file: GoFile) -> GoBlocks:
    """Render each output block of a lowered Go file."""
    blocks = GoBlocks(
        constants=constants_template.render(file=go_file),
        request_codes=request_codes_template.render(file=go_file),
        interfaces=interfaces_template.render(
            file=go_file,
            format_params=_format_params,
            format_results=_format_results,
            format_return=_format_return,
        ),
    )
    logger.debug("Rendered %d interface(s) for package %s", len(go_file.interfaces), go_file.package)
    return blocks


def render(
    proto: Protocol,
    *,
    package: str = DEFAULT_PACKAGE,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """Render a protocol definition to Go source code."""
    return str(render_blocks(build(proto, package=package, prefix=prefix)))
