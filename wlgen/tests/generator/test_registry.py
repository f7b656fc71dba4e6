"""Tests for identifier naming and registration."""

import os

import pytest

from wlgen.generator import parse_file
from wlgen.generator.registry import (
    GenerationContext,
    IdentifierRegistry,
    RegistryError,
    to_camel_case,
)

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def describe_to_camel_case():
    def strips_prefix_and_joins_words(expect):
        expect(to_camel_case("wl_data_device_manager")) == "DataDeviceManager"
        expect(to_camel_case("foo_bar")) == "FooBar"
        expect(to_camel_case("sync")) == "Sync"

    def only_strips_leading_prefix(expect):
        expect(to_camel_case("xdg_wl_surface")) == "XdgWlSurface"

    def keeps_digits(expect):
        expect(to_camel_case("90")) == "90"
        expect(to_camel_case("flipped_90")) == "Flipped90"

    def leaves_rest_of_word_untouched(expect):
        expect(to_camel_case("get_xRGB")) == "GetXRGB"

    def is_idempotent(expect):
        for name in ["wl_display", "get_registry", "flipped_90", "a_b_c", "FooBar"]:
            once = to_camel_case(name)
            expect(to_camel_case(once)) == once

    def supports_other_prefixes(expect):
        expect(to_camel_case("zxdg_toplevel", prefix="zxdg_")) == "Toplevel"
        expect(to_camel_case("wl_surface", prefix="")) == "WlSurface"


def describe_identifier_registry():
    def registers_and_looks_up(expect):
        registry = IdentifierRegistry()

        expect(registry.register("wl_surface")) == "Surface"
        expect(registry.lookup("wl_surface")) == "Surface"
        expect("wl_surface" in registry) == True
        expect(len(registry)) == 1

    def re_registration_is_idempotent(expect):
        registry = IdentifierRegistry()
        first = registry.register("wl_output")
        second = registry.register("wl_output")

        expect(first) == second
        expect(len(registry)) == 1

    def rejects_colliding_native_names(expect):
        registry = IdentifierRegistry()
        registry.register("wl_foo")

        with pytest.raises(RegistryError) as exc:
            registry.register("foo")
        expect("Foo" in str(exc.value)) == True

    def unknown_lookup_is_an_error(expect):
        registry = IdentifierRegistry()

        with pytest.raises(RegistryError) as exc:
            registry.lookup("wl_seat")
        expect("wl_seat" in str(exc.value)) == True

    def keeps_registration_order(expect):
        registry = IdentifierRegistry()
        for name in ["wl_b", "wl_a", "wl_c"]:
            registry.register(name)

        expect(list(registry.items())) == [("wl_b", "B"), ("wl_a", "A"), ("wl_c", "C")]

    def has_no_collisions_in_core_protocol(expect):
        proto = parse_file(f"{FILE_DIR}/core.xml")
        registry = IdentifierRegistry()

        idents = [registry.register(iface.name) for iface in proto.interfaces]

        expect(len(set(idents))) == len(proto.interfaces)


def describe_generation_context():
    def separates_interfaces_from_members(expect):
        ctx = GenerationContext()
        ctx.interfaces.register("wl_callback")
        ctx.members.register("callback")

        expect(ctx.interfaces.lookup("wl_callback")) == "Callback"
        expect(ctx.members.lookup("callback")) == "Callback"
        expect("callback" in ctx.interfaces) == False

    def passes_prefix_to_registries(expect):
        ctx = GenerationContext(prefix="zwp_")

        expect(ctx.interfaces.register("zwp_linux_dmabuf")) == "LinuxDmabuf"
        expect(ctx.members.register("create_params")) == "CreateParams"

    def declares_package_level_identifiers(expect):
        ctx = GenerationContext()

        expect(ctx.declare("FooBar", "interface wl_foo_bar")) == "FooBar"
        expect(ctx.declare("FooBar", "interface wl_foo_bar")) == "FooBar"

    def rejects_identifier_declared_twice(expect):
        ctx = GenerationContext()
        ctx.declare("FooBar", "interface wl_foo_bar")

        with pytest.raises(RegistryError) as exc:
            ctx.declare("FooBar", "enum wl_foo.bar")
        expect(str(exc.value)) == "enum wl_foo.bar and interface wl_foo_bar both declare FooBar"
