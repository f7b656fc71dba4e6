"""Command-line interface for wlgen code generation."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wlgen.generator import golang, parse_file
from wlgen.generator.parser import ParseError, ValidationError
from wlgen.generator.registry import DEFAULT_PREFIX
from wlgen.generator.types import WlgenError

if TYPE_CHECKING:
    from wlgen.generator.types import Protocol

DEFAULT_INPUT = "wayland.xml"
LANGUAGES = ("go",)

error_console = Console(stderr=True)


def _fail(message: str) -> NoReturn:
    error_console.print(Panel(Text(message, style="red"), title="Error", border_style="red"))
    sys.exit(1)


@contextmanager
def _fatal_errors() -> Iterator[None]:
    """Report any generation failure and exit without writing output."""
    try:
        yield
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename or 'unknown'}")
    except PermissionError as e:
        _fail(f"Permission denied: {e.filename or 'unknown'}")
    except OSError as e:
        _fail(f"I/O error: {e}")
    except ParseError as e:
        _fail(f"Parse error: {e}")
    except ValidationError as e:
        _fail(f"Invalid protocol: {e}")
    except WlgenError as e:
        _fail(f"Generation failed: {e}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress to stderr")
def cli(verbose: bool) -> None:
    """Wayland protocol code generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


@cli.command()
@click.option("--language", "-l", default="go", show_default=True, help="Target language (go)")
@click.option(
    "--input", "-i", "input_file", default=DEFAULT_INPUT, show_default=True, help="Protocol XML"
)
@click.option("--output", "-o", "output_file", default=None, help="Output file [default: stdout]")
@click.option("--package", default=golang.DEFAULT_PACKAGE, show_default=True, help="Go package")
@click.option(
    "--prefix",
    default=DEFAULT_PREFIX,
    show_default=True,
    help="Namespace prefix stripped from protocol names",
)
def gen(
    language: str, input_file: str, output_file: str | None, package: str, prefix: str
) -> None:
    """Generate protocol bindings from a protocol description."""
    if language not in LANGUAGES:
        print(f"Unknown language: {language}")
        sys.exit(1)

    with _fatal_errors():
        proto_def = parse_file(input_file)
        generated_file = golang.render(proto_def, package=package, prefix=prefix)

        if output_file is None:
            click.echo(generated_file, nl=False)
        else:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(generated_file)


@cli.command()
@click.option(
    "--input", "-i", "input_file", default=DEFAULT_INPUT, show_default=True, help="Protocol XML"
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display protocol interfaces and request codes."""
    with _fatal_errors():
        protocol = parse_file(input_file)

    if output_json:
        _output_json(protocol)
    else:
        _output_plain(protocol)


def _request_codes(protocol: Protocol) -> dict[str, dict[str, int]]:
    return {
        iface.name: {request.name: code for code, request in enumerate(iface.requests)}
        for iface in protocol.interfaces
    }


def _output_json(protocol: Protocol) -> None:
    """Output protocol info as JSON."""
    data = {
        "protocol": protocol.to_dict(),
        "request_codes": _request_codes(protocol),
    }
    print(json.dumps(data, indent=2))


def _output_plain(protocol: Protocol) -> None:
    """Output protocol info using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]Protocol[/bold cyan] {protocol.name}")
    console.print()

    # Interfaces
    iface_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    iface_table.add_column("Interface", style="white")
    iface_table.add_column("Version", style="yellow", justify="right")
    iface_table.add_column("Requests", justify="right")
    iface_table.add_column("Events", justify="right")
    iface_table.add_column("Enums", justify="right")

    for iface in protocol.interfaces:
        iface_table.add_row(
            iface.name,
            str(iface.version),
            str(len(iface.requests)),
            str(len(iface.events)),
            str(len(iface.enums)),
        )

    console.print(iface_table)
    console.print()

    # Request codes
    console.print("[bold cyan]Request codes[/bold cyan]")
    code_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    code_table.add_column("Interface", style="dim")
    code_table.add_column("Request", style="white")
    code_table.add_column("Code", style="green", justify="right")

    for iface_name, codes in _request_codes(protocol).items():
        for request_name, code in codes.items():
            code_table.add_row(iface_name, request_name, str(code))

    console.print(code_table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
