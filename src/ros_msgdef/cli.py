"""Command line interface for inspecting message definitions using Cyclopts."""

import logging
import sys
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .exceptions import MessageDefinitionError
from .models import ArrayField, FieldDescriptor
from .resolver import DEFAULT_ENCODING, parse_message_definition, resolve_sub_definitions

console = Console()
err_console = Console(stderr=True)

app = App(
    name="ros-msgdef",
    help="Resolve ROS1 message definitions into field descriptors.",
    help_format="rich",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def _read_input(file: str) -> bytes:
    """Read a definition from a path, or stdin for ``-``."""
    if file == "-":
        return sys.stdin.buffer.read()
    return Path(file).read_bytes()


def _add_branch(tree: Tree, field: FieldDescriptor) -> None:
    if isinstance(field, ArrayField):
        branch = tree.add(f"[cyan]{field.name}[/cyan] [dim]{escape(str(field))}[/dim]")
        for element in field.elements:
            _add_branch(branch, element)
    else:
        tree.add(f"[cyan]{field.name}[/cyan] [green]{field.data_type.value}[/green]")


def show(
    file: str,
    *,
    json: Annotated[bool, Parameter(name=["-j", "--json"])] = False,
    encoding: str = DEFAULT_ENCODING,
    verbose: Annotated[bool, Parameter(name=["-v", "--verbose"])] = False,
) -> None:
    """Show the resolved fields of a message definition.

    Parameters
    ----------
    file
        Path to a file holding the raw message definition, or ``-`` for stdin.
    json
        Print the descriptors as JSON instead of a tree.
    encoding
        Single byte encoding used to decode the definition.
    verbose
        Log skipped lines and resolved nested definitions.
    """
    _setup_logging(verbose)
    try:
        fields = parse_message_definition(_read_input(file), encoding=encoding)
    except MessageDefinitionError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if json:
        console.print_json(data=[field.to_dict() for field in fields])
        return

    tree = Tree(f"[bold]{escape(file)}[/bold]")
    for field in fields:
        _add_branch(tree, field)
    console.print(tree)


def types(
    file: str,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> None:
    """List the nested definitions of a message definition.

    Parameters
    ----------
    file
        Path to a file holding the raw message definition, or ``-`` for stdin.
    encoding
        Single byte encoding used to decode the definition.
    """
    try:
        table_defs = resolve_sub_definitions(_read_input(file), encoding=encoding)
    except MessageDefinitionError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if not table_defs:
        console.print("[yellow]No nested definitions found[/yellow]")
        return

    table = Table()
    table.add_column("Name", style="bold white")
    table.add_column("Fields", style="green", justify="right")
    for name in table_defs:
        table.add_row(name, str(len(table_defs.get(name))))
    console.print(table)


app.command(name="show")(show)
app.command(name="types")(types)


if __name__ == "__main__":
    app()
