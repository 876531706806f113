"""dpl index command - list documented names."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from docplane.cli.utils import run_build


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--user/--developer", default=None, help="Hide or show private items")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def index_command(path: Path, user: bool | None, as_json: bool) -> None:
    """Print the index of visible files, routines, classes and properties.

    PATH is the source root (default: current directory).
    """
    session = run_build(path.resolve(), user=user)
    entries = [
        {"name": entry.name, "type": entry.item.index_type, "display": entry.item.index_name}
        for entry in session.visible_index()
    ]

    if as_json:
        click.echo(json.dumps(entries, indent=2))
        return

    table = Table(show_header=True, box=None, padding=(0, 1))
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="dim")
    for entry in entries:
        table.add_row(entry["display"], entry["type"])
    Console().print(table)
