"""dpl classes command - show the class hierarchy."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from docplane.cli.utils import run_build
from docplane.tree.classes import ClassEntity


def class_record(cls: ClassEntity) -> dict[str, Any]:
    return {
        "name": cls.name,
        "file": cls.file.basename if cls.file is not None else None,
        "parents": [parent.name for parent in cls.parents],
        "ancestors": [ancestor.name for ancestor in cls.ancestors],
        "fields": {f.name: f.type for f in cls.fields.values()},
        "properties": {
            p.name: {"get": p.is_get, "set": p.is_set, "init": p.is_init}
            for p in sorted(cls.properties.values(), key=lambda p: p.name)
            if p.is_visible()
        },
        "methods": [m.name for m in cls.methods if m.is_visible()],
    }


def _add_class(tree: Tree, cls: ClassEntity, seen: set[str]) -> None:
    label = f"[cyan]{cls.name}[/cyan]"
    if cls.file is None:
        label += " [dim](not parsed)[/dim]"
    node = tree.add(label)
    if cls.key in seen:
        return
    seen.add(cls.key)
    for member in cls.fields.values():
        node.add(f"{member.name}: [green]{escape(member.type)}[/green]")
    for prop in sorted(cls.properties.values(), key=lambda p: p.name):
        if not prop.is_visible():
            continue
        flags = "".join(
            flag for flag, on in (("g", prop.is_get), ("s", prop.is_set), ("i", prop.is_init)) if on
        )
        node.add(f"[yellow]{prop.name}[/yellow] [dim]({flags})[/dim]")
    for child in cls.children:
        if child.is_visible():
            _add_class(node, child, seen)


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def classes_command(path: Path, as_json: bool) -> None:
    """Print the class hierarchy with fields and properties.

    PATH is the source root (default: current directory).
    """
    session = run_build(path.resolve())
    classes = session.visible_classes()

    if as_json:
        click.echo(json.dumps([class_record(cls) for cls in classes], indent=2))
        return

    tree = Tree("[bold]Classes[/bold]")
    seen: set[str] = set()
    for cls in classes:
        if not cls.parent_keys:
            _add_class(tree, cls, seen)
    Console().print(tree)
