"""dpl build command - build the documentation tree and summarize it."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from docplane.cli.utils import run_build
from docplane.config.constants import FORMAT_STYLES, MARKUP_STYLES
from docplane.core.progress import pluralize, status
from docplane.tree.routine import DocumentationLevel
from docplane.tree.session import BuildSession


def build_summary(session: BuildSession) -> dict[str, Any]:
    """Counts describing a finished build."""
    routines = [r for f in session.visible_files() for r in f.visible_routines()]
    levels = {level.value: 0 for level in DocumentationLevel}
    for routine in routines:
        level = routine.level or routine.compute_level()
        levels[level.value] += 1
    version = session.get_variable("required_version")
    return {
        "title": session.config.docs.title,
        "files": len(session.visible_files()),
        "routines": len(routines),
        "classes": len(session.visible_classes()),
        "categories": sorted(session.visible_categories()),
        "documentation": levels,
        "obsolete": len([i for i in session.obsolete if i.is_visible()]),
        "bugs": len([i for i in session.bugs if i.is_visible()]),
        "todos": len([i for i in session.todos if i.is_visible()]),
        "required_version": version.value if version and version.value else None,
        "warnings": session.warnings,
    }


def _make_summary_table(summary: dict[str, Any]) -> Table:
    table = Table(title=summary["title"], show_header=False, box=None, padding=(0, 1))
    table.add_column("item", style="cyan")
    table.add_column("value", justify="right")
    table.add_row("Files", str(summary["files"]))
    table.add_row("Routines", str(summary["routines"]))
    for level, count in summary["documentation"].items():
        table.add_row(f"  {level}", str(count), style="dim")
    table.add_row("Classes", str(summary["classes"]))
    table.add_row("Categories", str(len(summary["categories"])))
    table.add_row("Obsolete", str(summary["obsolete"]))
    table.add_row("Bugs", str(summary["bugs"]))
    table.add_row("Todos", str(summary["todos"]))
    if summary["required_version"]:
        table.add_row("Requires IDL", summary["required_version"])
    table.add_row("Warnings", str(len(summary["warnings"])))
    return table


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--format-style", type=click.Choice(FORMAT_STYLES), help="Comment dialect")
@click.option("--markup-style", type=click.Choice(MARKUP_STYLES), help="Markup style")
@click.option(
    "--user/--developer", default=None, help="User-level (private items hidden) or developer-level"
)
@click.option("--overview", type=click.Path(dir_okay=False, path_type=Path), help="Overview file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def build_command(
    path: Path,
    format_style: str | None,
    markup_style: str | None,
    user: bool | None,
    overview: Path | None,
    as_json: bool,
) -> None:
    """Build the documentation tree of an IDL source tree.

    PATH is the source root (default: current directory).
    """
    root = path.resolve()
    session = run_build(
        root,
        format_style=format_style,
        markup_style=markup_style,
        user=user,
        overview=str(overview) if overview else None,
    )
    summary = build_summary(session)

    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    Console().print(_make_summary_table(summary))
    if summary["warnings"]:
        status(pluralize(len(summary["warnings"]), "warning"), style="warning")
    else:
        status("Build complete", style="success")
