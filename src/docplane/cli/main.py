"""DocPlane CLI - dpl command."""

import click

from docplane.cli.build import build_command
from docplane.cli.classes import classes_command
from docplane.cli.index import index_command
from docplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="dpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """DocPlane - Documentation trees for IDL source code."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(build_command, name="build")
cli.add_command(index_command, name="index")
cli.add_command(classes_command, name="classes")


if __name__ == "__main__":
    cli()
