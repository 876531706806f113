"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from docplane.config import load_config
from docplane.core.errors import DocPlaneError
from docplane.core.logging import clear_run_id, set_run_id
from docplane.core.progress import pluralize, status
from docplane.discovery import discover_sources
from docplane.oracle import DefineSourceOracle
from docplane.tree.builder import DocTreeBuilder
from docplane.tree.session import BuildSession


def run_build(root: Path, **docs_overrides: Any) -> BuildSession:
    """Load config for ``root``, discover its sources and build the tree.

    Args:
        root: Source root directory
        **docs_overrides: Values for the ``docs`` config section; None is ignored

    Raises:
        click.ClickException: On configuration-fatal errors
    """
    overrides = {key: value for key, value in docs_overrides.items() if value is not None}
    set_run_id()
    try:
        config = load_config(root, **({"docs": overrides} if overrides else {}))
        sources = discover_sources(root, config.docs.source_suffixes)
        search_path = [root, *(Path(p).expanduser() for p in config.classes.search_path)]
        oracle = DefineSourceOracle(search_path)
        session = BuildSession(config=config, oracle=oracle)
        status(f"Parsing {pluralize(len(sources), 'file')} under {root}", style="info")
        DocTreeBuilder(session).build(sources)
    except DocPlaneError as e:
        raise click.ClickException(str(e)) from e
    finally:
        clear_run_id()
    return session
