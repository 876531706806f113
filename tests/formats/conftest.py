"""Fixtures for dialect parser tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from docplane.parsing.header import parse_header
from docplane.tree.file import SourceFile
from docplane.tree.routine import Routine
from docplane.tree.session import BuildSession


@pytest.fixture
def source_file(session: BuildSession) -> SourceFile:
    return SourceFile(session=session, path=Path("/src/lib.pro"), directory=session.directory(""))


@pytest.fixture
def declare(source_file: SourceFile) -> Callable[[str], Routine]:
    """Create a routine in ``source_file`` from a declaration line."""

    def _declare(header: str) -> Routine:
        routine = Routine(file=source_file)
        source_file.add_routine(routine)
        parse_header(header, routine, first_line=True)
        return routine

    return _declare
