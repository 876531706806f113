"""The ``verbatim`` dialect: the whole comment block is description."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docplane.formats.base import FormatParser, OverviewDoc, trim_blank

if TYPE_CHECKING:
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine


class VerbatimFormatParser(FormatParser):
    name = "verbatim"

    def parse_file_comments(self, lines: list[str], file: SourceFile) -> None:
        file.docs.add_comments(trim_blank(lines))

    def parse_routine_comments(self, lines: list[str], routine: Routine) -> None:
        routine.docs.add_comments(trim_blank(lines))

    def parse_overview_comments(self, lines: list[str]) -> OverviewDoc:
        overview = OverviewDoc()
        overview.docs.add_comments(trim_blank(lines))
        return overview
