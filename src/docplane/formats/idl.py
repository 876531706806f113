"""The ``idl`` dialect: the standard IDL library header template.

Example::

    ;+
    ; NAME:
    ;    READ_DATA
    ; PURPOSE:
    ;    Reads a data file.
    ; INPUTS:
    ;    filename: file to read
    ; KEYWORD PARAMETERS:
    ;    error: set to a named variable to receive the error status
    ; OUTPUTS:
    ;    structure
    ; MODIFICATION HISTORY:
    ;    Written by Mike, 2007
    ;-
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from docplane.formats.base import (
    Attribute,
    FormatParser,
    OverviewDoc,
    dedent_lines,
    indent_of,
    trim_blank,
)

if TYPE_CHECKING:
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine

SECTIONS = frozenset(
    (
        "name",
        "purpose",
        "category",
        "calling sequence",
        "inputs",
        "optional inputs",
        "keyword parameters",
        "outputs",
        "optional outputs",
        "common blocks",
        "side effects",
        "restrictions",
        "procedure",
        "example",
        "modification history",
    )
)

# Sections appended to the description under their own heading.
_DESCRIPTION_SECTIONS = ("calling sequence", "common blocks", "side effects", "procedure")

_SECTION_RE = re.compile(r"^\s*(?P<name>[A-Z][A-Z ]*[A-Z]):\s*(?P<rest>.*)$")
_ENTRY_RE = re.compile(r"^(?P<name>[A-Za-z_/]\w*)\s*:\s*(?P<rest>.*)$")


def split_sections(lines: list[str]) -> list[tuple[str, list[str]]]:
    """Split template lines into ``(section, lines)`` pairs; ``""`` is preamble."""
    sections: list[tuple[str, str, list[str]]] = [("", "", [])]
    for line in lines:
        match = _SECTION_RE.match(line)
        if match is not None and match["name"].lower() in SECTIONS:
            sections.append((match["name"].lower(), match["rest"].strip(), []))
        else:
            sections[-1][2].append(line)
    return [
        (name, ([first] if first else []) + dedent_lines(trim_blank(rest)))
        for name, first, rest in sections
    ]


def split_entries(lines: list[str]) -> tuple[list[str], list[tuple[str, list[str]]]]:
    """Split an arguments section into free text and ``name: text`` entries."""
    free: list[str] = []
    entries: list[tuple[str, str, list[str]]] = []
    for line in lines:
        match = _ENTRY_RE.match(line) if indent_of(line) == 0 else None
        if match is not None:
            entries.append((match["name"].lstrip("/"), match["rest"].strip(), []))
        elif entries:
            entries[-1][2].append(line)
        else:
            free.append(line)
    return free, [
        (name, ([first] if first else []) + dedent_lines(trim_blank(rest)))
        for name, first, rest in entries
    ]


class IdlFormatParser(FormatParser):
    name = "idl"

    def parse_file_comments(self, lines: list[str], file: SourceFile) -> None:
        for section, body in split_sections(lines):
            if section in ("", "purpose"):
                file.docs.add_comments(body)
            elif section == "category":
                self.apply_file_tag(file, "categories", body)
            elif section == "modification history":
                self.apply_file_tag(file, "history", body)
            elif section == "restrictions":
                self.apply_file_tag(file, "restrictions", body)
            elif section == "example":
                self.apply_file_tag(file, "examples", body)
            elif section != "name" and body:
                file.docs.add_comments([f"{section.title()}:", *body])

    def parse_routine_comments(self, lines: list[str], routine: Routine) -> None:
        for section, body in split_sections(lines):
            if section in ("", "purpose"):
                routine.docs.add_comments(body)
            elif section == "name":
                continue
            elif section == "category":
                self.apply_routine_tag(routine, "categories", body)
            elif section in ("inputs", "optional inputs", "keyword parameters"):
                self._arguments(routine, section, body)
            elif section in ("outputs", "optional outputs"):
                if routine.is_function and section == "outputs":
                    self.apply_routine_tag(routine, "returns", body)
                elif body:
                    routine.docs.add_comments([f"{section.title()}:", *body])
            elif section == "restrictions":
                self.apply_routine_tag(routine, "restrictions", body)
            elif section == "example":
                self.apply_routine_tag(routine, "examples", body)
            elif section == "modification history":
                self.apply_routine_tag(routine, "history", body)
            elif section in _DESCRIPTION_SECTIONS and body:
                routine.docs.add_comments([f"{section.title()}:", *body])

    def parse_overview_comments(self, lines: list[str]) -> OverviewDoc:
        overview = OverviewDoc()
        for section, body in split_sections(lines):
            if section == "modification history":
                self.apply_overview_tag(overview, "history", body)
            elif section != "name":
                overview.docs.add_comments(body)
        return overview

    def _arguments(self, routine: Routine, section: str, body: list[str]) -> None:
        keyword = section == "keyword parameters"
        free, entries = split_entries(body)
        if any(line.strip() for line in free):
            routine.docs.add_comments([f"{section.title()}:", *free])
        for name, text in entries:
            attributes = [Attribute("optional")] if section == "optional inputs" else []
            self.apply_argument(
                routine, name, keyword=keyword, attributes=attributes, lines=text
            )
