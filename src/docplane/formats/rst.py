"""The ``rst`` dialect: ``:Section:`` headers with indented bodies.

Example::

    ;+
    ; Reads a data file.
    ;
    ; :Returns:
    ;    structure
    ;
    ; :Params:
    ;    filename : in, required, type=string
    ;       file to read
    ;
    ; :Keywords:
    ;    error : out, optional, type=long
    ;       error status
    ;-
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docplane.formats.base import (
    Attribute,
    FormatParser,
    OverviewDoc,
    dedent_lines,
    indent_of,
    trim_blank,
)
from docplane.parsing.tokenizer import split_top_level

if TYPE_CHECKING:
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine

_SECTION_RE = re.compile(r"^:(?P<name>[A-Za-z][\w ]*):\s*(?P<rest>.*)$")

_ENTRY_SECTIONS = frozenset(("params", "keywords", "fields", "properties", "dirs"))


@dataclass
class Section:
    name: str
    lines: list[str] = field(default_factory=list)


@dataclass
class Entry:
    name: str
    attributes: list[Attribute] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)


def split_sections(lines: list[str]) -> tuple[list[str], list[Section]]:
    """Split dedented comment lines into description and sections."""
    description: list[str] = []
    sections: list[Section] = []
    for line in dedent_lines(lines):
        match = _SECTION_RE.match(line)
        if match is not None:
            section = Section(match["name"].strip().lower().replace(" ", "_"))
            if match["rest"].strip():
                section.lines.append("   " + match["rest"].strip())
            sections.append(section)
        elif sections:
            sections[-1].lines.append(line)
        else:
            description.append(line)
    return description, sections


def split_entries(lines: list[str]) -> list[Entry]:
    """Split an entry section into ``name : attrs`` entries and their text."""
    lines = dedent_lines(trim_blank(lines))
    entries: list[Entry] = []
    for line in lines:
        if line.strip() and indent_of(line) == 0:
            name, _, attrs = line.partition(":")
            entries.append(Entry(name.strip(), parse_attributes(attrs)))
        elif entries:
            entries[-1].lines.append(line)
    for entry in entries:
        entry.lines = dedent_lines(trim_blank(entry.lines))
    return entries


def parse_attributes(text: str) -> list[Attribute]:
    attributes: list[Attribute] = []
    for part in split_top_level(text):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        attributes.append(Attribute(key.strip(), value.strip() if sep else None))
    return attributes


class RstFormatParser(FormatParser):
    name = "rst"

    def parse_file_comments(self, lines: list[str], file: SourceFile) -> None:
        description, sections = split_sections(lines)
        file.docs.add_comments(trim_blank(description))
        for section in sections:
            if section.name == "description":
                file.docs.add_comments(_body(section))
            else:
                self.apply_file_tag(file, section.name, _body(section))

    def parse_routine_comments(self, lines: list[str], routine: Routine) -> None:
        description, sections = split_sections(lines)
        routine.docs.add_comments(trim_blank(description))
        for section in sections:
            if section.name == "description":
                routine.docs.add_comments(_body(section))
            elif section.name in ("params", "keywords"):
                for entry in split_entries(section.lines):
                    self.apply_argument(
                        routine,
                        entry.name,
                        keyword=section.name == "keywords",
                        attributes=entry.attributes,
                        lines=entry.lines,
                    )
            elif section.name in ("fields", "properties"):
                kind = "field" if section.name == "fields" else "property"
                for entry in split_entries(section.lines):
                    self.apply_class_member(routine, kind, entry.name, entry.lines)
            else:
                self.apply_routine_tag(routine, section.name, _body(section))

    def parse_overview_comments(self, lines: list[str]) -> OverviewDoc:
        overview = OverviewDoc()
        description, sections = split_sections(lines)
        overview.docs.add_comments(trim_blank(description))
        for section in sections:
            if section.name == "dirs":
                for entry in split_entries(section.lines):
                    overview.directories[entry.name.strip("/")] = entry.lines
            elif section.name in _ENTRY_SECTIONS:
                self.session.warning(f"section :{section.name}: not allowed in overview")
            else:
                self.apply_overview_tag(overview, section.name, _body(section))
        return overview


def _body(section: Section) -> list[str]:
    return dedent_lines(trim_blank(section.lines))
