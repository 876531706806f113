"""The ``idldoc`` dialect: ``@tag`` lines with ``{attribute}`` groups.

Example::

    ;+
    ; Reads a data file.
    ;
    ; @returns structure
    ; @param filename {in}{required}{type=string} file to read
    ; @keyword error {out}{optional}{type=long} error status
    ; @author Mike
    ;-
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docplane.formats.base import Attribute, FormatParser, OverviewDoc, trim_blank

if TYPE_CHECKING:
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine

_TAG_RE = re.compile(r"^\s*@(?P<tag>\w+)(?P<rest>.*)$")
_ATTRIBUTE_RE = re.compile(r"^\s*\{(?P<body>[^{}]*)\}")

_ARGUMENT_TAGS = {"param": False, "keyword": True}
_MEMBER_TAGS = frozenset(("field", "property"))


@dataclass
class TagBlock:
    tag: str
    lines: list[str] = field(default_factory=list)


def split_tags(lines: list[str]) -> tuple[list[str], list[TagBlock]]:
    """Split comment lines into description lines and ``@tag`` blocks."""
    description: list[str] = []
    blocks: list[TagBlock] = []
    for line in lines:
        match = _TAG_RE.match(line)
        if match is not None:
            blocks.append(TagBlock(match["tag"].lower(), [match["rest"].strip()]))
        elif blocks:
            blocks[-1].lines.append(line)
        else:
            description.append(line)
    return description, blocks


class IdldocFormatParser(FormatParser):
    name = "idldoc"

    def parse_file_comments(self, lines: list[str], file: SourceFile) -> None:
        description, blocks = split_tags(lines)
        file.docs.add_comments(description)
        for block in blocks:
            self.apply_file_tag(file, block.tag, trim_blank(block.lines))

    def parse_routine_comments(self, lines: list[str], routine: Routine) -> None:
        description, blocks = split_tags(lines)
        routine.docs.add_comments(description)
        for block in blocks:
            if block.tag in _ARGUMENT_TAGS or block.tag in _MEMBER_TAGS:
                name, attributes, body = self._split_named(block, routine)
                if not name:
                    self.session.warning(
                        f"@{block.tag} without a name in {routine.name}",
                        file=routine.file.basename,
                    )
                elif block.tag in _ARGUMENT_TAGS:
                    self.apply_argument(
                        routine,
                        name,
                        keyword=_ARGUMENT_TAGS[block.tag],
                        attributes=attributes,
                        lines=body,
                    )
                else:
                    self.apply_class_member(routine, block.tag, name, body)
            else:
                self.apply_routine_tag(routine, block.tag, trim_blank(block.lines))

    def parse_overview_comments(self, lines: list[str]) -> OverviewDoc:
        overview = OverviewDoc()
        description, blocks = split_tags(lines)
        overview.docs.add_comments(description)
        for block in blocks:
            if block.tag == "dir":
                first = block.lines[0].split(None, 1)
                if not first:
                    self.session.warning("@dir without a directory name in overview")
                    continue
                body = ([first[1]] if len(first) > 1 else []) + block.lines[1:]
                overview.directories[first[0].strip("/")] = trim_blank(body)
            else:
                self.apply_overview_tag(overview, block.tag, trim_blank(block.lines))
        return overview

    def _split_named(
        self, block: TagBlock, routine: Routine
    ) -> tuple[str, list[Attribute], list[str]]:
        """Split ``name {attr}{key=value} text`` into its parts."""
        first = block.lines[0]
        parts = first.split(None, 1)
        if not parts:
            return "", [], []
        name, rest = parts[0], parts[1] if len(parts) > 1 else ""

        attributes: list[Attribute] = []
        while (match := _ATTRIBUTE_RE.match(rest)) is not None:
            body = match["body"].strip()
            key, sep, value = body.partition("=")
            attributes.append(Attribute(key.strip(), value.strip() if sep else None))
            rest = rest[match.end() :]
        if rest.lstrip().startswith("{"):
            self.session.warning(
                f"malformed attribute in @{block.tag} {name} of {routine.name}",
                file=routine.file.basename,
            )
        return name, attributes, trim_blank([rest.strip(), *block.lines[1:]])
