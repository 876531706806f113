"""Documentation dialect protocol and shared tag handling.

A dialect decides how a block of comment lines is split into description,
tagged sections and argument documentation. What each tag *means* is shared
by every dialect and lives here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docplane.tree.docs import TEXT_TAGS, DocText

if TYPE_CHECKING:
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine
    from docplane.tree.session import BuildSession

ROUTINE_FLAGS = frozenset(("abstract", "obsolete", "hidden", "private"))
FILE_FLAGS = frozenset(("hidden", "private", "hidden_file", "private_file"))


@dataclass
class Attribute:
    """``in`` or ``type=float`` style argument attribute."""

    name: str
    value: str | None = None


@dataclass
class OverviewDoc:
    """Top-level documentation plus comments for individual directories."""

    docs: DocText = field(default_factory=DocText)
    directories: dict[str, list[str]] = field(default_factory=dict)


class FormatParser(ABC):
    """Turns raw documentation comment lines into tree documentation."""

    name: str

    def __init__(self, session: BuildSession) -> None:
        self.session = session

    @abstractmethod
    def parse_file_comments(self, lines: list[str], file: SourceFile) -> None:
        """Attach file-level documentation."""

    @abstractmethod
    def parse_routine_comments(self, lines: list[str], routine: Routine) -> None:
        """Attach header or interior documentation of a routine."""

    @abstractmethod
    def parse_overview_comments(self, lines: list[str]) -> OverviewDoc:
        """Parse the contents of an overview file."""

    # ------------------------------------------------------------------
    # Shared tag semantics
    # ------------------------------------------------------------------

    def apply_routine_tag(self, routine: Routine, tag: str, lines: list[str]) -> None:
        tag = tag.lower()
        if tag in TEXT_TAGS:
            routine.docs.set_tag(tag, lines)
        elif tag == "categories":
            for name in " ".join(lines).split(","):
                routine.docs.add_category(name)
        elif tag in ROUTINE_FLAGS:
            setattr(routine, f"is_{tag}", True)
        elif tag in ("file_comments", "hidden_file", "private_file"):
            self.apply_file_tag(routine.file, tag, lines)
        else:
            self.session.warning(
                f"unknown tag '{tag}' in comments of {routine.name}",
                file=routine.file.basename,
            )
            routine.docs.add_comments(lines)

    def apply_file_tag(self, file: SourceFile, tag: str, lines: list[str]) -> None:
        tag = tag.lower()
        if tag in TEXT_TAGS:
            file.docs.set_tag(tag, lines)
        elif tag == "categories":
            for name in " ".join(lines).split(","):
                file.docs.add_category(name)
        elif tag in FILE_FLAGS:
            setattr(file, "is_hidden" if tag.startswith("hidden") else "is_private", True)
        elif tag == "file_comments":
            file.docs.add_comments(lines)
        else:
            self.session.warning(f"unknown tag '{tag}' in file comments", file=file.basename)
            file.docs.add_comments(lines)

    def apply_argument(
        self,
        routine: Routine,
        name: str,
        *,
        keyword: bool,
        attributes: list[Attribute],
        lines: list[str],
    ) -> None:
        """Document a parameter or keyword declared by the routine's header."""
        argument = routine.get_argument(name, keyword=keyword)
        if argument is None:
            kind = "keyword" if keyword else "parameter"
            self.session.warning(
                f"{kind} '{name}' documented but not found in {routine.name}",
                file=routine.file.basename,
            )
            return
        for attr in attributes:
            if not argument.set_attribute(attr.name, attr.value):
                self.session.warning(
                    f"unknown attribute '{attr.name}' for {argument.name} in {routine.name}",
                    file=routine.file.basename,
                )
        argument.add_comments(lines)

    def apply_class_member(
        self, routine: Routine, kind: str, name: str, lines: list[str]
    ) -> None:
        """Document a ``field`` or ``property`` of the routine's class."""
        cls = routine.owning_class
        if cls is None:
            self.session.warning(
                f"{kind} '{name}' documented outside a class in {routine.name}",
                file=routine.file.basename,
            )
            return
        if kind == "property":
            prop = cls.get_property(name)
            prop.comments = prop.comments + lines if prop.comments else list(lines)
            return
        member = cls.fields.get(name.lower())
        if member is None:
            self.session.warning(
                f"field '{name}' documented but not found in class {cls.name}",
                file=routine.file.basename,
            )
            return
        member.comments.extend(lines)

    def apply_overview_tag(self, overview: OverviewDoc, tag: str, lines: list[str]) -> None:
        tag = tag.lower()
        if tag in TEXT_TAGS:
            overview.docs.set_tag(tag, lines)
        elif tag == "categories":
            for name in " ".join(lines).split(","):
                overview.docs.add_category(name)
        else:
            self.session.warning(f"unknown tag '{tag}' in overview")
            overview.docs.add_comments(lines)


def dedent_lines(lines: list[str]) -> list[str]:
    """Remove the common leading whitespace of the non-blank lines."""
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    cut = min(indents) if indents else 0
    return [line[cut:] if line.strip() else "" for line in lines]


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def trim_blank(lines: list[str]) -> list[str]:
    """Drop leading and trailing blank lines."""
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return list(lines[start:end])
