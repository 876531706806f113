"""Source files and the directories that group them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from docplane.tree.base import DocEntity, VariableSource
from docplane.tree.docs import DocText
from docplane.tree.routine import Routine

if TYPE_CHECKING:
    from docplane.markup import MarkupParser
    from docplane.tree.classes import ClassEntity
    from docplane.tree.session import BuildSession

_FILE_TAGS = (
    "author",
    "copyright",
    "history",
    "version",
    "bugs",
    "todo",
    "restrictions",
    "uses",
    "requires",
    "examples",
)


@dataclass(eq=False)
class Directory(DocEntity):
    """A group of source files sharing a location relative to the root."""

    session: BuildSession = field(repr=False)
    location: str
    files: list[SourceFile] = field(default_factory=list, repr=False)
    comments: list[str] = field(default_factory=list)

    index_type = "directory"

    @property
    def index_name(self) -> str:
        return self.location or "."

    def is_visible(self) -> bool:
        return any(f.is_visible() for f in self.files)

    def visible_files(self) -> list[SourceFile]:
        return sorted((f for f in self.files if f.is_visible()), key=lambda f: f.basename.lower())

    def _variables(self) -> dict[str, Callable[[], Any]]:
        return {
            "location": lambda: self.location,
            "n_files": lambda: len(self.visible_files()),
            "files": self.visible_files,
            "has_comments": lambda: any(line.strip() for line in self.comments),
            "comments": lambda: self.session.markup.parse(self.comments),
        }

    def _variable_delegate(self) -> VariableSource | None:
        return self.session


@dataclass(eq=False)
class SourceFile(DocEntity):
    """One parsed ``.pro`` file.

    Mutated throughout its single parse pass; treated as read-only once the
    classifier finishes.
    """

    session: BuildSession = field(repr=False)
    path: Path
    directory: Directory = field(repr=False)
    lines: list[str] = field(default_factory=list, repr=False)
    modified: datetime | None = None
    format_style: str = "idldoc"
    markup_style: str = "verbatim"
    markup: MarkupParser = field(default=None, repr=False)  # type: ignore[assignment]
    routines: list[Routine] = field(default_factory=list, repr=False)
    docs: DocText = field(default_factory=DocText)
    is_batch: bool = False
    has_main_level: bool = False
    is_class_definition: bool = False
    is_hidden: bool = False
    is_private: bool = False
    defined_class: ClassEntity | None = field(default=None, repr=False)

    index_type = "file"

    def __post_init__(self) -> None:
        if self.markup is None:
            self.markup = self.session.markup
        self.directory.files.append(self)

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def index_name(self) -> str:
        return self.basename

    @property
    def n_lines(self) -> int:
        return len(self.lines)

    def add_routine(self, routine: Routine) -> None:
        self.routines.append(routine)

    def visible_routines(self) -> list[Routine]:
        return [r for r in self.routines if r.is_visible()]

    def finalize(self) -> None:
        """Register file-level markers once the parse pass ends."""
        for category in self.docs.categories:
            self.session.create_category_entry(category, self)
        if self.docs.has_tag("bugs"):
            self.session.create_bug_entry(self)
        if self.docs.has_tag("todo"):
            self.session.create_todo_entry(self)
        if self.docs.has_tag("requires"):
            version = " ".join(self.docs.tag_lines("requires")).strip()
            self.session.check_required_version(version, self)

    def is_visible(self) -> bool:
        if self.is_hidden:
            return False
        return not (self.is_private and self.session.user_level)

    def _variables(self) -> dict[str, Callable[[], Any]]:
        table: dict[str, Callable[[], Any]] = {
            "basename": lambda: self.basename,
            "path": lambda: str(self.path),
            "location": lambda: self.directory.location,
            "n_lines": lambda: self.n_lines,
            "modification_time": lambda: self.modified.isoformat() if self.modified else "",
            "format": lambda: self.format_style,
            "markup": lambda: self.markup_style,
            "is_batch": lambda: self.is_batch,
            "has_main_level": lambda: self.has_main_level,
            "is_class": lambda: self.is_class_definition,
            "class_name": lambda: self.defined_class.name if self.defined_class else "",
            "is_private": lambda: self.is_private,
            "is_hidden": lambda: self.is_hidden,
            "n_routines": lambda: len(self.visible_routines()),
            "routines": self.visible_routines,
            "has_comments": self.docs.has_comments,
            "comments": lambda: self.docs.body(self.markup),
            "comments_first_line": lambda: self.docs.body(self.markup).first_sentence(),
            "has_categories": lambda: bool(self.docs.categories),
            "categories": lambda: list(self.docs.categories),
            "index_name": lambda: self.index_name,
            "index_type": lambda: self.index_type,
        }
        for tag in _FILE_TAGS:
            table[f"has_{tag}"] = lambda tag=tag: self.docs.has_tag(tag)
            table[tag] = lambda tag=tag: self.docs.body(self.markup, tag)
        return table

    def _variable_delegate(self) -> VariableSource | None:
        return self.session
