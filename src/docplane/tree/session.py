"""Build session: the registries one documentation run populates.

A session is created at the start of a run, passed to every parsing
operation and discarded at the end. Files are parsed one at a time, so the
registries are written by a single parse at any moment and need no locking.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from docplane.config.constants import DEFAULT_MARKUP
from docplane.config.models import DocPlaneConfig
from docplane.core.logging import get_logger
from docplane.markup import MarkupParser, get_markup_parser
from docplane.oracle.base import ClassOracle, MappingOracle
from docplane.tree import xref
from docplane.tree.base import DocEntity, VariableSource
from docplane.tree.docs import DocText
from docplane.tree.file import Directory

if TYPE_CHECKING:
    from docplane.tree.classes import ClassEntity, Property
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine

log = get_logger("tree.session")

_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """Lowercased name pointing at any documented entity."""

    name: str
    item: DocEntity


def parse_version(text: str) -> tuple[int, ...] | None:
    """Leading dotted version number of ``text`` as a tuple, e.g. ``(8, 2, 1)``."""
    match = _VERSION_RE.search(text)
    if match is None:
        return None
    return tuple(int(part) for part in match.group(0).split("."))


class BuildSession(VariableSource):
    """Shared state of one documentation build."""

    def __init__(
        self,
        config: DocPlaneConfig | None = None,
        oracle: ClassOracle | None = None,
    ) -> None:
        self.config = config or DocPlaneConfig()
        self.oracle: ClassOracle = oracle if oracle is not None else MappingOracle()
        docs = self.config.docs
        self.markup: MarkupParser = get_markup_parser(
            docs.markup_style or DEFAULT_MARKUP[docs.format_style]
        )
        self.started = datetime.now()

        self.files: list[SourceFile] = []
        self.directories: dict[str, Directory] = {}
        self.classes: dict[str, ClassEntity] = {}
        self.index: list[IndexEntry] = []
        self.categories: dict[str, list[DocEntity]] = {}
        self.undocumented: list[DocEntity] = []
        self.obsolete: list[DocEntity] = []
        self.bugs: list[DocEntity] = []
        self.todos: list[DocEntity] = []
        self.required_version: tuple[int, ...] | None = None
        self.required_version_items: list[DocEntity] = []
        self.overview = DocText()
        self.warnings: list[str] = []

    @property
    def user_level(self) -> bool:
        """True when building user-level documentation (private items hidden)."""
        return self.config.docs.user

    @property
    def n_warnings(self) -> int:
        return len(self.warnings)

    # ------------------------------------------------------------------
    # Sinks and registries
    # ------------------------------------------------------------------

    def warning(self, message: str, **context: Any) -> None:
        self.warnings.append(message)
        log.warning("build_warning", message=message, **context)

    def create_index_entry(self, name: str, item: DocEntity) -> None:
        self.index.append(IndexEntry(name=name.lower(), item=item))

    def create_category_entry(self, name: str, item: DocEntity) -> None:
        key = name.strip().lower()
        if not key:
            return
        items = self.categories.setdefault(key, [])
        if not any(existing is item for existing in items):
            items.append(item)

    def create_documentation_entry(self, item: DocEntity) -> None:
        _append_once(self.undocumented, item)

    def create_obsolete_entry(self, item: DocEntity) -> None:
        _append_once(self.obsolete, item)

    def create_bug_entry(self, item: DocEntity) -> None:
        _append_once(self.bugs, item)

    def create_todo_entry(self, item: DocEntity) -> None:
        _append_once(self.todos, item)

    def check_required_version(self, version: str, item: DocEntity) -> None:
        """Track the highest required IDL version and the items requiring it."""
        parsed = parse_version(version)
        if parsed is None:
            self.warning(f"unrecognized required version '{version}' for {item.index_name}")
            return
        if self.required_version is None or parsed > self.required_version:
            self.required_version = parsed
            self.required_version_items = [item]
        elif parsed == self.required_version:
            _append_once(self.required_version_items, item)

    # ------------------------------------------------------------------
    # Tree access
    # ------------------------------------------------------------------

    def directory(self, location: str) -> Directory:
        """Directory for a root-relative location, created on first use."""
        location = location.strip("/")
        directory = self.directories.get(location)
        if directory is None:
            directory = Directory(session=self, location=location)
            self.directories[location] = directory
        return directory

    def resolve_class(self, name: str) -> ClassEntity:
        return xref.resolve_class(self, name)

    def promote_keyword_to_property(self, routine: Routine, keyword: str) -> Property | None:
        return xref.promote_keyword_to_property(routine, keyword)

    def visible_index(self) -> list[IndexEntry]:
        entries = [entry for entry in self.index if entry.item.is_visible()]
        return sorted(entries, key=lambda e: (e.name, e.item.index_type))

    def visible_categories(self) -> dict[str, list[DocEntity]]:
        result: dict[str, list[DocEntity]] = {}
        for name in sorted(self.categories):
            items = [item for item in self.categories[name] if item.is_visible()]
            if items:
                result[name] = sorted(items, key=lambda item: item.index_name.lower())
        return result

    def visible_files(self) -> list[SourceFile]:
        return [f for f in self.files if f.is_visible()]

    def visible_classes(self) -> list[ClassEntity]:
        return sorted(
            (c for c in self.classes.values() if c.is_visible()), key=lambda c: c.key
        )

    def _variables(self) -> dict[str, Callable[[], Any]]:
        def visible(items: list[DocEntity]) -> list[DocEntity]:
            return [item for item in items if item.is_visible()]

        version = self.required_version
        return {
            "title": lambda: self.config.docs.title,
            "subtitle": lambda: self.config.docs.subtitle,
            "user": lambda: self.user_level,
            "date": lambda: self.started.strftime("%Y-%m-%d %H:%M:%S"),
            "n_warnings": lambda: self.n_warnings,
            "n_files": lambda: len(self.visible_files()),
            "files": self.visible_files,
            "n_dirs": lambda: len([d for d in self.directories.values() if d.is_visible()]),
            "dirs": lambda: visible(
                [self.directories[key] for key in sorted(self.directories)]
            ),
            "n_classes": lambda: len(self.visible_classes()),
            "classes": self.visible_classes,
            "index": self.visible_index,
            "categories": self.visible_categories,
            "n_undocumented": lambda: len(visible(self.undocumented)),
            "undocumented": lambda: visible(self.undocumented),
            "n_obsolete": lambda: len(visible(self.obsolete)),
            "obsolete": lambda: visible(self.obsolete),
            "n_bugs": lambda: len(visible(self.bugs)),
            "bugs": lambda: visible(self.bugs),
            "n_todos": lambda: len(visible(self.todos)),
            "todos": lambda: visible(self.todos),
            "has_required_version": lambda: version is not None,
            "required_version": lambda: ".".join(map(str, version)) if version else "",
            "required_version_items": lambda: visible(self.required_version_items),
            "has_overview_comments": self.overview.has_comments,
            "overview_comments": lambda: self.markup.parse(self.overview.comments),
        }


def _append_once(items: list[DocEntity], item: DocEntity) -> None:
    if not any(existing is item for existing in items):
        items.append(item)
