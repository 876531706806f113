"""Documentation text attached to files, routines, arguments and class members."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docplane.markup import DocBody, MarkupParser

OVERWRITING_TAGS = frozenset(("returns", "examples"))
APPENDING_TAGS = frozenset(
    (
        "author",
        "copyright",
        "history",
        "version",
        "bugs",
        "todo",
        "restrictions",
        "uses",
        "customer_id",
        "pre",
        "post",
        "requires",
    )
)
TEXT_TAGS = OVERWRITING_TAGS | APPENDING_TAGS


@dataclass
class DocText:
    """Description lines plus named tag bodies.

    Description and most tags accumulate across attachments; ``returns`` and
    ``examples`` keep only the latest body.
    """

    comments: list[str] = field(default_factory=list)
    tags: dict[str, list[str]] = field(default_factory=dict)
    categories: list[str] = field(default_factory=list)

    def add_comments(self, lines: list[str]) -> None:
        if not _has_text(lines):
            return
        if self.comments:
            self.comments.append("")
        self.comments.extend(lines)

    def set_tag(self, tag: str, lines: list[str]) -> None:
        if tag not in TEXT_TAGS:
            raise KeyError(tag)
        if tag in OVERWRITING_TAGS or tag not in self.tags:
            self.tags[tag] = list(lines)
        else:
            self.tags[tag].extend(lines)

    def add_category(self, name: str) -> None:
        name = name.strip()
        if name and name.lower() not in (c.lower() for c in self.categories):
            self.categories.append(name)

    def has_comments(self) -> bool:
        return _has_text(self.comments)

    def has_tag(self, tag: str) -> bool:
        return _has_text(self.tags.get(tag, []))

    def tag_lines(self, tag: str) -> list[str]:
        return self.tags.get(tag, [])

    def body(self, markup: MarkupParser, tag: str | None = None) -> DocBody:
        lines = self.comments if tag is None else self.tag_lines(tag)
        return markup.parse(lines)


def _has_text(lines: list[str]) -> bool:
    return any(line.strip() for line in lines)
