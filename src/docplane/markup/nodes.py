"""Parsed documentation bodies.

A ``DocBody`` is a flat sequence of blocks. Renderers outside this package
walk the blocks; ``as_text`` and ``as_html`` cover the common cases.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from docutils import nodes

from docplane.markup.render import render_html

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s")


@dataclass
class Block(ABC):
    lines: list[str] = field(default_factory=list)

    def as_text(self) -> str:
        return "\n".join(self.lines)

    @abstractmethod
    def as_html(self) -> str:
        """HTML fragment for this block."""


@dataclass
class Raw(Block):
    """Text passed through unchanged, HTML included."""

    def as_html(self) -> str:
        return self.as_text()


@dataclass
class Listing(Block):
    """Preformatted block; whitespace is significant."""

    def as_html(self) -> str:
        text = self.as_text()
        return render_html(nodes.literal_block(text, text))


@dataclass
class Rendered(Block):
    """A block whose HTML was written by docutils at parse time."""

    html: str = ""

    def as_html(self) -> str:
        return self.html


@dataclass
class Paragraph(Rendered):
    def as_text(self) -> str:
        return " ".join(line.strip() for line in self.lines if line.strip())


@dataclass
class DocBody:
    blocks: list[Block] = field(default_factory=list)

    def __bool__(self) -> bool:
        return any(block.as_text().strip() for block in self.blocks)

    def as_text(self) -> str:
        return "\n\n".join(block.as_text() for block in self.blocks)

    def as_html(self) -> str:
        return "\n".join(block.as_html() for block in self.blocks)

    def first_sentence(self) -> str:
        """First sentence of the first block, used for one-line summaries."""
        for block in self.blocks:
            text = " ".join(block.as_text().split())
            if text:
                return _SENTENCE_END_RE.split(text, maxsplit=1)[0]
        return ""
