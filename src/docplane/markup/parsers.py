"""Markup parsers turning comment lines into a ``DocBody``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from textwrap import dedent

from docutils import nodes

from docplane.markup.nodes import Block, DocBody, Listing, Paragraph, Raw, Rendered
from docplane.markup.render import parse_rst, render_html


class MarkupParser(ABC):
    """Uniform interface for comment body markup."""

    name: str

    @abstractmethod
    def parse(self, lines: list[str]) -> DocBody:
        """Parse comment lines (markers already removed)."""


class VerbatimMarkupParser(MarkupParser):
    """Comment text is output exactly as written."""

    name = "verbatim"

    def parse(self, lines: list[str]) -> DocBody:
        lines = _trim_blank(lines)
        return DocBody([Raw(lines)] if lines else [])


class PreformattedMarkupParser(MarkupParser):
    """Comment text keeps its line breaks and spacing."""

    name = "preformatted"

    def parse(self, lines: list[str]) -> DocBody:
        lines = _trim_blank(lines)
        return DocBody([Listing(lines)] if lines else [])


class RstMarkupParser(MarkupParser):
    """reStructuredText, parsed and written to HTML by docutils.

    Each top-level node of the parsed document becomes one block: paragraphs
    become ``Paragraph`` and every other node (literal blocks, lists, field
    lists, sections, directives) becomes ``Rendered``. Markup errors never
    raise; the offending text is kept and the diagnostic dropped.
    """

    name = "rst"

    def parse(self, lines: list[str]) -> DocBody:
        source = dedent("\n".join(_trim_blank(lines)))
        if not source.strip():
            return DocBody([])

        document = parse_rst(source)
        blocks: list[Block] = []
        for node in document.children:
            if isinstance(node, nodes.system_message | nodes.comment):
                continue
            text = node.astext().split("\n")
            html = render_html(node, document)
            if isinstance(node, nodes.paragraph):
                blocks.append(Paragraph(text, html=html))
            else:
                blocks.append(Rendered(text, html=html))
        return DocBody(blocks)


def _trim_blank(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return list(lines[start:end])
