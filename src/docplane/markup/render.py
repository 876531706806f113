"""docutils plumbing shared by the markup parsers and blocks.

Comment bodies are parsed into a docutils document without running the
publisher's transforms, and each top-level node is written separately with
the HTML5 translator so a ``DocBody`` keeps one block per node.
"""

from __future__ import annotations

from functools import cache

from docutils import nodes
from docutils.frontend import Values, get_default_settings
from docutils.parsers.rst import Parser as RstParser
from docutils.utils import new_document
from docutils.writers.html5_polyglot import HTMLTranslator
from docutils.writers.html5_polyglot import Writer as HTMLWriter

SOURCE_NAME = "<comment>"


@cache
def settings() -> Values:
    """Parser and writer settings with reporting and file access turned off."""
    values = get_default_settings(RstParser, HTMLWriter)
    values.report_level = 5
    values.halt_level = 5
    values.file_insertion_enabled = False
    values.raw_enabled = False
    values.stylesheet = ""
    values.stylesheet_path = ""
    return values


def parse_rst(source: str) -> nodes.document:
    document = new_document(SOURCE_NAME, settings())
    RstParser().parse(source, document)
    return document


def render_html(node: nodes.Node, document: nodes.document | None = None) -> str:
    """HTML fragment for a single node."""
    if document is None:
        document = new_document(SOURCE_NAME, settings())
    translator = HTMLTranslator(document)
    node.walkabout(translator)
    return "".join(translator.body).strip()
