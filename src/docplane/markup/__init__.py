"""Markup styles for documentation bodies."""

from docplane.config.constants import MARKUP_STYLES
from docplane.core.errors import ConfigError
from docplane.markup.nodes import Block, DocBody, Listing, Paragraph, Raw, Rendered
from docplane.markup.parsers import (
    MarkupParser,
    PreformattedMarkupParser,
    RstMarkupParser,
    VerbatimMarkupParser,
)

MARKUP_PARSERS: dict[str, MarkupParser] = {
    parser.name: parser
    for parser in (VerbatimMarkupParser(), PreformattedMarkupParser(), RstMarkupParser())
}


def get_markup_parser(name: str) -> MarkupParser:
    """Look up a markup parser by style name (case-insensitive)."""
    try:
        return MARKUP_PARSERS[name.lower()]
    except KeyError:
        raise ConfigError.unknown_style("markup", name, list(MARKUP_STYLES)) from None


__all__ = [
    "MARKUP_PARSERS",
    "Block",
    "DocBody",
    "Listing",
    "MarkupParser",
    "Paragraph",
    "PreformattedMarkupParser",
    "Raw",
    "Rendered",
    "RstMarkupParser",
    "VerbatimMarkupParser",
    "get_markup_parser",
]
