"""Documentation comment dialects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docplane.core.errors import ConfigError
from docplane.formats.base import Attribute, FormatParser, OverviewDoc
from docplane.formats.idl import IdlFormatParser
from docplane.formats.idldoc import IdldocFormatParser
from docplane.formats.rst import RstFormatParser
from docplane.formats.verbatim import VerbatimFormatParser

if TYPE_CHECKING:
    from docplane.tree.session import BuildSession

FORMAT_PARSERS: dict[str, type[FormatParser]] = {
    parser.name: parser
    for parser in (
        IdldocFormatParser,
        RstFormatParser,
        IdlFormatParser,
        VerbatimFormatParser,
    )
}


def get_format_parser(name: str, session: BuildSession) -> FormatParser:
    """Instantiate the dialect registered under ``name`` for ``session``."""
    parser = FORMAT_PARSERS.get(name.lower())
    if parser is None:
        raise ConfigError.unknown_style("format", name, sorted(FORMAT_PARSERS))
    return parser(session)


__all__ = [
    "FORMAT_PARSERS",
    "Attribute",
    "FormatParser",
    "IdlFormatParser",
    "IdldocFormatParser",
    "OverviewDoc",
    "RstFormatParser",
    "VerbatimFormatParser",
    "get_format_parser",
]
