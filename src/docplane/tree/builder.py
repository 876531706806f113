"""Documentation tree builder.

Parses source files one at a time into a :class:`BuildSession`. A failure
inside one file is turned into a session warning and never stops the run.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from docplane.config.constants import (
    DEFAULT_MARKUP,
    DOCFORMAT_DIRECTIVE,
    FORMAT_STYLES,
    MARKUP_STYLES,
)
from docplane.core.errors import DocPlaneError, ParseError
from docplane.core.logging import get_logger
from docplane.core.progress import progress
from docplane.discovery import SourcePath
from docplane.formats import FormatParser, get_format_parser
from docplane.markup import get_markup_parser
from docplane.parsing.classifier import SourceClassifier
from docplane.tree.file import SourceFile
from docplane.tree.session import BuildSession

log = get_logger("tree.builder")

_DOCFORMAT_RE = re.compile(
    rf"^\s*;\s*{DOCFORMAT_DIRECTIVE}\s*=\s*(?P<quote>['\"])(?P<value>[^'\"]*)(?P=quote)",
    re.IGNORECASE,
)


def read_docformat(first_line: str) -> tuple[str | None, str | None]:
    """Parse ``; docformat = 'format [markup]'`` into ``(format, markup)``."""
    match = _DOCFORMAT_RE.match(first_line)
    if match is None:
        return None, None
    words = match["value"].lower().split()
    format_style = words[0] if words else None
    markup_style = words[1] if len(words) > 1 else None
    return format_style, markup_style


class DocTreeBuilder:
    """Builds the documentation tree of a set of source files."""

    def __init__(self, session: BuildSession, *, join_continuations: bool = True) -> None:
        self.session = session
        self.join_continuations = join_continuations
        self._format_parsers: dict[str, FormatParser] = {}

    def format_parser(self, name: str) -> FormatParser:
        """Dialect parser for ``name``, created once per builder."""
        parser = self._format_parsers.get(name)
        if parser is None:
            parser = get_format_parser(name, self.session)
            self._format_parsers[name] = parser
        return parser

    def build(self, sources: Iterable[SourcePath]) -> BuildSession:
        """Parse every source, then the overview file if one is configured."""
        sources = list(sources)
        for source in progress(sources, desc="Parsing", unit="files"):
            try:
                self.parse_file(source.path, source.directory)
            except DocPlaneError as e:
                self.session.warning(str(e), file=str(source.path))
            except Exception as e:
                log.exception("file_parse_failed", file=str(source.path))
                self.session.warning(
                    f"failed to parse {source.path.name}: {e}", file=str(source.path)
                )

        overview = self.session.config.docs.overview
        if overview:
            try:
                self.parse_overview(Path(overview))
            except DocPlaneError as e:
                self.session.warning(str(e), file=overview)

        log.info(
            "build_complete",
            files=len(self.session.files),
            classes=len(self.session.classes),
            warnings=self.session.n_warnings,
        )
        return self.session

    def parse_file(self, path: Path, location: str = "") -> SourceFile:
        """Parse one source file into the session.

        Raises:
            ParseError: If the file cannot be read.
        """
        lines, modified = _read_lines(path)
        format_style, markup_style = self._styles(lines, path)

        session = self.session
        file = SourceFile(
            session=session,
            path=path,
            directory=session.directory(location),
            lines=lines,
            modified=modified,
            format_style=format_style,
            markup_style=markup_style,
            markup=get_markup_parser(markup_style),
        )
        session.files.append(file)
        session.create_index_entry(file.basename, file)

        classifier = SourceClassifier(file, self.format_parser(format_style))
        classifier.run(lines, join_continuations=self.join_continuations)
        file.finalize()
        log.debug(
            "file_parsed",
            file=file.basename,
            format=format_style,
            markup=markup_style,
            routines=len(file.routines),
        )
        return file

    def parse_overview(self, path: Path) -> None:
        """Read the overview file into the session and its directories.

        Raises:
            ParseError: If the overview file cannot be read.
        """
        try:
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            raise ParseError.malformed_overview(str(path), str(e)) from e

        parser = self.format_parser(self.session.config.docs.format_style)
        overview = parser.parse_overview_comments(lines)
        self.session.overview = overview.docs
        for location, comments in overview.directories.items():
            directory = self.session.directories.get(location.strip("/"))
            if directory is None:
                self.session.warning(
                    f"overview documents unknown directory '{location}'", file=str(path)
                )
                continue
            directory.comments.extend(comments)

    def _styles(self, lines: list[str], path: Path) -> tuple[str, str]:
        """Format and markup for a file: its docformat line, else the defaults."""
        docs = self.session.config.docs
        format_style, markup_style = docs.format_style, docs.markup_style
        if lines:
            declared_format, declared_markup = read_docformat(lines[0])
            if declared_format is not None:
                if declared_format in FORMAT_STYLES:
                    format_style = declared_format
                    markup_style = None
                else:
                    self.session.warning(
                        f"unknown format '{declared_format}' in docformat of {path.name}",
                        file=str(path),
                    )
            if declared_markup is not None:
                if declared_markup in MARKUP_STYLES:
                    markup_style = declared_markup
                else:
                    self.session.warning(
                        f"unknown markup '{declared_markup}' in docformat of {path.name}",
                        file=str(path),
                    )
        return format_style, markup_style or DEFAULT_MARKUP[format_style]


def _read_lines(path: Path) -> tuple[list[str], datetime | None]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
        modified = datetime.fromtimestamp(path.stat().st_mtime)
    except OSError as e:
        raise ParseError.unreadable_file(str(path), str(e)) from e
    return text.splitlines(), modified
