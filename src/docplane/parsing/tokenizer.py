"""Line tokenizer for IDL source.

Splits raw source lines into logical statements. Trailing ``;`` comments are
separated from code without being fooled by ``;`` inside string literals, and
lines whose code ends in the ``$`` continuation marker are joined with the
lines that follow.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from docplane.config.constants import COMMENT_MARKER, CONTINUATION_MARKER

_TOKEN_SPLIT_RE = re.compile(r"[\s,]+")


def split_comment(line: str) -> tuple[str, str]:
    """Split a physical line into ``(code, comment)``.

    Quotes run to the matching quote character or to the end of the line;
    there is no escape character. The code part has trailing whitespace
    removed, the comment part keeps its marker.
    """
    quote: str | None = None
    for i, ch in enumerate(line):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == COMMENT_MARKER:
            return line[:i].rstrip(), line[i:].rstrip()
    return line.rstrip(), ""


def split_tokens(code: str) -> list[str]:
    """Split comment-stripped code on whitespace and commas."""
    return [tok for tok in _TOKEN_SPLIT_RE.split(code.strip()) if tok]


def is_continued(code: str) -> bool:
    """True if the code part of a line ends in the continuation marker."""
    return code.endswith(CONTINUATION_MARKER)


@dataclass
class Statement:
    """One logical statement.

    ``segments`` holds the code of each physical line, continuation markers
    included, so a declaration can be handed to the header parser line by line.
    """

    line_number: int
    raw_lines: list[str] = field(default_factory=list)
    segments: list[str] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)

    @property
    def raw(self) -> str:
        """First physical line exactly as read."""
        return self.raw_lines[0] if self.raw_lines else ""

    @property
    def stripped(self) -> str:
        """First physical line with leading whitespace removed."""
        return self.raw.lstrip()

    @property
    def code(self) -> str:
        """Code of the whole statement with continuation markers removed."""
        parts = []
        for segment in self.segments:
            if is_continued(segment):
                segment = segment[: -len(CONTINUATION_MARKER)]
            parts.append(segment.strip())
        return " ".join(part for part in parts if part)

    @property
    def comment(self) -> str:
        return " ".join(self.comments)

    @property
    def tokens(self) -> list[str]:
        return split_tokens(self.code)

    @property
    def n_lines(self) -> int:
        return len(self.raw_lines)

    @property
    def is_comment_only(self) -> bool:
        return not self.code and bool(self.comment)

    @property
    def is_continued(self) -> bool:
        """True if the last segment still ends in the continuation marker."""
        return bool(self.segments) and is_continued(self.segments[-1])


class SourceTokenizer:
    """Iterator over the logical statements of a list of lines.

    Usage::

        tokenizer = SourceTokenizer(lines)
        while tokenizer.has_next():
            statement = tokenizer.next()

    With ``join_continuations=False`` every physical line is its own
    statement and continuation handling is left to the caller.
    """

    def __init__(self, lines: Sequence[str], *, join_continuations: bool = True) -> None:
        self._lines = [line.rstrip("\r\n") for line in lines]
        self._pos = 0
        self._join = join_continuations

    def has_next(self) -> bool:
        return self._pos < len(self._lines)

    def next(self) -> Statement:
        if not self.has_next():
            raise StopIteration
        statement = Statement(line_number=self._pos + 1)
        while True:
            line = self._lines[self._pos]
            self._pos += 1
            code, comment = split_comment(line)
            statement.raw_lines.append(line)
            statement.segments.append(code)
            if comment:
                statement.comments.append(comment)
            if not (self._join and code and is_continued(code) and self.has_next()):
                return statement

    def __iter__(self) -> Iterator[Statement]:
        return self

    def __next__(self) -> Statement:
        return self.next()


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on ``sep`` outside brackets, parentheses, braces and quotes."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    for i, ch in enumerate(text):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(depth - 1, 0)
        elif ch == sep and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts
