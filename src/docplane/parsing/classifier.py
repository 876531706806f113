"""Comment/code classifier.

A small state machine fed one logical statement at a time. It tracks block
depth by keyword matching, decides where each ``;+ ... ;-`` documentation
block belongs (file, routine header or routine interior) and creates the
routines of a file as their declarations go by.

Transitions are evaluated in a fixed order for every statement:

1. ``;-`` inside a documentation block closes it.
2. Any other comment inside a documentation block is buffered.
3. ``;+`` opens a block at top level or right after a declaration.
4. Other comment-only lines are ignored.
5. A blank line right after a top-level block flushes it as file docs.
6. ``begin``/``case``/``switch`` open blocks, ``end*`` keywords close them.
7. Pending header continuation lines feed the header parser.
8. ``pro``/``function`` start a new routine.
9. A block closed inside a routine body is merged into its docs.
10. The ``just_closed`` countdown ticks down.

The effect of a closed block is only known once the next statement is
classified, which is what the countdown is for: 2 means a block (or a
declaration) just ended, 1 means the statement after it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from docplane.config.constants import (
    BLOCK_END_KEYWORDS,
    BLOCK_OPEN_KEYWORD,
    COMMENT_MARKER,
    DECLARATION_KEYWORDS,
    DOC_CLOSE_MARKER,
    DOC_OPEN_MARKER,
    IMPLICIT_BLOCK_KEYWORDS,
)
from docplane.core.logging import get_logger
from docplane.parsing.header import parse_header
from docplane.parsing.tokenizer import SourceTokenizer, Statement, is_continued
from docplane.tree.routine import Routine

if TYPE_CHECKING:
    from docplane.formats.base import FormatParser
    from docplane.tree.file import SourceFile

log = get_logger("parsing.classifier")

JUST_CLOSED = 2
HEADER_REGION = 1


class CommentState(str, Enum):
    OUTSIDE_COMMENT = "outside_comment"
    INSIDE_DOC_BLOCK = "inside_doc_block"


@dataclass
class ClassifierState:
    """Mutable state carried from one statement to the next."""

    comment_state: CommentState = CommentState.OUTSIDE_COMMENT
    code_level: int = 0
    just_closed: int = 0
    header_continued: bool = False
    pending: list[str] = field(default_factory=list)
    routine: Routine | None = None
    counting_lines: bool = False


class SourceClassifier:
    """Classify the statements of one file into its documentation tree."""

    def __init__(self, file: SourceFile, format_parser: FormatParser) -> None:
        self.file = file
        self.format_parser = format_parser
        self.state = ClassifierState()
        self._last_line = 0

    def run(self, lines: Iterable[str], *, join_continuations: bool = True) -> SourceFile:
        """Classify a whole file and finish it."""
        for statement in SourceTokenizer(list(lines), join_continuations=join_continuations):
            self.feed(statement)
        self.finish()
        return self.file

    def feed(self, statement: Statement) -> None:
        """Apply one statement to the state machine."""
        state = self.state
        self._last_line = statement.line_number + statement.n_lines - 1
        line = statement.stripped
        inside = state.comment_state is CommentState.INSIDE_DOC_BLOCK

        if not statement.code and line.startswith(COMMENT_MARKER):
            if inside and line.startswith(DOC_CLOSE_MARKER):
                state.comment_state = CommentState.OUTSIDE_COMMENT
                state.just_closed = JUST_CLOSED
            elif inside:
                state.pending.append(line[len(COMMENT_MARKER) + 1 :])
            elif line.startswith(DOC_OPEN_MARKER) and self._can_open():
                state.comment_state = CommentState.INSIDE_DOC_BLOCK
            return

        tokens = [token.lower() for token in statement.tokens]
        start_level = state.code_level
        if not tokens:
            if state.just_closed == JUST_CLOSED and state.code_level == 0 and state.pending:
                self._flush_file_docs()
        else:
            if tokens[-1] == BLOCK_OPEN_KEYWORD or tokens[0] in IMPLICIT_BLOCK_KEYWORDS:
                state.code_level += 1
            if tokens[0] in BLOCK_END_KEYWORDS:
                state.code_level -= 1

            if state.header_continued and state.routine is not None:
                self._continue_header(statement)
            elif tokens[0] in DECLARATION_KEYWORDS:
                self._declare(statement)

        if (
            start_level >= 1
            and state.routine is not None
            and state.just_closed == JUST_CLOSED
            and state.pending
            and not state.header_continued
        ):
            self._flush_routine_docs()

        if state.counting_lines and state.code_level <= 0:
            self._close_routine_lines(self._last_line)
        if state.just_closed > 0:
            state.just_closed -= 1

    def finish(self) -> None:
        """Flush what is left and set the file-level flags."""
        state = self.state
        state.comment_state = CommentState.OUTSIDE_COMMENT
        if state.pending:
            if state.code_level <= 0 or state.routine is None:
                self._flush_file_docs()
            else:
                self._flush_routine_docs()
        if state.counting_lines:
            self._close_routine_lines(max(self._last_line, self.file.n_lines))
        if state.routine is not None:
            state.routine.finalize()

        file = self.file
        if state.code_level < 0:
            file.has_main_level = True
        if not file.routines and not file.has_main_level:
            file.is_batch = True
        log.debug(
            "file_classified",
            file=file.basename,
            routines=len(file.routines),
            code_level=state.code_level,
            is_batch=file.is_batch,
            has_main_level=file.has_main_level,
        )

    def _can_open(self) -> bool:
        state = self.state
        return state.code_level == 0 or (
            state.code_level == 1 and state.just_closed == HEADER_REGION
        )

    def _declare(self, statement: Statement) -> None:
        state = self.state
        if state.routine is not None:
            if state.counting_lines:
                self._close_routine_lines(statement.line_number - 1)
            state.routine.finalize()

        state.code_level += 1
        state.comment_state = CommentState.OUTSIDE_COMMENT
        routine = Routine(file=self.file, start_line=statement.line_number)
        self.file.add_routine(routine)
        state.routine = routine
        state.counting_lines = True

        first, *rest = statement.segments
        parse_header(first, routine, first_line=True)
        for segment in rest:
            parse_header(segment, routine, first_line=False)

        state.header_continued = statement.is_continued
        if not state.header_continued:
            if state.pending:
                self._flush_routine_docs()
            state.just_closed = JUST_CLOSED

    def _continue_header(self, statement: Statement) -> None:
        state = self.state
        assert state.routine is not None
        for segment in statement.segments:
            parse_header(segment, state.routine, first_line=False)
        state.header_continued = is_continued(statement.segments[-1])
        if not state.header_continued:
            if state.pending:
                self._flush_routine_docs()
            state.just_closed = JUST_CLOSED

    def _close_routine_lines(self, last_line: int) -> None:
        state = self.state
        assert state.routine is not None
        state.routine.n_lines = max(last_line - state.routine.start_line + 1, 1)
        state.counting_lines = False

    def _flush_file_docs(self) -> None:
        lines, self.state.pending = self.state.pending, []
        self.format_parser.parse_file_comments(lines, self.file)

    def _flush_routine_docs(self) -> None:
        assert self.state.routine is not None
        lines, self.state.pending = self.state.pending, []
        self.format_parser.parse_routine_comments(lines, self.state.routine)
