"""Tests for the idldoc dialect."""

from collections.abc import Callable

import pytest

from docplane.formats.idldoc import IdldocFormatParser, split_tags
from docplane.tree.file import SourceFile
from docplane.tree.routine import Routine
from docplane.tree.session import BuildSession

Declare = Callable[[str], Routine]


@pytest.fixture
def parser(session: BuildSession) -> IdldocFormatParser:
    return IdldocFormatParser(session)


class TestSplitTags:
    def test_given_lines_when_split_then_description_and_blocks(self) -> None:
        # Given
        lines = ["Reads a file.", "", "@returns structure", "   with fields", "@author Mike"]

        # When
        description, blocks = split_tags(lines)

        # Then
        assert description == ["Reads a file.", ""]
        assert [(b.tag, b.lines) for b in blocks] == [
            ("returns", ["structure", "   with fields"]),
            ("author", ["Mike"]),
        ]


class TestRoutineComments:
    """Routine-level tags."""

    def test_given_param_and_keyword_tags_then_arguments_documented(
        self, parser: IdldocFormatParser, declare: Declare, session: BuildSession
    ) -> None:
        # Given
        routine = declare("function read_data, filename, ERROR=error")
        lines = [
            "Reads a data file.",
            "@returns structure",
            "@param filename {in}{required}{type=string} file to read",
            "@keyword error {out}{optional}{type=long} error status",
        ]

        # When
        parser.parse_routine_comments(lines, routine)

        # Then
        assert routine.docs.comments == ["Reads a data file."]
        assert routine.docs.tag_lines("returns") == ["structure"]
        filename = routine.parameters[0]
        assert (filename.is_input, filename.is_required, filename.type) == (True, True, "string")
        assert filename.comments == ["file to read"]
        error = routine.keywords[0]
        assert (error.is_output, error.is_optional, error.type) == (True, True, "long")
        assert session.n_warnings == 0

    def test_given_flags_and_categories_then_routine_marked(
        self, parser: IdldocFormatParser, declare: Declare
    ) -> None:
        # Given
        routine = declare("pro old_thing")
        lines = ["@obsolete", "@private", "@categories io, Plotting , io"]

        # When
        parser.parse_routine_comments(lines, routine)

        # Then
        assert routine.is_obsolete
        assert routine.is_private
        assert routine.docs.categories == ["io", "Plotting"]

    def test_given_appending_and_overwriting_tags_then_merged(
        self, parser: IdldocFormatParser, declare: Declare
    ) -> None:
        # Given
        routine = declare("pro foo")

        # When
        parser.parse_routine_comments(["@author Ann", "@examples first"], routine)
        parser.parse_routine_comments(["@author Bob", "@examples second"], routine)

        # Then
        assert routine.docs.tag_lines("author") == ["Ann", "Bob"]
        assert routine.docs.tag_lines("examples") == ["second"]

    def test_given_unknown_tag_then_warning_and_description(
        self, parser: IdldocFormatParser, declare: Declare, session: BuildSession
    ) -> None:
        # Given
        routine = declare("pro foo")

        # When
        parser.parse_routine_comments(["@frobnicate loudly"], routine)

        # Then
        assert session.n_warnings == 1
        assert "frobnicate" in session.warnings[0]
        assert routine.docs.comments == ["loudly"]

    def test_given_undeclared_param_then_warning(
        self, parser: IdldocFormatParser, declare: Declare, session: BuildSession
    ) -> None:
        # Given
        routine = declare("pro foo, a")

        # When
        parser.parse_routine_comments(["@param b not declared"], routine)

        # Then
        assert session.n_warnings == 1
        assert routine.parameters[0].comments == []

    def test_given_unknown_attribute_then_warning_but_documented(
        self, parser: IdldocFormatParser, declare: Declare, session: BuildSession
    ) -> None:
        # Given
        routine = declare("pro foo, a")

        # When
        parser.parse_routine_comments(["@param a {sideways} text"], routine)

        # Then
        assert session.n_warnings == 1
        assert routine.parameters[0].comments == ["text"]

    def test_given_unclosed_attribute_then_warning(
        self, parser: IdldocFormatParser, declare: Declare, session: BuildSession
    ) -> None:
        # Given
        routine = declare("pro foo, a")

        # When
        parser.parse_routine_comments(["@param a {in text"], routine)

        # Then
        assert session.n_warnings == 1
        assert routine.parameters[0].comments == ["{in text"]

    def test_given_file_tags_in_routine_comments_then_applied_to_file(
        self, parser: IdldocFormatParser, declare: Declare, source_file: SourceFile
    ) -> None:
        # Given
        routine = declare("pro foo")

        # When
        parser.parse_routine_comments(["@file_comments Utility routines.", "@hidden_file"], routine)

        # Then
        assert source_file.docs.comments == ["Utility routines."]
        assert source_file.is_hidden


class TestFileAndOverviewComments:
    def test_given_file_comments_then_tags_and_flags(
        self, parser: IdldocFormatParser, source_file: SourceFile
    ) -> None:
        # Given
        lines = ["Library of helpers.", "@author Ann", "@private"]

        # When
        parser.parse_file_comments(lines, source_file)

        # Then
        assert source_file.docs.comments == ["Library of helpers."]
        assert source_file.docs.tag_lines("author") == ["Ann"]
        assert source_file.is_private

    def test_given_overview_with_dirs_then_directory_comments(
        self, parser: IdldocFormatParser
    ) -> None:
        # Given
        lines = [
            "Project overview.",
            "@dir plotting/ Plot routines",
            "   and helpers.",
            "@author Ann",
        ]

        # When
        overview = parser.parse_overview_comments(lines)

        # Then
        assert overview.docs.comments == ["Project overview."]
        assert overview.directories == {"plotting": ["Plot routines", "   and helpers."]}
        assert overview.docs.tag_lines("author") == ["Ann"]
