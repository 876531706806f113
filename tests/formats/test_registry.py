"""Tests for the dialect registry, the verbatim dialect and shared helpers."""

import pytest

from docplane.config.constants import FORMAT_STYLES
from docplane.core.errors import ConfigError, ErrorCode
from docplane.formats import FORMAT_PARSERS, VerbatimFormatParser, get_format_parser
from docplane.formats.base import dedent_lines, trim_blank
from docplane.tree.file import SourceFile
from docplane.tree.session import BuildSession


class TestRegistry:
    def test_given_registry_then_every_configurable_style_present(self) -> None:
        assert sorted(FORMAT_PARSERS) == sorted(FORMAT_STYLES)

    @pytest.mark.parametrize("name", ["idldoc", "RST", "Idl", "verbatim"])
    def test_given_known_name_when_looked_up_then_bound_to_session(
        self, session: BuildSession, name: str
    ) -> None:
        # Given / When
        parser = get_format_parser(name, session)

        # Then
        assert parser.name == name.lower()
        assert parser.session is session

    def test_given_unknown_name_when_looked_up_then_config_error(
        self, session: BuildSession
    ) -> None:
        # Given / When
        with pytest.raises(ConfigError) as exc_info:
            get_format_parser("javadoc", session)

        # Then
        assert exc_info.value.code == ErrorCode.CONFIG_UNKNOWN_STYLE
        assert "javadoc" in exc_info.value.message


class TestVerbatim:
    def test_given_tags_when_parsed_then_everything_is_description(
        self, session: BuildSession, source_file: SourceFile
    ) -> None:
        # Given
        parser = VerbatimFormatParser(session)

        # When
        parser.parse_file_comments(["", "@author not a tag", "  text", ""], source_file)

        # Then
        assert source_file.docs.comments == ["@author not a tag", "  text"]
        assert not source_file.docs.has_tag("author")


class TestHelpers:
    def test_given_indented_lines_when_dedented_then_common_indent_removed(self) -> None:
        assert dedent_lines(["    a", "      b", "  ", "    c"]) == ["a", "  b", "", "c"]

    def test_given_blank_edges_when_trimmed_then_inner_blanks_kept(self) -> None:
        assert trim_blank(["", " ", "a", "", "b", ""]) == ["a", "", "b"]
