"""Tests for routines: naming, accessors and documentation completeness."""

from collections.abc import Callable
from pathlib import Path

import pytest

from docplane.core.errors import InternalError
from docplane.tree.file import SourceFile
from docplane.tree.routine import AccessorKind, DocumentationLevel, Routine
from docplane.tree.session import BuildSession

ParseSource = Callable[..., SourceFile]


@pytest.fixture
def file(session: BuildSession) -> SourceFile:
    return SourceFile(session=session, path=Path("/src/lib.pro"), directory=session.directory(""))


class TestNaming:
    """The name is assigned exactly once."""

    def test_given_name_when_set_then_indexed(
        self, file: SourceFile, session: BuildSession
    ) -> None:
        # Given
        routine = Routine(file=file)

        # When
        routine.name = "Read_Data"

        # Then
        assert routine.name == "Read_Data"
        assert [(e.name, e.item) for e in session.index] == [("read_data", routine)]

    def test_given_named_routine_when_renamed_then_internal_error(self, file: SourceFile) -> None:
        # Given
        routine = Routine(file=file)
        routine.name = "first"

        # When / Then
        with pytest.raises(InternalError):
            routine.name = "second"
        assert routine.name == "first"

    @pytest.mark.parametrize(
        ("name", "class_name", "method_name", "is_method"),
        [
            ("plain", None, "plain", False),
            ("Shape::draw", "Shape", "draw", True),
            ("shape__define", "shape", "shape__define", False),
            ("__define", None, "__define", False),
        ],
    )
    def test_given_name_when_split_then_class_and_method(
        self,
        file: SourceFile,
        name: str,
        class_name: str | None,
        method_name: str,
        is_method: bool,
    ) -> None:
        # Given / When
        routine = Routine(file=file)
        routine.name = name

        # Then
        assert routine.class_name == class_name
        assert routine.method_name == method_name
        assert routine.is_method is is_method

    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("Shape::GetProperty", AccessorKind.GETTER),
            ("Shape::setproperty", AccessorKind.SETTER),
            ("Shape::Init", AccessorKind.INIT),
            ("Shape::_getproperty", AccessorKind.GETTER),
            ("Shape::draw", None),
            ("getproperty", None),
        ],
    )
    def test_given_method_name_when_classified_then_accessor_kind(
        self, file: SourceFile, name: str, kind: AccessorKind | None
    ) -> None:
        routine = Routine(file=file)
        routine.name = name
        assert routine.accessor_kind is kind


class TestArguments:
    """Argument lookup."""

    def test_given_parameter_and_keyword_when_looked_up_then_case_insensitive(
        self, file: SourceFile
    ) -> None:
        # Given
        routine = Routine(file=file)
        routine.name = "r"
        param = routine.add_parameter("x")
        keyword = routine.add_keyword("X")

        # When / Then
        assert routine.get_argument("X", keyword=False) is param
        assert routine.get_argument("x", keyword=True) is keyword
        assert routine.get_argument("x") is param
        assert routine.get_argument("missing") is None


class TestDocumentationLevel:
    """Completeness after the routine is finalized."""

    def test_given_all_documented_function_when_parsed_then_full(
        self, parse_source: ParseSource, session: BuildSession
    ) -> None:
        # Given
        source = (
            ";+\n"
            "; Adds two numbers.\n"
            "; @param a {in} first\n"
            "; @param b second\n"
            "; @returns the sum\n"
            ";-\n"
            "function add, a, b\n"
            "  return, a + b\n"
            "end\n"
        )

        # When
        routine = parse_source(source).routines[0]

        # Then
        assert routine.level is DocumentationLevel.FULL
        assert routine not in session.undocumented

    def test_given_function_without_returns_when_parsed_then_partial(
        self, parse_source: ParseSource, session: BuildSession
    ) -> None:
        # Given
        source = ";+\n; Adds.\n; @param a first\n;-\nfunction add1, a\n  return, a + 1\nend\n"

        # When
        routine = parse_source(source).routines[0]

        # Then
        assert routine.level is DocumentationLevel.PARTIAL
        assert session.undocumented == [routine]

    def test_given_undocumented_keyword_when_parsed_then_partial(
        self, parse_source: ParseSource
    ) -> None:
        source = ";+\n; Plots.\n;-\npro plot_it, KEY=key\nend\n"
        assert parse_source(source).routines[0].level is DocumentationLevel.PARTIAL

    def test_given_no_comments_when_parsed_then_undocumented(
        self, parse_source: ParseSource
    ) -> None:
        source = "pro bare, a\n  print, a\nend\n"
        assert parse_source(source).routines[0].level is DocumentationLevel.UNDOCUMENTED

    def test_given_only_argument_comments_when_parsed_then_partial(
        self, parse_source: ParseSource
    ) -> None:
        source = ";+\n; @param a the value\n;-\npro only_args, a\nend\n"
        assert parse_source(source).routines[0].level is DocumentationLevel.PARTIAL


class TestFlagsAndAggregations:
    """Tags that mark a routine and feed session aggregations."""

    def test_given_marker_tags_when_parsed_then_registered(
        self, parse_source: ParseSource, session: BuildSession
    ) -> None:
        # Given
        source = (
            ";+\n"
            "; Old code.\n"
            "; @obsolete\n"
            "; @bugs leaks memory\n"
            "; @todo rewrite\n"
            "; @categories io, Legacy\n"
            "; @requires IDL 8.2\n"
            ";-\n"
            "pro old_thing\n"
            "end\n"
        )

        # When
        routine = parse_source(source).routines[0]

        # Then
        assert routine.is_obsolete
        assert session.obsolete == [routine]
        assert session.bugs == [routine]
        assert session.todos == [routine]
        assert set(session.categories) == {"io", "legacy"}
        assert session.required_version == (8, 2)
        assert session.required_version_items == [routine]

    def test_given_unknown_tag_when_parsed_then_warning_and_text_kept(
        self, parse_source: ParseSource, session: BuildSession
    ) -> None:
        # Given
        source = ";+\n; Does it.\n; @frobnicate hard\n;-\npro it\nend\n"

        # When
        routine = parse_source(source).routines[0]

        # Then
        assert session.n_warnings == 1
        assert "frobnicate" in session.warnings[0]
        assert routine.docs.comments == ["Does it.", "", "hard"]
