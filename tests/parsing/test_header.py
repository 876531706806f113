"""Tests for the declaration header parser."""

from pathlib import Path

import pytest

from docplane.oracle.base import MappingOracle
from docplane.parsing.header import parse_header
from docplane.tree.file import SourceFile
from docplane.tree.routine import Routine
from docplane.tree.session import BuildSession


@pytest.fixture
def source_file(session: BuildSession) -> SourceFile:
    return SourceFile(
        session=session, path=Path("/src/widget.pro"), directory=session.directory("")
    )


def _routine(file: SourceFile) -> Routine:
    routine = Routine(file=file)
    file.add_routine(routine)
    return routine


class TestFirstLine:
    """Opening declaration lines."""

    def test_given_procedure_when_parsed_then_name_and_arguments(
        self, source_file: SourceFile
    ) -> None:
        # Given
        routine = _routine(source_file)

        # When
        header = "pro read_data, filename, data, ERROR=err, VERBOSE=v"
        parse_header(header, routine, first_line=True)

        # Then
        assert routine.name == "read_data"
        assert not routine.is_function
        assert not routine.is_method
        assert [p.name for p in routine.parameters] == ["filename", "data"]
        assert [k.name for k in routine.keywords] == ["ERROR", "VERBOSE"]

    def test_given_function_when_parsed_then_is_function(self, source_file: SourceFile) -> None:
        # Given
        routine = _routine(source_file)

        # When
        parse_header("FUNCTION compute, x", routine, first_line=True)

        # Then
        assert routine.is_function
        assert routine.name == "compute"

    def test_given_name_when_parsed_then_indexed(
        self, source_file: SourceFile, session: BuildSession
    ) -> None:
        # Given
        routine = _routine(source_file)

        # When
        parse_header("pro Plot_It", routine, first_line=True)

        # Then
        assert [(e.name, e.item) for e in session.index] == [("plot_it", routine)]


class TestContinuation:
    """Arguments spread over continuation lines."""

    def test_given_three_line_header_when_parsed_then_order_preserved(
        self, source_file: SourceFile
    ) -> None:
        """2 params on line 1, 1 keyword on line 2, 1 param on line 3."""
        # Given
        routine = _routine(source_file)

        # When
        parse_header("pro foo, a, b, $", routine, first_line=True)
        parse_header("  KEY=key, $", routine, first_line=False)
        parse_header("  c", routine, first_line=False)

        # Then
        assert [p.name for p in routine.parameters] == ["a", "b", "c"]
        assert [k.name for k in routine.keywords] == ["KEY"]

    def test_given_marker_only_line_when_parsed_then_no_arguments(
        self, source_file: SourceFile
    ) -> None:
        # Given
        routine = _routine(source_file)
        parse_header("pro foo $", routine, first_line=True)

        # When
        parse_header("   $", routine, first_line=False)

        # Then
        assert routine.name == "foo"
        assert routine.parameters == []
        assert routine.keywords == []


class TestMethods:
    """Class::method declarations and class definitions."""

    def test_given_method_when_parsed_then_registered_with_class(
        self, source_file: SourceFile, session: BuildSession
    ) -> None:
        # Given
        routine = _routine(source_file)

        # When
        parse_header("function MyWidget::getProperty, COLOR=color", routine, first_line=True)

        # Then
        assert routine.is_method
        assert routine.class_name == "MyWidget"
        cls = session.classes["mywidget"]
        assert routine.owning_class is cls
        assert cls.methods == [routine]
        assert cls.properties["color"].is_get

    def test_given_define_routine_when_parsed_then_file_is_class_definition(
        self, session: BuildSession, oracle: MappingOracle, source_file: SourceFile
    ) -> None:
        # Given
        oracle.add("MyWidget", {"members": {"color": 0}})
        routine = _routine(source_file)

        # When
        parse_header("pro MyWidget__define", routine, first_line=True)

        # Then
        cls = session.classes["mywidget"]
        assert source_file.is_class_definition
        assert source_file.defined_class is cls
        assert cls.file is source_file
        assert routine.owning_class is cls
        assert cls.methods == []
        assert list(cls.fields) == ["color"]
