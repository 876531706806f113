"""Tests for the build session registries and visibility."""

from collections.abc import Callable
from pathlib import Path

import pytest

from docplane.tree.builder import DocTreeBuilder
from docplane.tree.file import SourceFile
from docplane.tree.session import BuildSession, parse_version

PRIVATE_SOURCE = (
    ";+\n"
    "; Public entry point.\n"
    ";-\n"
    "pro visible_one\n"
    "end\n"
    "\n"
    ";+\n"
    "; Internal helper.\n"
    "; @private\n"
    ";-\n"
    "pro secret_one\n"
    "end\n"
)


def _parse(session: BuildSession, tmp_path: Path, text: str, name: str = "lib.pro") -> SourceFile:
    path = tmp_path / name
    path.write_text(text)
    return DocTreeBuilder(session).parse_file(path)


class TestVisibility:
    """User-level builds hide private items."""

    @pytest.mark.parametrize(("user", "expected"), [(True, False), (False, True)])
    def test_given_private_routine_when_level_chosen_then_visibility_follows(
        self,
        make_session: Callable[..., BuildSession],
        tmp_path: Path,
        user: bool,
        expected: bool,
    ) -> None:
        # Given
        session = make_session(user=user)

        # When
        file = _parse(session, tmp_path, PRIVATE_SOURCE)

        # Then
        public, private = file.routines
        assert public.is_visible()
        assert private.is_visible() is expected
        names = [entry.name for entry in session.visible_index()]
        assert ("secret_one" in names) is expected
        assert "visible_one" in names

    def test_given_private_file_when_user_level_then_file_and_routines_hidden(
        self, make_session: Callable[..., BuildSession], tmp_path: Path
    ) -> None:
        # Given
        session = make_session(user=True)
        source = ";+\n; Internal.\n; @private\n;-\n\npro inner\nend\n"

        # When
        file = _parse(session, tmp_path, source)

        # Then
        assert file.is_private
        assert not file.is_visible()
        assert not file.routines[0].is_visible()
        assert session.visible_files() == []
        assert not session.directory("").is_visible()

    def test_given_hidden_argument_when_listed_then_omitted(
        self, session: BuildSession, tmp_path: Path
    ) -> None:
        # Given
        source = ";+\n; R.\n; @param a {hidden} secret\n; @param b shown\n;-\npro r, a, b\nend\n"

        # When
        routine = _parse(session, tmp_path, source).routines[0]

        # Then
        assert [arg.name for arg in routine.visible_arguments()] == ["b"]
        assert routine.parameters[1].is_first and routine.parameters[1].is_last


class TestRegistries:
    """Aggregations fed by the parse."""

    def test_given_entity_when_registered_twice_then_listed_once(
        self, session: BuildSession, tmp_path: Path
    ) -> None:
        # Given
        file = _parse(session, tmp_path, "pro a\nend\n")

        # When
        session.create_bug_entry(file)
        session.create_bug_entry(file)
        session.create_category_entry("  IO ", file)
        session.create_category_entry("io", file)
        session.create_category_entry("   ", file)

        # Then
        assert session.bugs == [file]
        assert session.categories == {"io": [file]}

    def test_given_files_when_indexed_then_sorted_by_name(
        self, session: BuildSession, tmp_path: Path
    ) -> None:
        # Given
        _parse(session, tmp_path, "pro zeta\nend\npro alpha\nend\n", name="m.pro")

        # When
        names = [(entry.name, entry.item.index_type) for entry in session.visible_index()]

        # Then
        assert names == [("alpha", "routine"), ("m.pro", "file"), ("zeta", "routine")]

    def test_given_directory_location_when_requested_then_created_once(
        self, session: BuildSession
    ) -> None:
        # Given / When
        first = session.directory("/lib/io/")
        second = session.directory("lib/io")

        # Then
        assert first is second
        assert first.location == "lib/io"
        assert first.index_name == "lib/io"
        assert session.directory("").index_name == "."


class TestRequiredVersion:
    """Highest required IDL version and the items that need it."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("8.2", (8, 2)), ("IDL 8.2.1", (8, 2, 1)), ("version 7", (7,)), ("none", None)],
    )
    def test_given_text_when_parsed_then_version_tuple(
        self, text: str, expected: tuple[int, ...] | None
    ) -> None:
        assert parse_version(text) == expected

    def test_given_several_requirements_when_checked_then_highest_kept(
        self, session: BuildSession, tmp_path: Path
    ) -> None:
        # Given
        a, b, c = _parse(session, tmp_path, "pro a\nend\npro b\nend\npro c\nend\n").routines

        # When
        session.check_required_version("6.4", a)
        session.check_required_version("8.0", b)
        session.check_required_version("IDL 8.0", c)
        session.check_required_version("8.0", c)

        # Then
        assert session.required_version == (8, 0)
        assert session.required_version_items == [b, c]

    def test_given_unrecognized_version_when_checked_then_warning(
        self, session: BuildSession, tmp_path: Path
    ) -> None:
        # Given
        routine = _parse(session, tmp_path, "pro a\nend\n").routines[0]

        # When
        session.check_required_version("someday", routine)

        # Then
        assert session.required_version is None
        assert session.n_warnings == 1
