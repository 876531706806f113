"""Tests for the oracle reading ``__define`` procedures."""

from pathlib import Path

import numpy as np
import pytest

from docplane.core.errors import ErrorCode, OracleError
from docplane.oracle.base import ObjectRef, PointerRef
from docplane.oracle.define import DefineSourceOracle
from docplane.oracle.typedesc import type_description


@pytest.fixture
def lib(tmp_path: Path) -> Path:
    root = tmp_path / "lib"
    (root / "geometry").mkdir(parents=True)
    (root / "geometry" / "point2__define.pro").write_text(
        "pro point2__define\n"
        "  compile_opt strictarr\n"
        "  define = { Point2, x: 0.0, y: 0.0 }\n"
        "end\n"
    )
    (root / "geometry" / "Point3__define.pro").write_text(
        "; A point in space\n"
        "pro point3__define\n"
        "  compile_opt strictarr\n"
        "  define = { Point3, inherits Point2, $   ; parent\n"
        "             z: 0.0D, $\n"
        "             tags: strarr(4), $\n"
        "             labels: strarr(6), $\n"
        "             next: ptr_new(), $\n"
        "             owner: obj_new('Point2') }\n"
        "end\n"
    )
    (root / "broken__define.pro").write_text("pro broken__define\n  x = 1\nend\n")
    return root


@pytest.fixture
def oracle(lib: Path) -> DefineSourceOracle:
    return DefineSourceOracle([lib])


class TestDefinitions:
    """Reading class definitions from the search path."""

    def test_given_inherits_when_superclasses_then_listed(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert oracle.superclasses("Point3") == ["Point2"]
        assert oracle.superclasses("point2") == []

    def test_given_continued_definition_when_structure_then_all_members(
        self, oracle: DefineSourceOracle
    ) -> None:
        # Given / When
        members = dict(oracle.own_structure("Point3"))

        # Then
        assert list(members) == ["x", "y", "z", "tags", "labels", "next", "owner"]
        assert type_description(members["x"]) == "0.0"
        assert type_description(members["z"]) == "0.0D"
        assert type_description(members["tags"]) == "['', '', '', '']"
        assert type_description(members["labels"]) == "strarr(6)"
        assert isinstance(members["next"], PointerRef)
        assert members["owner"] == ObjectRef("Point2")

    def test_given_missing_definition_when_structure_then_not_found(
        self, oracle: DefineSourceOracle
    ) -> None:
        with pytest.raises(OracleError) as exc_info:
            oracle.own_structure("Nowhere")
        assert exc_info.value.code == ErrorCode.ORACLE_DEFINITION_NOT_FOUND

    def test_given_definition_without_structure_when_read_then_unavailable(
        self, oracle: DefineSourceOracle
    ) -> None:
        with pytest.raises(OracleError) as exc_info:
            oracle.superclasses("Broken")
        assert exc_info.value.code == ErrorCode.ORACLE_STRUCTURE_UNAVAILABLE

    def test_given_definition_in_pruned_dir_when_searched_then_ignored(
        self, tmp_path: Path
    ) -> None:
        # Given
        hidden = tmp_path / ".git"
        hidden.mkdir()
        (hidden / "ghost__define.pro").write_text("pro ghost__define\n  s = { Ghost, a: 0 }\nend\n")
        oracle = DefineSourceOracle([tmp_path])

        # When / Then
        with pytest.raises(OracleError):
            oracle.own_structure("Ghost")


class TestEvaluate:
    """Member initializer evaluation."""

    @pytest.fixture
    def oracle(self) -> DefineSourceOracle:
        return DefineSourceOracle([])

    @pytest.mark.parametrize(
        ("expr", "dtype"),
        [
            ("5", np.int16),
            ("5B", np.uint8),
            ("5L", np.int32),
            ("5ull", np.uint64),
            ("1.5", np.float32),
            ("1.5d", np.float64),
            ("1d3", np.float64),
            ("2e-3", np.float32),
        ],
    )
    def test_given_number_literal_when_evaluated_then_typed(
        self, oracle: DefineSourceOracle, expr: str, dtype: type
    ) -> None:
        assert type(oracle.evaluate(expr)) is dtype

    def test_given_doubled_quote_when_evaluated_then_unescaped(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert oracle.evaluate("'it''s'") == "it's"

    def test_given_array_constructor_when_evaluated_then_numpy_order(
        self, oracle: DefineSourceOracle
    ) -> None:
        # Given / When
        value = oracle.evaluate("fltarr(3, 4)")

        # Then
        assert value.shape == (4, 3)
        assert value.dtype == np.float32
        assert type_description(value) == "fltarr(3, 4)"

    def test_given_literal_array_when_evaluated_then_vector(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert type_description(oracle.evaluate("[1L, 2L, 3L]")) == "[1L, 2L, 3L]"

    def test_given_anonymous_struct_when_evaluated_then_mapping(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert type_description(oracle.evaluate("{ a: 0L, b: 'x' }")) == "{ a: 0L, b: 'x' }"

    def test_given_replicated_struct_when_evaluated_then_replicate(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert type_description(oracle.evaluate("replicate({ a: 0B }, 3)")) == (
            "replicate({ a: 0B }, 3)"
        )

    def test_given_conversion_when_evaluated_then_converted(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert type_description(oracle.evaluate("long(3)")) == "3L"

    def test_given_system_variable_when_evaluated_then_value(
        self, oracle: DefineSourceOracle
    ) -> None:
        assert oracle.evaluate("!null") is None
        assert type(oracle.evaluate("!dpi")) is np.float64

    @pytest.mark.parametrize("expr", ["", "some_func(1)", "a + b", "lonarr(n)"])
    def test_given_unknown_expression_when_evaluated_then_none(
        self, oracle: DefineSourceOracle, expr: str
    ) -> None:
        assert oracle.evaluate(expr) is None
