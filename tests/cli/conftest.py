"""Fixtures for CLI tests: a small IDL source tree with two classes."""

from pathlib import Path

import pytest

SOURCES = {
    "util.pro": (
        ";+\n"
        "; Internal utility.\n"
        "; @private\n"
        ";-\n"
        "pro helper\n"
        "end\n"
    ),
    "lib/shape__define.pro": (
        ";+\n"
        "; Base of all shapes.\n"
        ";-\n"
        "pro shape__define\n"
        "  compile_opt strictarr\n"
        "  define = { Shape, color: 0L, name: '' }\n"
        "end\n"
    ),
    "lib/circle__define.pro": (
        "pro Circle::setProperty, RADIUS=radius, _EXTRA=e\n"
        "end\n"
        "\n"
        "pro Circle::getProperty, RADIUS=radius, AREA=area\n"
        "end\n"
        "\n"
        ";+\n"
        "; A circle.\n"
        "; @field radius distance from the center\n"
        "; @bugs area is approximate\n"
        ";-\n"
        "pro circle__define\n"
        "  compile_opt strictarr\n"
        "  define = { Circle, inherits Shape, $\n"
        "             radius: 0.0 }\n"
        "end\n"
    ),
}


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    root = tmp_path / "idl"
    for relative, text in SOURCES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return root
