"""Directories never searched for IDL sources.

Tier 0 (HARDCODED_DIRS): VCS internals and DocPlane's own data directory.
Tier 1 (DEFAULT_PRUNABLE_DIRS): caches and build outputs that may sit next
to IDL code in mixed-language trees.
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # DocPlane data
        ".docplane",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".tox",
        ".venv",
        "venv",
        "node_modules",
        ".idea",
        ".vscode",
        "build",
        "dist",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_prunable(dirname: str) -> bool:
    """True if a directory with this name is skipped during discovery."""
    return dirname in PRUNABLE_DIRS
