"""Source discovery: find the IDL files under a root directory."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from docplane.core.errors import ConfigError
from docplane.core.excludes import is_prunable
from docplane.core.logging import get_logger

log = get_logger("discovery")


@dataclass(frozen=True, slots=True)
class SourcePath:
    """An absolute source path tagged with its root-relative directory."""

    path: Path
    directory: str

    @classmethod
    def from_root(cls, root: Path, path: Path) -> SourcePath:
        relative = path.parent.relative_to(root).as_posix()
        return cls(path=path, directory="" if relative == "." else relative)


def discover_sources(root: Path | str, suffixes: Iterable[str] = (".pro",)) -> list[SourcePath]:
    """Walk ``root`` and return its source files, sorted and deduplicated.

    Raises:
        ConfigError: If ``root`` does not exist or is not a readable directory.
    """
    root = Path(root).expanduser()
    if not root.is_dir() or not os.access(root, os.R_OK | os.X_OK):
        raise ConfigError.file_not_found(str(root))
    root = root.resolve()
    wanted = tuple(suffix.lower() for suffix in suffixes)

    found: dict[Path, SourcePath] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_prunable(d))
        for filename in filenames:
            if not filename.lower().endswith(wanted):
                continue
            path = (Path(dirpath) / filename).resolve()
            if path.is_file() and path not in found:
                found[path] = SourcePath.from_root(root, Path(dirpath) / filename)

    sources = sorted(found.values(), key=lambda s: (s.directory, s.path.name.lower()))
    log.debug("sources_discovered", root=str(root), count=len(sources))
    return sources
