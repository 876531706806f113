"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides small builders for documentation trees.
"""

import os
import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local docplane package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of docplane modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("docplane"):
        del sys.modules[module_name]

from docplane.config.models import DocPlaneConfig, DocsConfig  # noqa: E402
from docplane.core.logging import clear_run_id  # noqa: E402
from docplane.oracle.base import MappingOracle  # noqa: E402
from docplane.tree.builder import DocTreeBuilder  # noqa: E402
from docplane.tree.file import SourceFile  # noqa: E402
from docplane.tree.session import BuildSession  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep user config and DOCPLANE__ env vars out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("DOCPLANE__"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(
        "docplane.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global-config.yaml"
    )
    yield
    clear_run_id()


@pytest.fixture
def oracle() -> MappingOracle:
    return MappingOracle()


@pytest.fixture
def make_session(oracle: MappingOracle) -> Callable[..., BuildSession]:
    """Factory for sessions with docs settings overridden by keyword."""

    def _make(**docs: object) -> BuildSession:
        config = DocPlaneConfig(docs=DocsConfig(**docs))  # type: ignore[arg-type]
        return BuildSession(config=config, oracle=oracle)

    return _make


@pytest.fixture
def session(make_session: Callable[..., BuildSession]) -> BuildSession:
    return make_session()


@pytest.fixture
def parse_source(
    session: BuildSession, tmp_path: Path
) -> Callable[..., SourceFile]:
    """Write IDL source to a file and parse it into ``session``."""

    def _parse(text: str, name: str = "source.pro", *, location: str = "") -> SourceFile:
        directory = tmp_path / "src" / location
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(text)
        return DocTreeBuilder(session).parse_file(path, location)

    return _parse
