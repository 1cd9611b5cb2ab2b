"""Fixtures for integration tests."""

import textwrap
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

type WriteTreeFn = Callable[[Mapping[str, str]], Path]


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Directory that doubles as source path and classpath."""
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def write_tree(source_root: Path) -> WriteTreeFn:
    """Return a function that writes dedented files below the source root."""

    def _write(files: Mapping[str, str]) -> Path:
        for relative, content in files.items():
            path = source_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"))
        return source_root

    return _write
