"""Shared fixtures."""

import sys
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

TEMP_ROOTS = {Path(tempfile.gettempdir()), Path(tempfile.gettempdir()).resolve()}


def _is_generated(module: object) -> bool:
    file = getattr(module, "__file__", None)
    if file is None:
        return getattr(module, "__path__", None) is not None
    return any(Path(file).is_relative_to(root) for root in TEMP_ROOTS)


@pytest.fixture(autouse=True)
def isolated_modules() -> Iterator[None]:
    """Forget packages and units generated by a test so they never leak."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        if _is_generated(sys.modules[name]):
            del sys.modules[name]
