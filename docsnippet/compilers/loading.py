"""Discovery of compiler bindings published under an entry-point group."""

import logging
from collections.abc import Sequence
from importlib.metadata import entry_points
from typing import Any

from docsnippet.compilers.manifest import CompilerManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "docsnippet.compilers"
DEFAULT_COMPILER = "bytecode"


class CompilerNotFoundError(Exception):
    """Raised when no usable compiler is registered under a key."""


def available_compilers() -> Sequence[str]:
    """Sorted keys of every registered compiler binding."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_compiler_manifest(key: str) -> CompilerManifest[Any]:
    """Load a compiler manifest by key.

    Args:
        key: The compiler key as registered in pyproject.toml
             (e.g., "bytecode", "source")

    Returns:
        The compiler manifest instance

    Raises:
        CompilerNotFoundError: If no compiler is registered under ``key``, or
            the entry point does not resolve to a ``CompilerManifest``

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise CompilerNotFoundError(
            f"Compiler '{key}' not found. Available compilers: "
            f"{', '.join(available_compilers()) or 'none'} "
            f"(default: {DEFAULT_COMPILER})"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, CompilerManifest):
        raise CompilerNotFoundError(
            f"Compiler '{key}' ({entry.value}) is a {type(manifest).__name__}, "
            "not a CompilerManifest"
        )

    log.debug("Loaded compiler '%s' from %s", key, entry.value)
    return manifest
