"""Loading of compiled units from an ordered list of directories."""

import contextlib
import importlib.util
import logging
import sys
from collections.abc import Iterator, Sequence
from importlib.machinery import (
    BYTECODE_SUFFIXES,
    SOURCE_SUFFIXES,
    SourceFileLoader,
    SourcelessFileLoader,
)
from pathlib import Path
from types import ModuleType

log = logging.getLogger(__name__)

ARTIFACT_SUFFIXES: Sequence[str] = (*BYTECODE_SUFFIXES, *SOURCE_SUFFIXES)


class ArtifactNotFoundError(LookupError):
    """Raised when no directory on the search path holds the artifact."""


def artifact_paths(directory: Path, name: str) -> Sequence[Path]:
    """Candidate artifact files for ``name`` inside ``directory``."""
    stem = directory.joinpath(*name.split("."))
    return tuple(stem.with_name(stem.name + suffix) for suffix in ARTIFACT_SUFFIXES)


@contextlib.contextmanager
def extended_sys_path(paths: Sequence[Path]) -> Iterator[None]:
    """Temporarily put ``paths`` in front of ``sys.path``."""
    entries = [str(path) for path in paths]
    saved = list(sys.path)
    sys.path[:0] = entries
    importlib.invalidate_caches()
    try:
        yield
    finally:
        sys.path[:] = saved


class ArtifactLoader:
    """Resolves and loads artifacts by dotted name.

    Directories are searched in order, so an artifact in an earlier
    directory shadows one of the same name further down the list.
    """

    def __init__(self, search_path: Sequence[Path]):
        self.search_path: Sequence[Path] = tuple(search_path)

    def resolve(self, name: str) -> Path:
        """Return the first artifact file for ``name`` on the search path.

        Raises:
            ArtifactNotFoundError: If no directory holds a matching file

        """
        for directory in self.search_path:
            for candidate in artifact_paths(directory, name):
                if candidate.is_file():
                    return candidate

        raise self._not_found(name)

    def load(self, name: str) -> ModuleType:
        """Load ``name`` as a fresh module and execute its body.

        A candidate that cannot be read is logged and skipped in favour of
        the next directory. Exceptions raised by the module body propagate.
        """
        for directory in self.search_path:
            for candidate in artifact_paths(directory, name):
                if not candidate.is_file():
                    continue
                try:
                    return self._materialize(name, candidate)
                except OSError as exc:
                    log.warning("Cannot read artifact %s: %s", candidate, exc)

        raise self._not_found(name)

    def _not_found(self, name: str) -> ArtifactNotFoundError:
        searched = ", ".join(str(directory) for directory in self.search_path)
        return ArtifactNotFoundError(f"Artifact '{name}' not found in: {searched}")

    def _materialize(self, name: str, path: Path) -> ModuleType:
        loader: SourcelessFileLoader | SourceFileLoader
        if path.suffix in BYTECODE_SUFFIXES:
            loader = SourcelessFileLoader(name, str(path))
        else:
            loader = SourceFileLoader(name, str(path))

        spec = importlib.util.spec_from_file_location(name, path, loader=loader)
        if spec is None:  # pragma: no cover
            raise ArtifactNotFoundError(f"Cannot build a module spec for {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise
        log.debug("Loaded %s from %s", name, path)
        return module

    def unload(self, name: str) -> None:
        """Drop a loaded artifact from ``sys.modules``."""
        sys.modules.pop(name, None)
