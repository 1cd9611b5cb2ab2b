"""Scratch directory that receives compiled snippet artifacts."""

import atexit
import logging
import shutil
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_PREFIX = "docsnippet-"


def delete_tree(path: Path) -> None:
    """Delete a directory tree, children before their parents.

    Failures are logged and deletion carries on with the remaining entries.
    """

    def _report(function: object, failed_path: str, exc: BaseException) -> None:
        log.warning("Could not delete %s: %s", failed_path, exc)

    shutil.rmtree(path, onexc=_report)


class Workspace:
    """Output directory for compiled units.

    The directory is created on first use. A directory created here is
    removed when the interpreter exits; a caller-supplied directory, or the
    working directory used when creation fails, is left alone.
    """

    def __init__(self, path: Path | None = None, *, prefix: str = DEFAULT_PREFIX):
        self._requested = path
        self._prefix = prefix
        self._path: Path | None = None
        self._owned = False

    @property
    def path(self) -> Path:
        """The workspace directory, acquiring it if needed."""
        return self.acquire()

    @property
    def owned(self) -> bool:
        """Whether release() will delete the directory."""
        return self._owned

    def acquire(self) -> Path:
        """Return the workspace directory, creating it on first call.

        When the directory cannot be created the working directory is used
        instead and a warning is logged.
        """
        if self._path is not None:
            return self._path

        if self._requested is not None:
            try:
                self._requested.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                return self._fall_back(exc)
            self._path = self._requested
            return self._path

        try:
            self._path = Path(tempfile.mkdtemp(prefix=self._prefix))
        except OSError as exc:
            return self._fall_back(exc)

        self._owned = True
        atexit.register(self.release)
        log.debug("Created workspace %s", self._path)
        return self._path

    def _fall_back(self, exc: OSError) -> Path:
        self._path = Path.cwd()
        log.warning(
            "Cannot create workspace directory (%s), writing to %s instead",
            exc,
            self._path,
        )
        return self._path

    def release(self) -> None:
        """Delete the workspace if this instance created it."""
        if not self._owned or self._path is None:
            return

        self._owned = False
        atexit.unregister(self.release)
        log.debug("Deleting workspace %s", self._path)
        delete_tree(self._path)
