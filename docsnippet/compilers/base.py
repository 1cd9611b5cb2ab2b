"""Abstract base class for compiler bindings."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from docsnippet.models.snippet import TestUnit


@dataclass(frozen=True, kw_only=True)
class CompilationResult:
    """Artifacts written by a compiler, or the diagnostics that stopped it."""

    artifacts: Sequence[Path] = ()
    diagnostics: Sequence[str] = ()

    @property
    def ok(self) -> bool:
        """True when the compiler reported no diagnostics."""
        return not self.diagnostics


@dataclass(frozen=True, kw_only=True)
class Compiler(ABC):
    """Abstract base for bindings that turn test units into loadable artifacts.

    An artifact for unit ``name`` must be written as ``name.pyc`` or
    ``name.py`` directly under the output directory so that the artifact
    loader can find it.
    """

    @abstractmethod
    def compile(
        self,
        units: Sequence[TestUnit],
        classpath: Sequence[Path],
        output_dir: Path,
    ) -> CompilationResult:
        """Compile units held in memory into ``output_dir``.

        Args:
            units: Synthesized units to compile
            classpath: Directories holding the code the units import
            output_dir: Directory that receives the artifacts

        Returns:
            Written artifacts, or diagnostics if any unit failed to compile

        """

    def discard(self, unit: TestUnit) -> None:
        """Release state kept for ``unit`` once its outcome is recorded."""


def format_syntax_error(unit: TestUnit, exc: SyntaxError | ValueError) -> str:
    """Render a compile error as a one-line diagnostic for ``unit``."""
    if isinstance(exc, SyntaxError):
        return f"{unit.name}:{exc.lineno or 0}: {exc.msg}"
    return f"{unit.name}: {exc}"
