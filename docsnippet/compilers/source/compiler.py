"""Compiler binding that checks units and writes them out as source."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from docsnippet.compilers.base import CompilationResult, Compiler, format_syntax_error
from docsnippet.compilers.source.config import SourceCompilerConfig
from docsnippet.models.snippet import TestUnit

log = logging.getLogger(__name__)

SOURCE_SUFFIX = ".py"


@dataclass(frozen=True, kw_only=True)
class SourceCompiler(Compiler):
    """Syntax-checks units and writes ``<name>.py`` files.

    Tracebacks of failing snippets then point at a real file in the
    workspace, which helps when the workspace is kept for inspection.
    """

    config: SourceCompilerConfig

    @classmethod
    def from_config(cls, config: SourceCompilerConfig) -> "SourceCompiler":
        """Create the compiler from its configuration."""
        return cls(config=config)

    def compile(
        self,
        units: Sequence[TestUnit],
        classpath: Sequence[Path],
        output_dir: Path,
    ) -> CompilationResult:
        """Check every unit, writing nothing unless all of them compile."""
        diagnostics: list[str] = []
        for unit in units:
            artifact = output_dir / f"{unit.name}{SOURCE_SUFFIX}"
            try:
                compile(unit.source, str(artifact), "exec", dont_inherit=True)
            except (SyntaxError, ValueError) as exc:
                diagnostics.append(format_syntax_error(unit, exc))

        if diagnostics:
            return CompilationResult(diagnostics=diagnostics)

        artifacts: list[Path] = []
        for unit in units:
            artifact = output_dir / f"{unit.name}{SOURCE_SUFFIX}"
            artifact.write_text(unit.source, encoding=self.config.encoding)
            log.debug("Wrote %s", artifact)
            artifacts.append(artifact)

        return CompilationResult(artifacts=artifacts)
