"""Compiler binding that writes sourceless bytecode artifacts."""

import importlib.util
import linecache
import logging
import marshal
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from types import CodeType

from docsnippet.compilers.base import CompilationResult, Compiler, format_syntax_error
from docsnippet.compilers.bytecode.config import BytecodeCompilerConfig
from docsnippet.models.snippet import TestUnit

log = logging.getLogger(__name__)

BYTECODE_SUFFIX = ".pyc"


def snippet_filename(unit: TestUnit) -> str:
    """Pseudo filename recorded in a unit's code objects and tracebacks."""
    return f"<snippet {unit.name}>"


def pyc_bytes(code: CodeType, source: bytes) -> bytes:
    """Serialize ``code`` as a timestamp-based pyc with a zero mtime."""
    data = bytearray(importlib.util.MAGIC_NUMBER)
    data.extend((0).to_bytes(4, "little"))
    data.extend((0).to_bytes(4, "little"))
    data.extend((len(source) & 0xFFFFFFFF).to_bytes(4, "little"))
    data.extend(marshal.dumps(code))
    return bytes(data)


@dataclass(frozen=True, kw_only=True)
class BytecodeCompiler(Compiler):
    """Compiles units in memory and writes ``<name>.pyc`` files.

    Python resolves imports when the unit runs, so the classpath is not
    consulted here.
    """

    config: BytecodeCompilerConfig

    @classmethod
    def from_config(cls, config: BytecodeCompilerConfig) -> "BytecodeCompiler":
        """Create the compiler from its configuration."""
        return cls(config=config)

    def compile(
        self,
        units: Sequence[TestUnit],
        classpath: Sequence[Path],
        output_dir: Path,
    ) -> CompilationResult:
        """Compile every unit, writing nothing unless all of them compile."""
        compiled: list[tuple[TestUnit, CodeType]] = []
        diagnostics: list[str] = []
        for unit in units:
            try:
                code = compile(
                    unit.source,
                    snippet_filename(unit),
                    "exec",
                    dont_inherit=True,
                    optimize=self.config.optimize,
                )
            except (SyntaxError, ValueError) as exc:
                diagnostics.append(format_syntax_error(unit, exc))
                continue
            compiled.append((unit, code))

        if diagnostics:
            return CompilationResult(diagnostics=diagnostics)

        artifacts: list[Path] = []
        for unit, code in compiled:
            artifact = output_dir / f"{unit.name}{BYTECODE_SUFFIX}"
            artifact.write_bytes(pyc_bytes(code, unit.source.encode()))
            linecache.cache[snippet_filename(unit)] = (
                len(unit.source),
                None,
                unit.source.splitlines(keepends=True),
                snippet_filename(unit),
            )
            log.debug("Wrote %s", artifact)
            artifacts.append(artifact)

        return CompilationResult(artifacts=artifacts)

    def discard(self, unit: TestUnit) -> None:
        """Drop the source registered for tracebacks of ``unit``."""
        linecache.cache.pop(snippet_filename(unit), None)
