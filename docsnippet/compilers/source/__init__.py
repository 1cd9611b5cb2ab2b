"""Source compiler module."""

from docsnippet.compilers.source.compiler import SourceCompiler
from docsnippet.compilers.source.config import SourceCompilerConfig
from docsnippet.compilers.source.manifest import source_manifest

__all__ = ["SourceCompiler", "SourceCompilerConfig", "source_manifest"]
