"""Source compiler manifest."""

from docsnippet.compilers.manifest import CompilerManifest
from docsnippet.compilers.source.compiler import SourceCompiler
from docsnippet.compilers.source.config import SourceCompilerConfig

source_manifest = CompilerManifest(
    config_cls=SourceCompilerConfig,
    compiler_factory=SourceCompiler.from_config,
)
