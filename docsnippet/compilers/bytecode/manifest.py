"""Bytecode compiler manifest."""

from docsnippet.compilers.bytecode.compiler import BytecodeCompiler
from docsnippet.compilers.bytecode.config import BytecodeCompilerConfig
from docsnippet.compilers.manifest import CompilerManifest

bytecode_manifest = CompilerManifest(
    config_cls=BytecodeCompilerConfig,
    compiler_factory=BytecodeCompiler.from_config,
)
