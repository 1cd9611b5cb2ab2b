"""Bytecode compiler module."""

from docsnippet.compilers.bytecode.compiler import BytecodeCompiler
from docsnippet.compilers.bytecode.config import BytecodeCompilerConfig
from docsnippet.compilers.bytecode.manifest import bytecode_manifest

__all__ = ["BytecodeCompiler", "BytecodeCompilerConfig", "bytecode_manifest"]
