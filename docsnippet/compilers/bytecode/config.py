"""Configuration for the bytecode compiler."""

from typing import Literal

from pydantic import Field

from docsnippet.models.base import Model


class BytecodeCompilerConfig(Model):
    """Configuration for the bytecode compiler."""

    # 0 keeps assert statements, which snippets rely on to fail
    optimize: Literal[-1, 0, 1, 2] = Field(
        default=0, description="Optimization level passed to compile()"
    )
