"""Compiler manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from docsnippet.compilers.base import Compiler


@dataclass(frozen=True, kw_only=True)
class CompilerManifest[ConfigT: BaseModel]:
    """Manifest describing a compiler plugin.

    The manifest pairs the configuration class with the factory that builds
    the compiler, so bindings are only constructed once selected by key.
    """

    config_cls: type[ConfigT]
    compiler_factory: Callable[[ConfigT], Compiler]
