"""Configuration for the source compiler."""

from pydantic import Field

from docsnippet.models.base import Model


class SourceCompilerConfig(Model):
    """Configuration for the source compiler."""

    encoding: str = Field(default="utf-8", description="Encoding of written sources")
