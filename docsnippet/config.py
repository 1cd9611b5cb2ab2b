"""Run configuration read from the environment and command line."""

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import Field

from docsnippet.models.base import Model

CLASSPATH_ENV = "DOCSNIPPET_CLASSPATH"


def parse_path_list(value: str | None) -> Sequence[Path]:
    """Split an ``os.pathsep`` separated list, dropping empty entries."""
    if not value:
        return ()
    return tuple(Path(entry) for entry in value.split(os.pathsep) if entry.strip())


class RunConfig(Model):
    """Settings for one snippet test run."""

    sourcepath: Sequence[Path] = Field(
        default=(Path("."),), description="Directories holding documented sources"
    )
    classpath: Sequence[Path] = Field(
        default=(), description="Directories holding the code snippets run against"
    )
    workspace: Path | None = Field(
        default=None, description="Output directory (a temporary one if unset)"
    )
    timeout: float | None = Field(
        default=None, gt=0, description="Seconds a snippet may run before it errors"
    )

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> "RunConfig":
        """Build the configuration from the environment plus explicit overrides.

        Overrides set to None are ignored. When no classpath is given either
        way, the source path doubles as the classpath.
        """
        environ = os.environ if environ is None else environ
        values = {key: value for key, value in overrides.items() if value is not None}
        if "classpath" not in values:
            values["classpath"] = parse_path_list(environ.get(CLASSPATH_ENV))
        if not values["classpath"]:
            values["classpath"] = values.get("sourcepath", (Path("."),))
        return cls(**values)
