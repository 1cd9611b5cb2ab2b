"""Models for the outcome of evaluating one snippet."""

import traceback
from dataclasses import dataclass
from typing import Literal

type ErrorStage = Literal["compile", "load", "invoke", "timeout"]


@dataclass(frozen=True, kw_only=True)
class Passed:
    """The entry point returned normally."""


@dataclass(frozen=True, kw_only=True)
class Failed:
    """The snippet body raised."""

    cause: BaseException

    @property
    def detail(self) -> str:
        """Formatted traceback of the cause."""
        return "".join(traceback.format_exception(self.cause)).rstrip()


@dataclass(frozen=True, kw_only=True)
class Errored:
    """The snippet could not be evaluated at all.

    Compilation diagnostics, missing artifacts, a missing entry point and
    a watchdog timeout all end up here, tagged by the stage that broke.
    """

    stage: ErrorStage
    detail: str


type Outcome = Passed | Failed | Errored
