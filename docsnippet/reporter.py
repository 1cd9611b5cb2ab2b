"""Diagnostic sinks for snippet test runs."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from docsnippet.doctree import Element


class Reporter(ABC):
    """Receives notes and per-element diagnostics from a run."""

    @abstractmethod
    def note(self, message: str) -> None:
        """Report progress or a summary."""

    @abstractmethod
    def error(self, element: Element | None, message: str, detail: str | None = None) -> None:
        """Report a problem with the snippet declared on ``element``.

        Args:
            element: Element that declared the snippet, if known
            message: One-line description
            detail: Traceback or compiler output

        """


@dataclass(frozen=True, kw_only=True)
class LoggingReporter(Reporter):
    """Reporter that writes through the ``logging`` module."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("docsnippet.report")
    )

    def note(self, message: str) -> None:
        self.logger.info("%s", message)

    def error(self, element: Element | None, message: str, detail: str | None = None) -> None:
        where = f"{element.qualified_name} ({element.location})" if element else "<unknown>"
        if detail:
            self.logger.error("%s %s\n%s", message, where, detail)
        else:
            self.logger.error("%s %s", message, where)
