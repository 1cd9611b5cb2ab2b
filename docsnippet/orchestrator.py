"""Orchestrator walking the documentation tree and tallying snippet tests."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from docsnippet.doctree import Element
from docsnippet.models.result import ZERO, TestResult
from docsnippet.models.snippet import SnippetContext
from docsnippet.pipeline import SnippetPipeline
from docsnippet.reporter import Reporter

log = logging.getLogger(__name__)


def summary_line(result: TestResult) -> str:
    """Final tally in the form emitted at the end of a run."""
    return (
        f"Tests passed: {result.passed}, failed: {result.failed}, "
        f"skipped: {result.skipped}, errors: {result.errored}"
    )


@dataclass(frozen=True, kw_only=True)
class SnippetTestOrchestrator:
    """Runs the snippet tests of every element under the given roots."""

    __test__ = False

    pipeline: SnippetPipeline
    reporter: Reporter

    def run(self, roots: Sequence[Element]) -> TestResult:
        """Run all snippet tests under ``roots`` and emit the summary.

        Args:
            roots: Root elements of the documentation tree

        Returns:
            Combined result of every test snippet found

        """
        if not roots:
            log.info("No elements to document")

        result = TestResult.fold(self.handle_element(root) for root in roots)
        self.reporter.note(summary_line(result))
        return result

    def handle_element(self, element: Element) -> TestResult:
        """Evaluate an element's docstring, then recurse into its children."""
        result = ZERO
        if element.docstring:
            context = SnippetContext(element=element, reporter=self.reporter)
            result = result.reduce(self.pipeline.run_comment(context, element.docstring))

        for child in element.children:
            result = result.reduce(self.handle_element(child))
        return result
