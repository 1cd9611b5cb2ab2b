"""Compilation and execution of test snippets."""

import logging
import threading
import traceback
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from docsnippet.compilers.base import Compiler
from docsnippet.extractor import extract_test_snippets
from docsnippet.loader import ArtifactLoader, ArtifactNotFoundError, extended_sys_path
from docsnippet.models.outcome import Errored, Failed, Outcome, Passed
from docsnippet.models.result import ERROR, FAIL, PASS, SKIP, ZERO, TestResult
from docsnippet.models.snippet import Snippet, SnippetContext, TestUnit
from docsnippet.synthesizer import ENTRY_POINT, UnitSynthesizer
from docsnippet.workspace import Workspace

log = logging.getLogger(__name__)


def invoke(entry_point: Callable[[], object]) -> Outcome:
    """Call the entry point, classifying a raised exception as a failure.

    ``SystemExit`` counts as a failure too, so a snippet cannot end the
    run. ``KeyboardInterrupt`` propagates.
    """
    try:
        entry_point()
    except (Exception, SystemExit) as exc:
        return Failed(cause=exc)
    return Passed()


def run_entry_point(entry_point: Callable[[], object], timeout: float | None) -> Outcome:
    """Run the entry point, optionally under a watchdog.

    With a timeout the entry point runs on a daemon thread. A snippet that
    is still running when the timeout expires is abandoned and reported as
    an error; the thread cannot be stopped and dies with the interpreter.
    """
    if timeout is None:
        return invoke(entry_point)

    outcomes: list[Outcome] = []
    worker = threading.Thread(
        target=lambda: outcomes.append(invoke(entry_point)),
        name="docsnippet-watchdog",
        daemon=True,
    )
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        return Errored(
            stage="timeout", detail=f"Snippet did not complete within {timeout} seconds"
        )
    if not outcomes:
        return Errored(stage="invoke", detail="Snippet thread ended without an outcome")
    return outcomes[0]


@dataclass(frozen=True, kw_only=True)
class SnippetPipeline:
    """Takes test snippets from extraction through to a counted result."""

    compiler: Compiler
    workspace: Workspace
    classpath: Sequence[Path] = ()
    synthesizer: UnitSynthesizer = field(default_factory=UnitSynthesizer)
    timeout: float | None = None

    @property
    def loader(self) -> ArtifactLoader:
        """Loader over the classpath followed by the workspace."""
        return ArtifactLoader([*self.classpath, self.workspace.path])

    def run_comment(self, context: SnippetContext, docstring: str | None) -> TestResult:
        """Evaluate every test snippet in one docstring."""
        return TestResult.fold(
            self.run_snippet(context, snippet)
            for snippet in extract_test_snippets(docstring)
        )

    def run_snippet(self, context: SnippetContext, snippet: Snippet) -> TestResult:
        """Evaluate one test snippet and count its outcome."""
        if (reason := snippet.skip_reason) is not None:
            context.reporter.note(
                f"Skipping snippet test in {context.element.qualified_name}: {reason}"
            )
            return SKIP

        unit = self.synthesizer.synthesize(context.element, snippet)
        context.reporter.note(f"Running snippet test {unit.name}")
        try:
            return self.record(context, unit, self.evaluate(unit))
        finally:
            self.discard(unit)

    def evaluate(self, unit: TestUnit) -> Outcome:
        """Compile, load and execute one unit."""
        try:
            compilation = self.compiler.compile([unit], self.classpath, self.workspace.path)
        except OSError as exc:
            return Errored(
                stage="compile", detail=f"Cannot write artifacts for '{unit.name}': {exc}"
            )
        if not compilation.ok:
            return Errored(stage="compile", detail="\n".join(compilation.diagnostics))

        with extended_sys_path(self.classpath):
            try:
                module = self.loader.load(unit.name)
            except ArtifactNotFoundError as exc:
                return Errored(stage="load", detail=str(exc))
            except (Exception, SystemExit):
                return Errored(stage="load", detail=traceback.format_exc().rstrip())

            entry_point = getattr(module, ENTRY_POINT, None)
            if not callable(entry_point):
                return Errored(
                    stage="invoke",
                    detail=f"Unit '{unit.name}' has no callable '{ENTRY_POINT}'",
                )

            return run_entry_point(entry_point, self.timeout)

    def record(self, context: SnippetContext, unit: TestUnit, outcome: Outcome) -> TestResult:
        """Report the outcome and convert it into a result."""
        if isinstance(outcome, Passed):
            log.debug("Snippet test %s passed", unit.name)
            return PASS
        if isinstance(outcome, Failed):
            context.reporter.error(
                context.element, "Failure in snippet test for:", outcome.detail
            )
            return FAIL
        if isinstance(outcome, Errored):
            context.reporter.error(
                context.element,
                f"Snippet test {unit.name} could not run ({outcome.stage} error) for:",
                outcome.detail,
            )
            return ERROR
        return ZERO  # pragma: no cover

    def discard(self, unit: TestUnit) -> None:
        """Forget the loaded module and compiler state kept for ``unit``."""
        self.loader.unload(unit.name)
        self.compiler.discard(unit)
