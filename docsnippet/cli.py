"""CLI entry point for docstring snippet tests."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from docsnippet.compilers.loading import (
    DEFAULT_COMPILER,
    CompilerNotFoundError,
    available_compilers,
    load_compiler_manifest,
)
from docsnippet.config import RunConfig, parse_path_list
from docsnippet.doctree import Element, ElementNotFoundError, load_element
from docsnippet.models.result import TestResult
from docsnippet.orchestrator import SnippetTestOrchestrator
from docsnippet.pipeline import SnippetPipeline
from docsnippet.reporter import LoggingReporter
from docsnippet.workspace import Workspace


def format_output(result: TestResult) -> dict[str, Any]:
    """Format the final tally for JSON output."""
    return {
        "total": result.total,
        "passed": result.passed,
        "failed": result.failed,
        "skipped": result.skipped,
        "errors": result.errored,
    }


def load_roots(sourcepath: Sequence[Path], names: Sequence[str]) -> Sequence[Element]:
    """Load root elements, skipping names that are not on the source path."""
    log = logging.getLogger("docsnippet")
    roots: list[Element] = []
    for name in names:
        try:
            roots.append(load_element(sourcepath, name))
        except ElementNotFoundError as exc:
            log.warning("%s", exc)
    return roots


def run(
    names: Sequence[str],
    config: RunConfig,
    compiler_key: str = DEFAULT_COMPILER,
    compiler_config_json: str = "{}",
    strict: bool = False,
) -> int:
    """Run snippet tests and return exit code.

    The run itself always completes; failures only change the exit code
    when ``strict`` is set.
    """
    log = logging.getLogger("docsnippet")

    log.info("Loading compiler: %s", compiler_key)
    manifest = load_compiler_manifest(compiler_key)
    compiler = manifest.compiler_factory(
        manifest.config_cls(**json.loads(compiler_config_json))
    )

    roots = load_roots(config.sourcepath, names)
    log.info("Running snippet tests for %d root element(s)...", len(roots))

    workspace = Workspace(config.workspace)
    pipeline = SnippetPipeline(
        compiler=compiler,
        workspace=workspace,
        classpath=config.classpath,
        timeout=config.timeout,
    )
    orchestrator = SnippetTestOrchestrator(pipeline=pipeline, reporter=LoggingReporter())
    try:
        result = orchestrator.run(roots)
    finally:
        workspace.release()

    print(json.dumps(format_output(result), indent=2))

    if strict and not result.successful:
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run test snippets embedded in docstrings"
    )
    parser.add_argument(
        "names",
        nargs="+",
        help="Dotted names of the packages or modules to test",
    )
    parser.add_argument(
        "--sourcepath",
        default=".",
        help="Directories holding the documented sources (os.pathsep separated)",
    )
    parser.add_argument(
        "--classpath",
        default=None,
        help="Directories snippets run against (defaults to $DOCSNIPPET_CLASSPATH, "
        "then to the source path)",
    )
    parser.add_argument(
        "--compiler",
        default=DEFAULT_COMPILER,
        help=f"Compiler key ({', '.join(available_compilers())})",
    )
    parser.add_argument(
        "--compiler-config",
        default="{}",
        help="JSON configuration for the compiler",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help="Keep compiled units in this directory instead of a temporary one",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds each snippet may run before it is reported as an error",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any snippet test fails or errors",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = RunConfig.from_environ(
            sourcepath=parse_path_list(args.sourcepath) or None,
            classpath=parse_path_list(args.classpath) or None,
            workspace=args.workspace,
            timeout=args.timeout,
        )
        exit_code = run(
            names=args.names,
            config=config,
            compiler_key=args.compiler,
            compiler_config_json=args.compiler_config,
            strict=args.strict,
        )
    except (ValidationError, json.JSONDecodeError, CompilerNotFoundError) as exc:
        parser.error(str(exc))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
