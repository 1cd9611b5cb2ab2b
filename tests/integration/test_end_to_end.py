"""End-to-end snippet test runs against real packages."""

import logging
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from docsnippet.compilers.bytecode import BytecodeCompiler, BytecodeCompilerConfig
from docsnippet.compilers.source import SourceCompiler, SourceCompilerConfig
from docsnippet.compilers.base import Compiler
from docsnippet.doctree import load_elements
from docsnippet.models.result import TestResult
from docsnippet.orchestrator import SnippetTestOrchestrator
from docsnippet.pipeline import SnippetPipeline
from docsnippet.reporter import LoggingReporter
from docsnippet.synthesizer import NamingRegistry, UnitSynthesizer
from docsnippet.workspace import Workspace

WriteTreeFn = Callable[[Mapping[str, str]], Path]

REPO_ROOT = Path(__file__).resolve().parents[2]


def _run(
    root: Path,
    names: list[str],
    workspace: Workspace,
    compiler: Compiler | None = None,
    registry: NamingRegistry | None = None,
) -> TestResult:
    pipeline = SnippetPipeline(
        compiler=compiler or BytecodeCompiler(config=BytecodeCompilerConfig()),
        workspace=workspace,
        classpath=(root,),
        synthesizer=UnitSynthesizer(registry),
    )
    orchestrator = SnippetTestOrchestrator(pipeline=pipeline, reporter=LoggingReporter())
    return orchestrator.run(load_elements([root], names))


def test_package_with_type_holding_passing_and_failing_snippets(
    write_tree: WriteTreeFn, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """One package, one class, two snippets: one pass and one fail."""
    root = write_tree(
        {
            "shapes/__init__.py": '''
                """Shapes."""
            ''',
            "shapes/square.py": '''
                """Squares."""


                class Square:
                    """A square.

                    ```python test
                    assert Square(3).area() == 9
                    ```

                    ```python test
                    assert Square(3).area() == 10, "wrong area"
                    ```
                    """

                    def __init__(self, side):
                        self.side = side

                    def area(self):
                        return self.side * self.side
            ''',
        }
    )

    with caplog.at_level(logging.INFO):
        result = _run(root, ["shapes"], Workspace(tmp_path / "ws"))

    assert result == TestResult(passed=1, failed=1, skipped=0)
    assert "Failure in snippet test for: shapes.square.Square" in caplog.text
    assert "wrong area" in caplog.text
    assert "Tests passed: 1, failed: 1, skipped: 0, errors: 0" in caplog.text


def test_import_attribute_and_wildcard_import(
    write_tree: WriteTreeFn, tmp_path: Path
) -> None:
    """Listed imports and the enclosing module's names are all available."""
    root = write_tree(
        {
            "inventory/__init__.py": "",
            "inventory/a.py": "VALUE_A = 1\n",
            "inventory/b.py": "VALUE_B = 2\n",
            "inventory/stock.py": '''
                """Stock.

                ```python test import=inventory.a,inventory.b
                assert inventory.a.VALUE_A + inventory.b.VALUE_B == total()
                ```
                """


                def total():
                    return 3
            ''',
        }
    )
    workspace = Workspace(tmp_path / "ws", prefix="unused-")

    compiler = SourceCompiler(config=SourceCompilerConfig())

    result = _run(root, ["inventory.stock"], workspace, compiler=compiler)

    assert result == TestResult(passed=1)
    source = (tmp_path / "ws" / "module_inventory_stock.py").read_text()
    prologue = source.split("def test():")[0]
    assert "from inventory.stock import *" in prologue
    assert "import inventory.a" in prologue
    assert "import inventory.b" in prologue


def test_non_test_snippets_are_not_counted(write_tree: WriteTreeFn, tmp_path: Path) -> None:
    """Illustrative snippets never run and never count."""
    root = write_tree(
        {
            "notes.py": '''
                """Notes.

                ```python
                raise RuntimeError("illustration only")
                ```
                """
            ''',
        }
    )

    assert _run(root, ["notes"], Workspace(tmp_path / "ws")) == TestResult()


def test_errors_and_skips_are_counted_separately(
    write_tree: WriteTreeFn, tmp_path: Path
) -> None:
    """Compile errors, load errors and skips land in their own buckets."""
    root = write_tree(
        {
            "mixed.py": '''
                """Mixed bag."""


                def broken():
                    """Does not compile.

                    ```test
                    def (:
                    ```
                    """


                def missing():
                    """Imports something absent.

                    ```test import=definitely_not_installed_pkg
                    pass
                    ```
                    """


                def later():
                    """Skipped.

                    ```test skip="needs a database"
                    connect()
                    ```
                    """
            ''',
        }
    )

    result = _run(root, ["mixed"], Workspace(tmp_path / "ws"))

    assert result == TestResult(skipped=1, errored=2)


def test_failure_does_not_stop_traversal(write_tree: WriteTreeFn, tmp_path: Path) -> None:
    """Snippets after a failing one still run."""
    root = write_tree(
        {
            "chain/__init__.py": '''
                """Chain.

                ```test
                raise ValueError("first")
                ```
                """
            ''',
            "chain/later.py": '''
                """Later.

                ```test
                assert True
                ```
                """
            ''',
        }
    )

    assert _run(root, ["chain"], Workspace(tmp_path / "ws")) == TestResult(passed=1, failed=1)


def test_shared_registry_disambiguates_across_roots(
    write_tree: WriteTreeFn, tmp_path: Path
) -> None:
    """Names stay unique across roots whose base names clash."""
    root = write_tree(
        {
            "alpha_beta.py": '"""Docs.\n\n```test\nassert True\n```\n"""\n',
            "alpha/__init__.py": "",
            "alpha/beta.py": '"""Docs.\n\n```test\nassert True\n```\n"""\n',
        }
    )
    registry = NamingRegistry()

    result = _run(
        root, ["alpha_beta", "alpha.beta"], Workspace(tmp_path / "ws"), registry=registry
    )

    assert result == TestResult(passed=2)
    assert registry.count("module_alpha_beta") == 2
    assert sorted(p.name for p in (tmp_path / "ws").glob("*.pyc")) == [
        "module_alpha_beta.pyc",
        "module_alpha_beta_1.pyc",
    ]


def test_workspace_creation_failure_falls_back(
    write_tree: WriteTreeFn,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The run completes, writing artifacts to the working directory."""
    root = write_tree({"fallback_mod.py": '"""Docs.\n\n```test\nassert 2 > 1\n```\n"""\n'})
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)

    def _fail(*args: object, **kwargs: object) -> str:
        raise OSError("no temporary directory")

    monkeypatch.setattr(tempfile, "mkdtemp", _fail)
    workspace = Workspace()

    result = _run(root, ["fallback_mod"], workspace)
    workspace.release()

    assert result == TestResult(passed=1)
    assert (cwd / "module_fallback_mod.pyc").exists()


def test_owned_workspace_is_removed_on_release(
    write_tree: WriteTreeFn, tmp_path: Path
) -> None:
    """A temporary workspace disappears once released."""
    root = write_tree({"cleanup_mod.py": '"""Docs.\n\n```test\nassert True\n```\n"""\n'})
    workspace = Workspace()

    _run(root, ["cleanup_mod"], workspace)
    path = workspace.path
    assert (path / "module_cleanup_mod.pyc").exists()

    workspace.release()

    assert not path.exists()


def test_own_docstring_snippets_pass(tmp_path: Path) -> None:
    """The snippets documenting this project itself all pass."""
    result = _run(REPO_ROOT, ["docsnippet"], Workspace(tmp_path / "ws"))

    assert result.failed == 0
    assert result.errored == 0
    assert result.passed >= 3
