"""Tests for reporters."""

import logging
from pathlib import Path

import pytest

from docsnippet.doctree import Element
from docsnippet.reporter import LoggingReporter


def test_note_logs_at_info(caplog: pytest.LogCaptureFixture) -> None:
    """Notes are informational."""
    with caplog.at_level(logging.INFO):
        LoggingReporter().note("Tests passed: 1, failed: 0, skipped: 0, errors: 0")

    assert caplog.records[-1].levelno == logging.INFO
    assert caplog.records[-1].name == "docsnippet.report"
    assert "Tests passed: 1" in caplog.text


def test_error_names_element_and_location(caplog: pytest.LogCaptureFixture) -> None:
    """Errors reference the owning element and include the detail."""
    module = Element(kind="module", name="acme.core", path=Path("acme/core.py"), lineno=1)
    func = module.add(Element(kind="function", name="run", path=Path("acme/core.py"), lineno=12))

    with caplog.at_level(logging.ERROR):
        LoggingReporter().error(func, "Failure in snippet test for:", "Traceback ...")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "Failure in snippet test for: acme.core.run (acme/core.py:12)" in caplog.text
    assert "Traceback ..." in caplog.text


def test_error_without_element(caplog: pytest.LogCaptureFixture) -> None:
    """Errors without an element still log."""
    with caplog.at_level(logging.ERROR):
        LoggingReporter(logger=logging.getLogger("custom")).error(None, "Oops")

    assert caplog.records[-1].name == "custom"
    assert "Oops <unknown>" in caplog.text
