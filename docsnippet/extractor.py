"""Extraction of fenced snippets and their attributes from docstrings."""

import logging
import re
import shlex
import textwrap
from collections.abc import Sequence

from docsnippet.models.snippet import Attribute, Snippet

log = logging.getLogger(__name__)

OPENING_FENCE = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})(?P<info>[^`]*)$")


def parse_attributes(info: str) -> Sequence[Attribute]:
    """Parse the info string of an opening fence into attributes.

    ```python test
    from docsnippet.extractor import parse_attributes
    from docsnippet.models.snippet import Attribute

    assert parse_attributes("test import=json,os") == (
        Attribute(name="test"),
        Attribute(name="import", values=("json,os",)),
    )
    ```
    """
    try:
        tokens = shlex.split(info)
    except ValueError as exc:
        log.warning("Malformed snippet attributes %r (%s), splitting on whitespace", info, exc)
        tokens = info.split()

    attributes: list[Attribute] = []
    for token in tokens:
        name, sep, value = token.partition("=")
        if not name:
            continue
        attributes.append(Attribute(name=name, values=(value,) if sep else ()))
    return tuple(attributes)


def extract_snippets(docstring: str | None) -> Sequence[Snippet]:
    """Return every fenced snippet in ``docstring``, test or not.

    A fence left open runs to the end of the docstring.
    """
    if not docstring:
        return ()

    lines = docstring.splitlines()
    snippets: list[Snippet] = []
    index = 0
    while index < len(lines):
        opening = OPENING_FENCE.match(lines[index])
        if opening is None:
            index += 1
            continue

        fence = opening.group("fence")
        closing = re.compile(rf"^[ \t]*{re.escape(fence[0])}{{{len(fence)},}}[ \t]*$")
        start = index + 1
        end = start
        while end < len(lines) and not closing.match(lines[end]):
            end += 1

        snippets.append(
            Snippet(
                body=textwrap.dedent("\n".join(lines[start:end])).strip("\n"),
                attributes=parse_attributes(opening.group("info")),
                lineno=index + 1,
            )
        )
        index = end + 1

    return tuple(snippets)


def extract_test_snippets(docstring: str | None) -> Sequence[Snippet]:
    """Return only the snippets marked with the ``test`` attribute."""
    return tuple(snippet for snippet in extract_snippets(docstring) if snippet.is_test)
