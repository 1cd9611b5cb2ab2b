"""Models for snippets found in docstrings and the units built from them."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docsnippet.doctree import Element
    from docsnippet.reporter import Reporter

TEST_MARKER = "test"
IMPORT_ATTRIBUTE = "import"
SKIP_ATTRIBUTE = "skip"


@dataclass(frozen=True, kw_only=True)
class Attribute:
    """A ``name`` or ``name=value`` token from a snippet's info string."""

    name: str
    values: Sequence[str] = ()


@dataclass(frozen=True, kw_only=True)
class Snippet:
    """A fenced code block extracted from a docstring."""

    body: str
    attributes: Sequence[Attribute] = ()
    lineno: int = 0

    @property
    def is_test(self) -> bool:
        """Whether the snippet carries the ``test`` marker."""
        return any(attribute.name == TEST_MARKER for attribute in self.attributes)

    @property
    def imports(self) -> Sequence[str]:
        """Import targets of every ``import`` attribute, in declaration order.

        Each value may list several targets separated by commas.
        """
        return tuple(
            target.strip()
            for attribute in self.attributes
            if attribute.name == IMPORT_ATTRIBUTE
            for value in attribute.values
            for target in value.split(",")
            if target.strip()
        )

    @property
    def skip_reason(self) -> str | None:
        """Reason given by a ``skip`` attribute, or None if there is none."""
        for attribute in self.attributes:
            if attribute.name == SKIP_ATTRIBUTE:
                return " ".join(attribute.values) or "skipped"
        return None


@dataclass(frozen=True, kw_only=True)
class TestUnit:
    """In-memory compilation unit synthesized for one test snippet."""

    __test__ = False

    name: str
    source: str


@dataclass(frozen=True, kw_only=True)
class SnippetContext:
    """Correlates a snippet evaluation with the element that declared it."""

    element: "Element"
    reporter: "Reporter"
