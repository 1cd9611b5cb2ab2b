"""Builders for documentation trees used in tests."""

from docsnippet.doctree import Element, ElementKind


def element_chain(*links: tuple[ElementKind, str], docstring: str | None = None) -> Element:
    """Build nested elements from outermost to innermost and return the innermost.

    Only the innermost element receives ``docstring``.
    """
    current: Element | None = None
    for kind, name in links:
        child = Element(kind=kind, name=name, lineno=1)
        if current is not None:
            current.add(child)
        current = child
    if current is None:
        raise ValueError("element_chain() needs at least one link")
    current.docstring = docstring
    return current


def snippet_docstring(body: str, attributes: str = "python test") -> str:
    """Docstring holding a single fenced snippet."""
    return f"Example.\n\n```{attributes}\n{body}\n```\n"
