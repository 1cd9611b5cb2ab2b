"""Synthesis of standalone test units from docstring snippets."""

import re
import textwrap
import threading
from collections.abc import Sequence

from docsnippet.doctree import Element
from docsnippet.models.snippet import Snippet, TestUnit

ENTRY_POINT = "test"
INDENT = "    "

_ILLEGAL_NAME_CHARS = re.compile(r"\W")


class NamingRegistry:
    """Hands out unit names that are unique for the lifetime of a run.

    The first registration of a base name returns it unchanged; later ones
    append ``_1``, ``_2`` and so on. A suffix already issued to another base
    name is passed over, so ``f`` registered twice and ``f_1`` once yield
    ``f``, ``f_1`` and ``f_1_1``.

    ```python test
    from docsnippet.synthesizer import NamingRegistry

    registry = NamingRegistry()
    assert registry.register("method_pkg_f") == "method_pkg_f"
    assert registry.register("method_pkg_f") == "method_pkg_f_1"
    assert registry.register("method_pkg_f_1") == "method_pkg_f_1_1"
    assert registry.register("method_pkg_f") == "method_pkg_f_2"
    ```
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._suffixes: dict[str, int] = {}
        self._issued: set[str] = set()
        self._lock = threading.Lock()

    def register(self, base_name: str) -> str:
        """Record one more use of ``base_name`` and return the name to emit."""
        with self._lock:
            self._counts[base_name] = self._counts.get(base_name, 0) + 1
            suffix = self._suffixes.get(base_name, 0)
            name = base_name if suffix == 0 else f"{base_name}_{suffix}"
            while name in self._issued:
                suffix += 1
                name = f"{base_name}_{suffix}"
            self._suffixes[base_name] = suffix + 1
            self._issued.add(name)
        return name

    def count(self, base_name: str) -> int:
        """Number of times ``base_name`` has been registered."""
        with self._lock:
            return self._counts.get(base_name, 0)


def normalize_segment(segment: str) -> str:
    """Replace every character that cannot appear in an identifier."""
    return _ILLEGAL_NAME_CHARS.sub("_", segment)


def base_unit_name(element: Element) -> str:
    """Unit name for ``element`` before collision suffixes are applied."""
    segments = [normalize_segment(e.name) for e in element.lineage()]
    return "_".join([element.kind, *reversed(segments)])


def import_directive(target: str) -> str:
    """Turn ``pkg.mod`` or ``pkg.mod:name`` into an import statement."""
    module, sep, name = target.partition(":")
    if sep:
        return f"from {module.strip()} import {name.strip()}"
    return f"import {module.strip()}"


def import_prologue(element: Element, imports: Sequence[str]) -> Sequence[str]:
    """Import statements placed ahead of a unit's entry point."""
    directives: list[str] = []
    if (module_name := element.module_name) is not None:
        directives.append(f"from {module_name} import *")
    directives.extend(import_directive(target) for target in imports)
    return directives


def unit_source(element: Element, snippet: Snippet) -> str:
    """Module source wrapping ``snippet`` in a parameterless entry point."""
    body = textwrap.indent(snippet.body, INDENT) if snippet.body.strip() else f"{INDENT}pass"
    prologue = "\n".join(import_prologue(element, snippet.imports))
    return f"{prologue}\n\n\ndef {ENTRY_POINT}():\n{body}\n"


class UnitSynthesizer:
    """Builds a uniquely named ``TestUnit`` for each test snippet."""

    def __init__(self, registry: NamingRegistry | None = None):
        self.registry = registry if registry is not None else NamingRegistry()

    def unit_name(self, element: Element) -> str:
        """Register and return the next unit name for ``element``."""
        return self.registry.register(base_unit_name(element))

    def synthesize(self, element: Element, snippet: Snippet) -> TestUnit:
        """Build the compilation unit for one snippet declared on ``element``."""
        return TestUnit(name=self.unit_name(element), source=unit_source(element, snippet))
