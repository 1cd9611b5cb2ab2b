"""Documentation tree of packages, modules, classes and functions.

The tree is built from source with ``ast``; nothing under test is imported
while it is walked.
"""

import ast
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

log = logging.getLogger(__name__)

type ElementKind = Literal["package", "module", "class", "function", "method"]

NAMESPACE_KINDS: frozenset[ElementKind] = frozenset({"package", "module"})
PACKAGE_INIT = "__init__.py"


class ElementNotFoundError(LookupError):
    """Raised when a package or module name cannot be found on the source path."""


@dataclass(kw_only=True, eq=False)
class Element:
    """A documented program element.

    Root elements carry their dotted name; every other element carries its
    simple name and reaches the rest through ``enclosing``.
    """

    kind: ElementKind
    name: str
    docstring: str | None = None
    path: Path | None = None
    lineno: int = 0
    enclosing: "Element | None" = field(default=None, repr=False)
    children: list["Element"] = field(default_factory=list, repr=False)

    @property
    def qualified_name(self) -> str:
        """Dotted name from the outermost element down to this one."""
        if self.enclosing is None:
            return self.name
        return f"{self.enclosing.qualified_name}.{self.name}"

    @property
    def module_name(self) -> str | None:
        """Dotted name of the module or package this element lives in."""
        for element in self.lineage():
            if element.kind in NAMESPACE_KINDS:
                return element.qualified_name
        return None

    @property
    def location(self) -> str:
        """``path:lineno`` of the element's definition, when known."""
        if self.path is None:
            return self.qualified_name
        return f"{self.path}:{self.lineno}"

    def lineage(self) -> Iterator["Element"]:
        """Yield this element and then each enclosing element, innermost first."""
        current: Element | None = self
        while current is not None:
            yield current
            current = current.enclosing

    def add(self, child: "Element") -> "Element":
        """Attach ``child`` to this element and return it."""
        child.enclosing = self
        self.children.append(child)
        return child

    def walk(self) -> Iterator["Element"]:
        """Yield this element and every descendant, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()


def load_elements(sourcepath: Sequence[Path], names: Sequence[str]) -> Sequence[Element]:
    """Build root elements for the given dotted package or module names.

    Each name is looked up in the source path directories in order; the
    first directory that holds the package or module wins.

    Raises:
        ElementNotFoundError: If a name is found in no directory

    """
    return [load_element(sourcepath, name) for name in names]


def is_package_dir(path: Path) -> bool:
    """Whether ``path`` is a regular package or a namespace package with modules."""
    if not path.is_dir():
        return False
    return (path / PACKAGE_INIT).is_file() or any(path.glob("*.py"))


def load_element(sourcepath: Sequence[Path], name: str) -> Element:
    """Build the root element for one dotted package or module name."""
    for directory in sourcepath:
        base = directory.joinpath(*name.split("."))
        if is_package_dir(base):
            return load_package(base, name)
        module_path = base.with_name(base.name + ".py")
        if module_path.is_file():
            return load_module(module_path, name)

    searched = ", ".join(str(directory) for directory in sourcepath)
    raise ElementNotFoundError(f"'{name}' not found in: {searched}")


def load_package(directory: Path, name: str) -> Element:
    """Build a package element with its definitions, modules and subpackages.

    Namespace packages have no ``__init__.py`` and so no docstring or
    definitions of their own.
    """
    init_path = directory / PACKAGE_INIT
    tree = _parse(init_path) if init_path.is_file() else None
    package = Element(
        kind="package",
        name=name,
        docstring=ast.get_docstring(tree) if tree else None,
        path=init_path if init_path.is_file() else directory,
        lineno=1,
    )
    if tree is not None:
        _add_definitions(package, tree.body, init_path, in_class=False)

    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if is_package_dir(entry):
            package.add(load_package(entry, entry.name))
        elif entry.suffix == ".py" and entry.name != PACKAGE_INIT:
            package.add(load_module(entry, entry.stem))

    return package


def load_module(path: Path, name: str) -> Element:
    """Build a module element with its top-level definitions."""
    tree = _parse(path)
    module = Element(
        kind="module",
        name=name,
        docstring=ast.get_docstring(tree) if tree else None,
        path=path,
        lineno=1,
    )
    if tree is not None:
        _add_definitions(module, tree.body, path, in_class=False)
    return module


def _parse(path: Path) -> ast.Module | None:
    try:
        return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except (SyntaxError, UnicodeDecodeError) as exc:
        log.warning("Skipping %s, cannot parse it: %s", path, exc)
        return None


def _add_definitions(
    parent: Element, body: Sequence[ast.stmt], path: Path, *, in_class: bool
) -> None:
    for node in body:
        if isinstance(node, ast.ClassDef):
            element = parent.add(
                Element(
                    kind="class",
                    name=node.name,
                    docstring=ast.get_docstring(node),
                    path=path,
                    lineno=node.lineno,
                )
            )
            _add_definitions(element, node.body, path, in_class=True)
        elif isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
            parent.add(
                Element(
                    kind="method" if in_class else "function",
                    name=node.name,
                    docstring=ast.get_docstring(node),
                    path=path,
                    lineno=node.lineno,
                )
            )
