"""Static screening and restricted builtins for unit definitions.

Two screens run before any definition text executes:

* **Free-name screen** (all modes): every name the source reads without
  binding it must be a declared dependency or an allowed builtin.  Scope
  resolution uses :mod:`symtable`, so the answer matches what the
  compiler will do.
* **Sandbox screen** (secure mode): rejects ``import``, ``global`` /
  ``nonlocal``, dunder attribute access and the attribute names that reach
  frames or format-string attribute traversal.

Import statements are rejected in every mode: no builtins table offered
here contains ``__import__``.
"""

from __future__ import annotations

import ast
import builtins
import symtable
from collections.abc import Iterable
from typing import Any

# Names any definition may use.  Pure, no ambient access.
SAFE_BUILTIN_NAMES: frozenset[str] = frozenset({
    "__build_class__",
    "abs", "all", "any", "bool", "bytes", "callable", "classmethod",
    "dict", "divmod", "enumerate", "filter", "float", "format", "frozenset",
    "hash", "int", "isinstance", "issubclass", "iter", "len", "list", "map",
    "max", "min", "next", "object", "property", "range", "repr", "reversed",
    "round", "set", "slice", "sorted", "staticmethod", "str", "sum", "super",
    "tuple", "zip",
    # Exceptions
    "ArithmeticError", "AssertionError", "AttributeError", "Exception",
    "IndexError", "KeyError", "LookupError", "NotImplementedError",
    "RuntimeError", "StopAsyncIteration", "StopIteration", "TypeError",
    "ValueError", "ZeroDivisionError",
    "NotImplemented", "Ellipsis",
})

# Added on top of SAFE_BUILTIN_NAMES outside secure mode.
STANDARD_EXTRA_NAMES: frozenset[str] = frozenset({
    "ascii", "bin", "chr", "delattr", "getattr", "hasattr", "hex", "id",
    "oct", "ord", "pow", "setattr", "type",
})

# Never available, whatever the configuration says.
DENIED_BUILTIN_NAMES: frozenset[str] = frozenset({
    "__import__", "breakpoint", "compile", "copyright", "credits", "eval",
    "exec", "exit", "globals", "help", "input", "license", "locals",
    "memoryview", "open", "print", "quit", "vars",
})

# Dunder attributes a secure definition may still touch.
ALLOWED_DUNDER_ATTRIBUTES: frozenset[str] = frozenset({
    "__init__", "__name__", "__qualname__", "__doc__",
})

# Attributes that reach frames/code or traverse attributes from strings.
DENIED_ATTRIBUTES: frozenset[str] = frozenset({
    "format", "format_map", "mro",
    "gi_frame", "gi_code", "cr_frame", "cr_code", "ag_frame", "ag_code",
    "f_globals", "f_locals", "f_builtins", "f_back", "tb_frame", "tb_next",
})

MODULE_NAME = "unitkit.materialized"


def builtin_names(secure: bool, extra: Iterable[str] = ()) -> frozenset[str]:
    """Builtin names granted to a definition in the given mode.

    ``extra`` names are honoured outside secure mode only.  Raises
    ValueError for names that are not builtins or are always denied.
    """
    names = set(SAFE_BUILTIN_NAMES)
    if secure:
        return frozenset(names)
    names |= STANDARD_EXTRA_NAMES
    for name in extra:
        if name in DENIED_BUILTIN_NAMES:
            raise ValueError(f"Builtin {name!r} cannot be granted to definitions")
        if not hasattr(builtins, name):
            raise ValueError(f"{name!r} is not a builtin")
        names.add(name)
    return frozenset(names)


def restricted_globals(
    dependencies: dict[str, Any],
    allowed_builtins: frozenset[str],
) -> dict[str, Any]:
    """Fresh global namespace: the dependencies plus restricted builtins."""
    namespace: dict[str, Any] = {
        "__builtins__": {name: getattr(builtins, name) for name in allowed_builtins},
        "__name__": MODULE_NAME,
    }
    namespace.update(dependencies)
    return namespace


# ---------------------------------------------------------------------------
# Free-name screen
# ---------------------------------------------------------------------------

def unresolved_names(
    source: str,
    available: Iterable[str],
    filename: str = "<unit-definition>",
) -> list[str]:
    """Names the source reads from global scope that nothing provides.

    ``available`` is the union of dependency names and builtin names.
    Raises SyntaxError if the source does not parse.
    """
    table = symtable.symtable(source, filename, "exec")
    bound: set[str] = set()
    referenced: list[str] = []

    for sym in table.get_symbols():
        if sym.is_assigned() or sym.is_imported() or sym.is_namespace():
            bound.add(sym.get_name())
        if sym.is_referenced():
            referenced.append(sym.get_name())

    for child in _walk_children(table):
        for sym in child.get_symbols():
            if not sym.is_global():
                continue
            if sym.is_declared_global() and sym.is_assigned():
                bound.add(sym.get_name())
            if sym.is_referenced():
                referenced.append(sym.get_name())

    provided = set(available) | bound | {"__name__"}
    missing: list[str] = []
    for name in referenced:
        if name not in provided and name not in missing:
            missing.append(name)
    return missing


def _walk_children(table: symtable.SymbolTable) -> Iterable[symtable.SymbolTable]:
    for child in table.get_children():
        yield child
        yield from _walk_children(child)


# ---------------------------------------------------------------------------
# Sandbox screen
# ---------------------------------------------------------------------------

class SandboxViolation:
    """One construct the secure screen refused."""

    __slots__ = ("lineno", "message")

    def __init__(self, lineno: int, message: str) -> None:
        self.lineno = lineno
        self.message = message

    def __str__(self) -> str:
        return f"line {self.lineno}: {self.message}"


class _SandboxScreen(ast.NodeVisitor):
    def __init__(self, secure: bool) -> None:
        self.secure = secure
        self.violations: list[SandboxViolation] = []

    def _flag(self, node: ast.AST, message: str) -> None:
        self.violations.append(SandboxViolation(getattr(node, "lineno", 0), message))

    def visit_Import(self, node: ast.Import) -> None:
        names = ", ".join(alias.name for alias in node.names)
        self._flag(node, f"import of {names} (module resolution is not available)")

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        self._flag(
            node, f"import from {node.module or '.'} (module resolution is not available)"
        )

    def visit_Global(self, node: ast.Global) -> None:
        if self.secure:
            self._flag(node, f"global statement for {', '.join(node.names)}")

    def visit_Nonlocal(self, node: ast.Nonlocal) -> None:
        if self.secure:
            self._flag(node, f"nonlocal statement for {', '.join(node.names)}")

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if self.secure:
            attr = node.attr
            if attr.startswith("__") and attr.endswith("__"):
                if attr not in ALLOWED_DUNDER_ATTRIBUTES:
                    self._flag(node, f"access to attribute {attr}")
            elif attr in DENIED_ATTRIBUTES:
                self._flag(node, f"access to attribute {attr}")
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        name = node.id
        if name.startswith("__") and name.endswith("__") and name != "__name__":
            self._flag(node, f"reference to reserved name {name}")


def screen(tree: ast.AST, secure: bool) -> list[SandboxViolation]:
    """Return every construct the sandbox refuses in ``tree``."""
    visitor = _SandboxScreen(secure)
    visitor.visit(tree)
    return visitor.violations
