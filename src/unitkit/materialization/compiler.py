"""Typed compile stage: lower annotated definition text to plain Python.

The stage strips everything that only matters to a type checker so the
result can be screened and evaluated under a dependency binding that
names runtime values only:

- argument, return and variable annotations
- ``from __future__`` / ``typing`` / ``typing_extensions`` imports
- ``if TYPE_CHECKING:`` blocks
- ``typing.cast(T, value)`` calls (replaced by ``value``)
- ``type X = ...`` aliases

Failures here raise :class:`CompilationError`, never
:class:`MaterializationError`.
"""

from __future__ import annotations

import ast
import asyncio
import logging

from unitkit.core.errors import CompilationError

logger = logging.getLogger(__name__)

_TYPE_ONLY_MODULES = frozenset({"__future__", "typing", "typing_extensions"})


# Statement-list fields that must stay non-empty once they held code.
_BLOCK_FIELDS = ("body", "orelse", "finalbody")


class TypeStripper(ast.NodeTransformer):
    """Remove type-only constructs from a module AST.

    ``cast`` is unwrapped only where it resolves to ``typing.cast``: a bare
    name imported from a type-only module, or an attribute on such a
    module's import name.
    """

    def __init__(self) -> None:
        self.stripped = 0
        self._cast_names: set[str] = set()
        self._typing_modules: set[str] = set()

    def generic_visit(self, node: ast.AST) -> ast.AST:
        populated = [
            f for f in _BLOCK_FIELDS if isinstance(getattr(node, f, None), list) and getattr(node, f)
        ]
        super().generic_visit(node)
        if not isinstance(node, ast.Module):
            for field in populated:
                if not getattr(node, field):
                    setattr(node, field, [ast.Pass()])
        return node

    # --- Definitions -------------------------------------------------

    def _strip_arguments(self, args: ast.arguments) -> None:
        every = [*args.posonlyargs, *args.args, *args.kwonlyargs]
        if args.vararg is not None:
            every.append(args.vararg)
        if args.kwarg is not None:
            every.append(args.kwarg)
        for arg in every:
            if arg.annotation is not None:
                arg.annotation = None
                self.stripped += 1

    def visit_FunctionDef(self, node: ast.FunctionDef) -> ast.AST:
        self._strip_arguments(node.args)
        if node.returns is not None:
            node.returns = None
            self.stripped += 1
        if getattr(node, "type_params", None):
            node.type_params = []
        return self.generic_visit(node)

    visit_AsyncFunctionDef = visit_FunctionDef  # type: ignore[assignment]

    def visit_ClassDef(self, node: ast.ClassDef) -> ast.AST:
        if getattr(node, "type_params", None):
            node.type_params = []
        return self.generic_visit(node)

    # --- Statements --------------------------------------------------

    def visit_AnnAssign(self, node: ast.AnnAssign) -> ast.AST | None:
        self.stripped += 1
        if node.value is None:
            return None
        value = self.visit(node.value)
        return ast.copy_location(ast.Assign(targets=[node.target], value=value), node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> ast.AST | None:
        if node.module in _TYPE_ONLY_MODULES and node.level == 0:
            for alias in node.names:
                if alias.name == "cast":
                    self._cast_names.add(alias.asname or alias.name)
            self.stripped += 1
            return None
        return node

    def visit_Import(self, node: ast.Import) -> ast.AST | None:
        kept = []
        for alias in node.names:
            if alias.name in _TYPE_ONLY_MODULES:
                self._typing_modules.add(alias.asname or alias.name)
            else:
                kept.append(alias)
        if not kept:
            self.stripped += 1
            return None
        node.names = kept
        return node

    def visit_If(self, node: ast.If) -> ast.AST | list[ast.stmt] | None:
        test = node.test
        is_type_checking = (isinstance(test, ast.Name) and test.id == "TYPE_CHECKING") or (
            isinstance(test, ast.Attribute) and test.attr == "TYPE_CHECKING"
        )
        if is_type_checking:
            self.stripped += 1
            orelse: list[ast.stmt] = []
            for stmt in node.orelse:
                result = self.visit(stmt)
                if isinstance(result, list):
                    orelse.extend(result)
                elif result is not None:
                    orelse.append(result)
            return orelse or None
        return self.generic_visit(node)

    def visit_TypeAlias(self, node: ast.AST) -> None:
        self.stripped += 1
        return None

    # --- Expressions -------------------------------------------------

    def _is_typing_cast(self, func: ast.expr) -> bool:
        if isinstance(func, ast.Name):
            return func.id in self._cast_names
        return (
            isinstance(func, ast.Attribute)
            and func.attr == "cast"
            and isinstance(func.value, ast.Name)
            and func.value.id in self._typing_modules
        )

    def visit_Call(self, node: ast.Call) -> ast.AST:
        if self._is_typing_cast(node.func) and len(node.args) == 2 and not node.keywords:
            self.stripped += 1
            return self.visit(node.args[1])
        return self.generic_visit(node)


def strip_types(source: str, filename: str = "<unit-definition>") -> str:
    """Synchronously lower typed definition text to plain Python source."""
    try:
        tree = ast.parse(source, filename=filename, mode="exec")
    except SyntaxError as exc:
        raise CompilationError(exc.msg, exc.lineno) from exc

    stripper = TypeStripper()
    tree = stripper.visit(tree)
    if not tree.body:
        raise CompilationError("definition is empty after stripping type-only code")
    ast.fix_missing_locations(tree)

    lowered = ast.unparse(tree)
    try:
        compile(lowered, filename, "exec", dont_inherit=True)
    except SyntaxError as exc:
        raise CompilationError(exc.msg, exc.lineno) from exc

    logger.debug("Typed compile stripped %d type-only constructs", stripper.stripped)
    return lowered


async def compile_typed(
    source: str,
    *,
    yield_first: bool = True,
    filename: str = "<unit-definition>",
) -> str:
    """Asynchronous compile stage.

    Yields to the event loop once before compiling when ``yield_first``
    is set, so a pipeline of materializations interleaves with other
    work on the loop.
    """
    if yield_first:
        await asyncio.sleep(0)
    return strip_types(source, filename)
