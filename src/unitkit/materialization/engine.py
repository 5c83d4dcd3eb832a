"""Materialization engine: turn unit definition text into a unit type.

A definition is Python source whose final statement is an expression that
evaluates to the unit type, e.g.::

    class MaterializedNetworkUnit(Unit):
        ...

    MaterializedNetworkUnit

The text runs in a fresh namespace containing exactly the supplied
dependency bindings plus a restricted builtins table.  Nothing from the
host module is reachable unless it is passed in ``dependencies``; a name
the text reads but nobody provides fails the call before execution.

Three entry points share that contract:

``materialize``
    Standard mode.
``materialize_secure``
    Adds the sandbox screen (no dunder attribute access, no reflective
    builtins) and evaluates inside a copied ``contextvars`` context.
``materialize_typed``
    Coroutine.  Runs the typed compile stage first; compile failures raise
    :class:`CompilationError`, evaluation failures
    :class:`MaterializationError`.

The engine keeps no state between calls.  Every call re-parses and
re-executes the text; nothing is cached.
"""

from __future__ import annotations

import ast
import contextvars
from typing import Any

from unitkit.core.config import MaterializationConfig
from unitkit.core.enums import MaterializationMode
from unitkit.core.errors import CompilationError, MaterializationError
from unitkit.core.ids import content_hash
from unitkit.core.interfaces import IMaterializedType
from unitkit.observability.logger import get_logger, materialization_scope

from .compiler import compile_typed
from .dependencies import DependencyBindings, normalize_dependencies
from .sandbox import builtin_names, restricted_globals, screen, unresolved_names

logger = get_logger(__name__)

_FILENAME = "<unit-definition>"


class MaterializationEngine:
    """Builds constructible unit types from definition text.

    Parameters
    ----------
    config:
        Builtin grants and compile-stage behaviour.  Defaults to
        :class:`MaterializationConfig` defaults.
    """

    def __init__(self, config: MaterializationConfig | None = None) -> None:
        self._config = config or MaterializationConfig()
        self._standard_builtins = builtin_names(
            secure=False, extra=self._config.extra_builtins
        )
        self._secure_builtins = builtin_names(secure=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def materialize(self, source: str, dependencies: DependencyBindings) -> Any:
        """Evaluate ``source`` with only ``dependencies`` in scope."""
        with materialization_scope():
            return self._materialize(source, dependencies, MaterializationMode.STANDARD)

    def materialize_secure(self, source: str, dependencies: DependencyBindings) -> Any:
        """Like :meth:`materialize`, under the sandbox screen."""
        with materialization_scope():
            return self._materialize(source, dependencies, MaterializationMode.SECURE)

    async def materialize_typed(
        self, source: str, dependencies: DependencyBindings
    ) -> Any:
        """Compile typed definition text, then materialize it."""
        with materialization_scope():
            try:
                lowered = await compile_typed(
                    source,
                    yield_first=self._config.typed_compile_yield,
                    filename=_FILENAME,
                )
            except CompilationError as exc:
                logger.warning(
                    "unit_compilation_failed", detail=exc.detail, lineno=exc.lineno
                )
                raise
            return self._materialize(lowered, dependencies, MaterializationMode.TYPED)

    async def materialize_with(
        self,
        mode: MaterializationMode | str,
        source: str,
        dependencies: DependencyBindings,
    ) -> Any:
        """Dispatch to the entry point for ``mode``."""
        mode = MaterializationMode(mode)
        if mode is MaterializationMode.TYPED:
            return await self.materialize_typed(source, dependencies)
        if mode is MaterializationMode.SECURE:
            return self.materialize_secure(source, dependencies)
        return self.materialize(source, dependencies)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _materialize(
        self,
        source: str,
        dependencies: DependencyBindings,
        mode: MaterializationMode,
    ) -> Any:
        try:
            bound = normalize_dependencies(dependencies, mode)
            unit_type = self._evaluate(source, bound, mode)
        except MaterializationError as exc:
            logger.warning(
                "unit_materialization_failed", mode=mode.value, detail=exc.detail
            )
            raise
        self._log_success(source, list(bound), mode, unit_type)
        return unit_type

    def _evaluate(
        self,
        source: str,
        bound: dict[str, Any],
        mode: MaterializationMode,
    ) -> Any:
        secure = mode is MaterializationMode.SECURE

        if not isinstance(source, str) or not source.strip():
            raise MaterializationError("definition text is empty", mode.value)
        try:
            tree = ast.parse(source, filename=_FILENAME, mode="exec")
        except SyntaxError as exc:
            raise MaterializationError(
                f"SyntaxError: {exc.msg} (line {exc.lineno})", mode.value
            ) from exc

        if not tree.body or not isinstance(tree.body[-1], ast.Expr):
            raise MaterializationError(
                "definition did not evaluate to a value; "
                "its last statement must be an expression",
                mode.value,
            )

        violations = screen(tree, secure)
        if violations:
            raise MaterializationError(
                "sandbox refused: " + "; ".join(str(v) for v in violations),
                mode.value,
            )

        allowed = self._secure_builtins if secure else self._standard_builtins
        try:
            missing = unresolved_names(source, set(bound) | allowed, _FILENAME)
            body = compile(
                ast.Module(body=tree.body[:-1], type_ignores=[]), _FILENAME, "exec"
            )
            result_expr = compile(
                ast.Expression(body=tree.body[-1].value), _FILENAME, "eval"
            )
        except SyntaxError as exc:
            raise MaterializationError(
                f"SyntaxError: {exc.msg} (line {exc.lineno})", mode.value
            ) from exc
        if missing:
            raise MaterializationError(
                "names not in the dependency list: " + ", ".join(missing),
                mode.value,
            )

        namespace = restricted_globals(bound, allowed)

        def run() -> Any:
            exec(body, namespace)
            return eval(result_expr, namespace)

        try:
            if secure:
                result = contextvars.copy_context().run(run)
            else:
                result = run()
        except Exception as exc:
            raise MaterializationError(
                f"{type(exc).__name__}: {exc}", mode.value
            ) from exc

        if result is None:
            raise MaterializationError(
                "definition did not evaluate to a value (got None)", mode.value
            )
        if not isinstance(result, IMaterializedType) or not callable(
            getattr(result, "create", None)
        ):
            raise MaterializationError(
                f"{_type_name(result)} does not expose a create() factory",
                mode.value,
            )
        return result

    def _log_success(
        self,
        source: str,
        dependency_names: list[str],
        mode: MaterializationMode,
        unit_type: Any,
    ) -> None:
        fields: dict[str, Any] = {
            "mode": mode.value,
            "type_name": _type_name(unit_type),
            "dependencies": dependency_names,
        }
        if self._config.log_source_digest:
            fields["source_digest"] = content_hash(source)
        logger.info("unit_materialized", **fields)


def _type_name(value: Any) -> str:
    return getattr(value, "__name__", None) or type(value).__name__
