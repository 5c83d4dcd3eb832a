"""Materialization: build invocable unit types from definition text.

Public API
----------
Engine:
    MaterializationEngine

Dependencies:
    DependencyBindings, default_dependencies, normalize_dependencies

Compile stage:
    compile_typed, strip_types, TypeStripper

Sandbox:
    SAFE_BUILTIN_NAMES, DENIED_BUILTIN_NAMES, screen, unresolved_names

Errors:
    MaterializationError, CompilationError
"""

from unitkit.core.errors import CompilationError, MaterializationError
from unitkit.materialization.compiler import TypeStripper, compile_typed, strip_types
from unitkit.materialization.dependencies import (
    DependencyBindings,
    default_dependencies,
    normalize_dependencies,
)
from unitkit.materialization.engine import MaterializationEngine
from unitkit.materialization.sandbox import (
    DENIED_BUILTIN_NAMES,
    SAFE_BUILTIN_NAMES,
    screen,
    unresolved_names,
)

__all__ = [
    "CompilationError",
    "DENIED_BUILTIN_NAMES",
    "DependencyBindings",
    "MaterializationEngine",
    "MaterializationError",
    "SAFE_BUILTIN_NAMES",
    "TypeStripper",
    "compile_typed",
    "default_dependencies",
    "normalize_dependencies",
    "screen",
    "strip_types",
    "unresolved_names",
]
