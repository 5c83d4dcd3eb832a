"""Dependency bindings: the only names a unit definition may reference."""

from __future__ import annotations

import asyncio
import keyword
from collections.abc import Mapping, Sequence
from typing import Any, Union

from unitkit.core.capabilities import Capabilities
from unitkit.core.contracts import TeachingContract, UnitCore
from unitkit.core.enums import MaterializationMode
from unitkit.core.errors import MaterializationError
from unitkit.core.ids import utc_now
from unitkit.core.models import UnitProps, create_unit_schema
from unitkit.core.schema import Schema
from unitkit.core.unit import Unit
from unitkit.core.validator import Validator, ValidatorConfig
from unitkit.observability.logger import get_logger

DependencyBindings = Union[Sequence[tuple[str, Any]], Mapping[str, Any]]


def normalize_dependencies(
    dependencies: DependencyBindings,
    mode: MaterializationMode = MaterializationMode.STANDARD,
) -> dict[str, Any]:
    """Turn bindings into an ordered ``{name: value}`` dict.

    Raises MaterializationError for names that are not identifiers, are
    keywords or dunders, or are bound more than once.
    """
    if isinstance(dependencies, Mapping):
        pairs = list(dependencies.items())
    else:
        pairs = []
        for entry in dependencies:
            if not isinstance(entry, (tuple, list)) or len(entry) != 2:
                raise MaterializationError(
                    f"Dependency binding {entry!r} is not a (name, value) pair",
                    mode.value,
                )
            pairs.append((entry[0], entry[1]))

    bound: dict[str, Any] = {}
    for name, value in pairs:
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise MaterializationError(
                f"Dependency name {name!r} is not a valid identifier", mode.value
            )
        if name.startswith("__") and name.endswith("__"):
            raise MaterializationError(
                f"Dependency name {name!r} is reserved", mode.value
            )
        if name in bound:
            raise MaterializationError(
                f"Dependency {name!r} is bound more than once", mode.value
            )
        bound[name] = value
    return bound


def default_dependencies(**extra: Any) -> list[tuple[str, Any]]:
    """Standard scaffolding a unit definition needs to build a unit.

    Grants no I/O: time is exposed as ``utc_now`` and latency as the
    event-loop ``sleep``.  ``extra`` bindings are appended after the
    defaults.
    """
    bindings: list[tuple[str, Any]] = [
        ("Unit", Unit),
        ("UnitProps", UnitProps),
        ("UnitCore", UnitCore),
        ("TeachingContract", TeachingContract),
        ("create_unit_schema", create_unit_schema),
        ("Capabilities", Capabilities),
        ("Schema", Schema),
        ("Validator", Validator),
        ("ValidatorConfig", ValidatorConfig),
        ("sleep", asyncio.sleep),
        ("utc_now", utc_now),
        ("logger", get_logger("unitkit.materialized")),
    ]
    bindings.extend(extra.items())
    return bindings
