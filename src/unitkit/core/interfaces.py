"""Protocol interfaces for the unit runtime.

Module boundaries are defined here as Protocol classes so natively written
units and materialized units are interchangeable to callers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from .capabilities import Capabilities
from .contracts import TeachingContract
from .schema import Schema
from .validator import Validator


# ---------------------------------------------------------------------------
# Unit
# ---------------------------------------------------------------------------

@runtime_checkable
class IUnit(Protocol):
    """Invocation surface every unit exposes."""

    def capabilities(self) -> Capabilities: ...

    def schema(self) -> Schema: ...

    def validator(self) -> Validator: ...

    def teach(self) -> TeachingContract: ...

    def learn(self, contracts: Iterable[TeachingContract]) -> list[str]: ...

    def whoami(self) -> str: ...


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------

@runtime_checkable
class IMaterializedType(Protocol):
    """What a unit definition must evaluate to: a type with ``create``."""

    def create(self, config: Mapping[str, Any] | None = None) -> IUnit: ...
