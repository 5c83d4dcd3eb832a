"""Shared fixtures for the unitkit test suite."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from unitkit.core.capabilities import Capabilities
from unitkit.core.contracts import UnitCore
from unitkit.core.models import UnitProps, create_unit_schema
from unitkit.core.schema import Schema
from unitkit.core.unit import Unit
from unitkit.core.validator import Validator, ValidatorConfig
from unitkit.materialization.engine import MaterializationEngine
from unitkit.units.definitions import NETWORK_UNIT_SOURCE, network_dependencies
from unitkit.units.network import NetworkUnit


# ---------------------------------------------------------------------------
# Minimal units
# ---------------------------------------------------------------------------

class CounterUnit(Unit):
    """Synchronous unit with mutable state, used to observe shared behavior."""

    def __init__(self, props: UnitProps, strict: bool = False) -> None:
        self.count = 0
        self._strict = strict
        super().__init__(props)

    @classmethod
    def create(cls, config: Mapping[str, Any] | None = None) -> CounterUnit:
        options = dict(config or {})
        props = UnitProps(
            dna=create_unit_schema(id=options.get("id", "counter"), version="0.1.0")
        )
        return cls(props, strict=bool(options.get("strict", False)))

    def build(self) -> UnitCore:
        capabilities = Capabilities.create(
            self.dna.id,
            {
                "increment": self.increment,
                "peek": self.peek,
                "reset": self.reset,
            },
        )
        schema = Schema.create(
            self.dna.id,
            {
                "increment": {
                    "name": "increment",
                    "description": "Add to the counter",
                    "parameters": {
                        "type": "object",
                        "properties": {
                            "by": {"type": "integer", "description": "Step"},
                        },
                        "required": ["by"],
                    },
                },
                "peek": {"name": "peek", "description": "Current value"},
                # "reset" is deliberately undocumented
            },
        )
        validator = Validator.create(
            ValidatorConfig(
                unit_id=self.dna.id,
                capabilities=capabilities,
                schema=schema,
                strict_mode=self._strict,
            )
        )
        return UnitCore(capabilities=capabilities, schema=schema, validator=validator)

    def increment(self, by: int) -> int:
        self.count += by
        return self.count

    def peek(self) -> int:
        return self.count

    def reset(self) -> None:
        self.count = 0


@pytest.fixture
def counter_factory() -> type[CounterUnit]:
    return CounterUnit


@pytest.fixture
def counter_unit() -> CounterUnit:
    return CounterUnit.create()


@pytest.fixture
def strict_counter_unit() -> CounterUnit:
    return CounterUnit.create({"id": "strict-counter", "strict": True})


# ---------------------------------------------------------------------------
# Network units
# ---------------------------------------------------------------------------

@pytest.fixture
def network_unit() -> NetworkUnit:
    return NetworkUnit.create({"baseUrl": "https://test.api.com"})


@pytest.fixture
def engine() -> MaterializationEngine:
    return MaterializationEngine()


@pytest.fixture
def materialized_network_type(engine: MaterializationEngine) -> Any:
    return engine.materialize(NETWORK_UNIT_SOURCE, network_dependencies())
