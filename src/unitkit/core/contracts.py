"""Bundles exchanged between a unit and its registries or other units.

Ownership
---------
A unit exclusively owns the Capabilities / Schema / Validator triple it
builds.  A :class:`TeachingContract` exposes that triple *by reference*:
a unit that learns from a contract executes the teaching unit's live
implementations, so later changes to the teaching unit's state are visible to
the learner.  The contract itself is frozen; the learner merges it into
its own registries and never mutates the teaching unit's.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .capabilities import Capabilities
from .errors import UnitDefinitionError
from .schema import Schema
from .validator import Validator


@dataclass(frozen=True)
class UnitCore:
    """The registries a unit wires once in ``build()``."""

    capabilities: Capabilities
    schema: Schema
    validator: Validator

    @classmethod
    def coerce(cls, built: UnitCore | Mapping[str, Any], unit_id: str) -> UnitCore:
        """Accept a UnitCore or a ``{capabilities, schema, validator}`` dict."""
        if isinstance(built, UnitCore):
            core = built
        elif isinstance(built, Mapping):
            missing = {"capabilities", "schema", "validator"} - set(built)
            if missing:
                raise UnitDefinitionError(
                    f"build() of unit '{unit_id}' is missing: "
                    f"{', '.join(sorted(missing))}"
                )
            core = cls(
                capabilities=built["capabilities"],
                schema=built["schema"],
                validator=built["validator"],
            )
        else:
            raise UnitDefinitionError(
                f"build() of unit '{unit_id}' returned {type(built).__name__}, "
                "expected UnitCore"
            )
        if not isinstance(core.capabilities, Capabilities):
            raise UnitDefinitionError(f"Unit '{unit_id}' capabilities is not a Capabilities")
        if not isinstance(core.schema, Schema):
            raise UnitDefinitionError(f"Unit '{unit_id}' schema is not a Schema")
        if not isinstance(core.validator, Validator):
            raise UnitDefinitionError(f"Unit '{unit_id}' validator is not a Validator")
        return core


@dataclass(frozen=True)
class TeachingContract:
    """Read-only view of a unit's capability surface, handed to learners."""

    unit_id: str
    capabilities: Capabilities
    schema: Schema
    validator: Validator

    def summary(self) -> dict[str, Any]:
        """Return a summary for logging/UI."""
        return {
            "unit_id": self.unit_id,
            "capabilities": self.capabilities.list(),
            "documented": self.schema.names(),
            "strict": self.validator.strict_mode,
        }
