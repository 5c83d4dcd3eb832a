"""Core data models for units.

- UnitSchema: the immutable (id, version) identity ("dna") of a unit
- UnitProps: base for a unit's construction-time properties
- PropertySpec / ParameterShape / SchemaDescriptor: capability metadata
- ValidationIssue / ValidationResult: validator output
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import IssueCode, JsonType
from .errors import UnitDefinitionError
from .ids import new_id as _uuid


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class UnitSchema(BaseModel):
    """Identity of a unit.  Used as the namespace for learned capabilities."""

    model_config = ConfigDict(frozen=True)

    id: str
    version: str


def create_unit_schema(id: str, version: str) -> UnitSchema:
    """Build a unit identity, rejecting blank ids and versions."""
    if not id or not id.strip():
        raise UnitDefinitionError("Unit id must be a non-empty string")
    if not version or not version.strip():
        raise UnitDefinitionError(f"Unit '{id}' requires a non-empty version")
    return UnitSchema(id=id, version=version)


class UnitProps(BaseModel):
    """Construction-time properties of a unit.

    Concrete units subclass this to add their own configuration fields.
    """

    model_config = ConfigDict(frozen=True)

    dna: UnitSchema


# ---------------------------------------------------------------------------
# Capability schema
# ---------------------------------------------------------------------------

class PropertySpec(BaseModel):
    """Type and description of a single capability parameter.

    ``type`` is one JSON type name or a union list such as
    ``["string", "null"]``.
    """

    type: JsonType | list[JsonType] = JsonType.ANY
    description: str = ""

    def json_type(self) -> str | list[str] | None:
        """JSON Schema ``type`` keyword value, or None when unconstrained."""
        if isinstance(self.type, list):
            if not self.type or JsonType.ANY in self.type:
                return None
            return [t.value for t in self.type]
        if self.type == JsonType.ANY:
            return None
        return self.type.value


class ParameterShape(BaseModel):
    """Parameters of a capability.

    ``properties`` is ordered: positional arguments are matched to
    properties in declaration order.
    """

    type: str = "object"
    properties: dict[str, PropertySpec] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema (Draft 2020-12) object schema."""
        properties: dict[str, Any] = {}
        for name, spec in self.properties.items():
            entry: dict[str, Any] = {}
            json_type = spec.json_type()
            if json_type is not None:
                entry["type"] = json_type
            if spec.description:
                entry["description"] = spec.description
            properties[name] = entry
        return {
            "type": "object",
            "properties": properties,
            "required": list(self.required),
        }


class SchemaDescriptor(BaseModel):
    """Metadata describing how to call one capability."""

    name: str
    description: str = ""
    parameters: ParameterShape = Field(default_factory=ParameterShape)


# ---------------------------------------------------------------------------
# Validation output
# ---------------------------------------------------------------------------

class ValidationIssue(BaseModel):
    """A single argument-shape violation."""

    issue_id: str = Field(default_factory=_uuid)
    code: IssueCode
    message: str
    field_path: str = ""
    expected: Any = None
    actual: Any = None


class ValidationResult(BaseModel):
    """Verdict for one ``validate()`` call."""

    capability: str
    valid: bool = True
    issues: list[ValidationIssue] = Field(default_factory=list)
