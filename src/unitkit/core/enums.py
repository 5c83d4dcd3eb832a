"""Enumerations used across the unit runtime."""

from enum import Enum


class UnitState(str, Enum):
    UNBUILT = "unbuilt"
    READY = "ready"


class JsonType(str, Enum):
    """JSON Schema primitive type names accepted in parameter shapes."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"
    ANY = "any"  # No type constraint


class MaterializationMode(str, Enum):
    STANDARD = "standard"
    SECURE = "secure"
    TYPED = "typed"


class IssueCode(str, Enum):
    """Machine-readable codes carried by validation issues."""

    MISSING_REQUIRED = "missing_required"
    TYPE_MISMATCH = "type_mismatch"
    UNEXPECTED_ARGUMENT = "unexpected_argument"
