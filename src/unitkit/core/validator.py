"""Argument validation against a unit's capability schema.

Arguments are matched to the descriptor's parameter shape and checked with
``jsonschema`` (Draft 2020-12).  Every violation is reported in one pass.

Validation is advisory: :meth:`Capabilities.execute` does not call it.  A
unit composes ``validate`` + ``execute`` at its external boundary and may
skip validation for trusted internal calls.

Modes
-----
permissive (``strict_mode=False``):
    Capabilities without a schema entry always validate ok.  Extra
    arguments are ignored.
strict (``strict_mode=True``):
    Capabilities without a schema entry raise
    :class:`UndocumentedCapabilityError`.  Extra positional arguments and
    unknown keyword keys are reported as issues.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import jsonschema

from .capabilities import Capabilities
from .enums import IssueCode
from .errors import UndocumentedCapabilityError, UnknownCapabilityError, ValidationError
from .models import SchemaDescriptor, ValidationIssue, ValidationResult
from .schema import Schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatorConfig:
    """Wiring for a :class:`Validator`.

    ``capabilities`` and ``schema`` are held by reference, so entries a
    unit learns later are visible to its validator.
    """

    unit_id: str
    capabilities: Capabilities
    schema: Schema
    strict_mode: bool = False


class Validator:
    """Checks invocation arguments against a unit's schema."""

    def __init__(self, config: ValidatorConfig) -> None:
        self._config = config

    @classmethod
    def create(cls, config: ValidatorConfig | Mapping[str, Any]) -> Validator:
        if not isinstance(config, ValidatorConfig):
            config = ValidatorConfig(**config)
        return cls(config)

    @property
    def unit_id(self) -> str:
        return self._config.unit_id

    @property
    def strict_mode(self) -> bool:
        return self._config.strict_mode

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(
        self,
        name: str,
        args: Sequence[Any] | Mapping[str, Any] = (),
    ) -> list[ValidationIssue]:
        """Return every issue found (empty = clean).

        Raises UnknownCapabilityError for names the registry does not hold
        and UndocumentedCapabilityError for schema gaps in strict mode.
        """
        if not self._config.capabilities.has(name):
            raise UnknownCapabilityError(
                self.unit_id, name, self._config.capabilities.list()
            )
        descriptor = self._config.schema.get(name)
        if descriptor is None:
            if self.strict_mode:
                raise UndocumentedCapabilityError(self.unit_id, name)
            logger.debug(
                "Capability %s.%s has no schema entry; skipping validation",
                self.unit_id,
                name,
            )
            return []
        return self._check_descriptor(descriptor, args)

    def validate(
        self,
        name: str,
        args: Sequence[Any] | Mapping[str, Any] = (),
    ) -> ValidationResult:
        """Validate or raise ValidationError carrying all issues."""
        issues = self.check(name, args)
        if issues:
            raise ValidationError(name, issues)
        return ValidationResult(capability=name, valid=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_descriptor(
        self,
        descriptor: SchemaDescriptor,
        args: Sequence[Any] | Mapping[str, Any],
    ) -> list[ValidationIssue]:
        shape = descriptor.parameters
        declared = list(shape.properties)
        issues: list[ValidationIssue] = []

        if isinstance(args, Mapping):
            supplied = dict(args)
            extras = [key for key in supplied if key not in shape.properties]
        else:
            values = list(args)
            supplied = dict(zip(declared, values))
            extras = [f"#{i}" for i in range(len(declared), len(values))]

        if extras and self.strict_mode:
            for extra in extras:
                issues.append(
                    ValidationIssue(
                        code=IssueCode.UNEXPECTED_ARGUMENT,
                        message=f"Unexpected argument {extra}",
                        field_path=extra,
                    )
                )

        # None counts as absent so required fields catch it
        instance = {
            key: value
            for key, value in supplied.items()
            if value is not None and key in shape.properties
        }
        issues.extend(self._json_schema_issues(instance, shape.to_json_schema()))
        return issues

    def _json_schema_issues(
        self,
        instance: dict[str, Any],
        json_schema: dict[str, Any],
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        reported_missing: set[str] = set()
        validator = jsonschema.Draft202012Validator(json_schema)
        for error in validator.iter_errors(instance):
            if error.validator == "required":
                for field in error.validator_value:
                    if field in instance or field in reported_missing:
                        continue
                    reported_missing.add(field)
                    issues.append(
                        ValidationIssue(
                            code=IssueCode.MISSING_REQUIRED,
                            message=f"Missing required argument '{field}'",
                            field_path=field,
                        )
                    )
            elif error.validator == "type":
                field = ".".join(str(p) for p in error.absolute_path)
                issues.append(
                    ValidationIssue(
                        code=IssueCode.TYPE_MISMATCH,
                        message=(
                            f"Argument '{field}' expected {error.validator_value}, "
                            f"got {type(error.instance).__name__}"
                        ),
                        field_path=field,
                        expected=error.validator_value,
                        actual=error.instance
                        if not isinstance(error.instance, (dict, list))
                        else f"<{type(error.instance).__name__}>",
                    )
                )
            else:
                logger.debug("Ignoring schema keyword %s", error.validator)
        return issues
