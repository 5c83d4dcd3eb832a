"""Schema registry: pure storage of capability descriptors."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import pydantic

from .errors import UnitDefinitionError
from .models import SchemaDescriptor

if TYPE_CHECKING:
    from .contracts import TeachingContract

logger = logging.getLogger(__name__)


class Schema:
    """Ordered mapping of capability name to :class:`SchemaDescriptor`.

    Descriptors may be given as model instances or as plain dicts in the
    ``{"name", "description", "parameters": {...}}`` shape.
    """

    def __init__(
        self,
        owner_id: str,
        descriptors: Mapping[str, SchemaDescriptor | Mapping[str, Any]] | None = None,
    ) -> None:
        self._owner_id = owner_id
        self._descriptors: dict[str, SchemaDescriptor] = {}
        for name, descriptor in (descriptors or {}).items():
            self._descriptors[name] = _coerce(owner_id, name, descriptor)

    @classmethod
    def create(
        cls,
        owner_id: str,
        descriptors: Mapping[str, SchemaDescriptor | Mapping[str, Any]],
    ) -> Schema:
        return cls(owner_id, descriptors)

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def get(self, name: str) -> SchemaDescriptor | None:
        return self._descriptors.get(name)

    def has(self, name: str) -> bool:
        return name in self._descriptors

    def list(self) -> list[SchemaDescriptor]:
        """Descriptors in registration order."""
        return list(self._descriptors.values())

    def names(self) -> list[str]:
        return list(self._descriptors)

    def learn(self, contracts: Iterable[TeachingContract]) -> list[str]:
        """Merge taught descriptors under ``"<unit_id>.<name>"`` keys."""
        learned: list[str] = []
        for contract in contracts:
            for name in contract.schema.names():
                key = f"{contract.unit_id}.{name}"
                source = contract.schema.get(name)
                self._descriptors[key] = source.model_copy(update={"name": key})
                learned.append(key)
        if learned:
            logger.debug(
                "Unit %s learned %d schema entries", self._owner_id, len(learned)
            )
        return learned

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"Schema(owner={self._owner_id!r}, names={self.names()!r})"


def _coerce(
    owner_id: str,
    name: str,
    descriptor: SchemaDescriptor | Mapping[str, Any],
) -> SchemaDescriptor:
    if isinstance(descriptor, SchemaDescriptor):
        return descriptor
    try:
        return SchemaDescriptor.model_validate(dict(descriptor))
    except (pydantic.ValidationError, TypeError, ValueError) as exc:
        raise UnitDefinitionError(
            f"Schema entry '{name}' of unit '{owner_id}' is malformed: {exc}"
        ) from exc
