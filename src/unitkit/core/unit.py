"""Unit base class: a self-describing, capability-bearing entity.

Lifecycle
---------
``UNBUILT`` -> ``READY``.  ``Unit.__init__`` assigns identity, calls
``build()`` exactly once and stores the returned registries; the unit is
READY from then on.  Only ``build()`` may run while UNBUILT, and calling
``build()`` on a READY unit raises :class:`UnitStateError`.

Concrete units implement ``create(config)`` (a pure factory, no I/O) and
``build()``.  Everything else has a working default.
"""

from __future__ import annotations

import functools
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from .capabilities import Capabilities
from .contracts import TeachingContract, UnitCore
from .enums import UnitState
from .errors import UnitStateError
from .models import UnitProps, UnitSchema
from .schema import Schema
from .validator import Validator

logger = logging.getLogger(__name__)


def _guard_build(build: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a subclass ``build`` so it refuses to run on a READY unit."""

    @functools.wraps(build)
    def guarded(self: Unit) -> Any:
        if self._state is not UnitState.UNBUILT:
            raise UnitStateError(
                f"build() already ran for unit '{self.dna.id}'; "
                "registries are wired once at construction"
            )
        return build(self)

    guarded._build_guard = True  # type: ignore[attr-defined]
    return guarded


class Unit(ABC):
    """Abstract capability-bearing unit."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        build = cls.__dict__.get("build")
        if build is not None and not getattr(build, "_build_guard", False):
            cls.build = _guard_build(build)  # type: ignore[method-assign]

    def __init__(self, props: UnitProps) -> None:
        self._props = props
        self._state = UnitState.UNBUILT
        self._unit: UnitCore | None = None
        self._unit = UnitCore.coerce(self.build(), props.dna.id)
        self._state = UnitState.READY
        logger.debug(
            "Unit %s v%s ready with capabilities: %s",
            props.dna.id,
            props.dna.version,
            ", ".join(self._unit.capabilities.list()),
        )

    # ------------------------------------------------------------------
    # Construction contract
    # ------------------------------------------------------------------

    @classmethod
    @abstractmethod
    def create(cls, config: Mapping[str, Any] | None = None) -> Unit:
        """Pure factory.  Must not perform I/O."""

    @abstractmethod
    def build(self) -> UnitCore | Mapping[str, Any]:
        """Wire capabilities, schema and validator from this unit's methods."""

    # ------------------------------------------------------------------
    # Identity & state
    # ------------------------------------------------------------------

    @property
    def dna(self) -> UnitSchema:
        return self._props.dna

    @property
    def props(self) -> UnitProps:
        return self._props

    @property
    def state(self) -> UnitState:
        return self._state

    def whoami(self) -> str:
        return f"[{self.dna.id}] Unit v{self.dna.version}"

    def help(self) -> str:
        """Describe this unit and its capabilities."""
        lines = [f"=== {self.whoami()} ===", "", "Capabilities:"]
        schema = self.schema()
        for name in self.capabilities().list():
            descriptor = schema.get(name)
            if descriptor is None:
                lines.append(f"- {name}: (undocumented)")
                continue
            params = ", ".join(descriptor.parameters.properties)
            lines.append(f"- {name}({params}): {descriptor.description}")
        lines.append("")
        lines.append("I can teach my capabilities to other units via teach().")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------

    def _core(self) -> UnitCore:
        if self._state is not UnitState.READY or self._unit is None:
            raise UnitStateError(
                f"Unit '{self.dna.id}' is {self._state.value}; build() has not completed"
            )
        return self._unit

    def capabilities(self) -> Capabilities:
        return self._core().capabilities

    def schema(self) -> Schema:
        return self._core().schema

    def validator(self) -> Validator:
        return self._core().validator

    # ------------------------------------------------------------------
    # Teaching
    # ------------------------------------------------------------------

    def teach(self) -> TeachingContract:
        """Hand out this unit's registries by reference."""
        core = self._core()
        return TeachingContract(
            unit_id=self.dna.id,
            capabilities=core.capabilities,
            schema=core.schema,
            validator=core.validator,
        )

    def learn(self, contracts: Iterable[TeachingContract]) -> list[str]:
        """Merge taught capabilities into this unit's own registries.

        Learned names are namespaced as ``"<unit_id>.<capability>"``.
        Returns the capability keys learned.
        """
        core = self._core()
        contracts = list(contracts)
        learned = core.capabilities.learn(contracts)
        core.schema.learn(contracts)
        return learned

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def can(self, name: str) -> bool:
        return self._core().capabilities.has(name)

    async def execute(self, name: str, *args: Any, validate: bool = True) -> Any:
        """Validate then dispatch a capability, awaiting async results.

        Pass ``validate=False`` for trusted internal calls.
        """
        core = self._core()
        if validate:
            core.validator.validate(name, args)
        result = core.capabilities.execute(name, *args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.dna.id!r}, version={self.dna.version!r})"
