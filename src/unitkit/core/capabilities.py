"""Capability registry: named, invocable operations owned by one unit.

The registry is a transparent dispatcher.  It never validates arguments and
never catches errors raised by an implementation; both are the caller's
concern (see :class:`~unitkit.core.validator.Validator`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Callable

from .errors import InvalidCapabilityError, UnknownCapabilityError

if TYPE_CHECKING:
    from .contracts import TeachingContract

logger = logging.getLogger(__name__)


class Capabilities:
    """Ordered mapping of capability name to implementation.

    Usage::

        caps = Capabilities.create("network-unit", {"get": unit.get})
        caps.list()                       # ["get"]
        result = await caps.execute("get", "/users")
    """

    def __init__(
        self,
        owner_id: str,
        implementations: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        self._owner_id = owner_id
        self._impls: dict[str, Callable[..., Any]] = {}
        for name, impl in (implementations or {}).items():
            self._register(name, impl)

    @classmethod
    def create(
        cls,
        owner_id: str,
        implementations: Mapping[str, Callable[..., Any]],
    ) -> Capabilities:
        """Build a registry.  Raises InvalidCapabilityError on non-callables."""
        return cls(owner_id, implementations)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _register(self, name: str, impl: Callable[..., Any]) -> None:
        if not callable(impl):
            raise InvalidCapabilityError(self._owner_id, name, impl)
        self._impls[name] = impl

    def learn(self, contracts: Iterable[TeachingContract]) -> list[str]:
        """Merge taught capabilities under ``"<unit_id>.<name>"`` keys.

        Implementations are copied by reference, so a learned capability
        runs against the teaching unit's live state.  Returns the keys
        added or replaced.
        """
        learned: list[str] = []
        for contract in contracts:
            for name in contract.capabilities.list():
                key = f"{contract.unit_id}.{name}"
                if key in self._impls:
                    logger.warning(
                        "Unit %s re-learned capability %s; replacing",
                        self._owner_id,
                        key,
                    )
                self._register(key, contract.capabilities.get(name))
                learned.append(key)
        if learned:
            logger.info(
                "Unit %s learned %d capabilities: %s",
                self._owner_id,
                len(learned),
                ", ".join(learned),
            )
        return learned

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def list(self) -> list[str]:
        """Capability names in registration order."""
        return list(self._impls)

    def has(self, name: str) -> bool:
        return name in self._impls

    def get(self, name: str) -> Callable[..., Any] | None:
        """Look up an implementation by name."""
        return self._impls.get(name)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def execute(self, name: str, *args: Any) -> Any:
        """Invoke a capability with positional arguments.

        Async implementations return their awaitable unchanged; the
        caller awaits it.  Implementation errors propagate as raised.
        """
        impl = self._impls.get(name)
        if impl is None:
            raise UnknownCapabilityError(self._owner_id, name, self.list())
        return impl(*args)

    def __contains__(self, name: object) -> bool:
        return name in self._impls

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._impls))

    def __len__(self) -> int:
        return len(self._impls)

    def __repr__(self) -> str:
        return f"Capabilities(owner={self._owner_id!r}, names={self.list()!r})"
