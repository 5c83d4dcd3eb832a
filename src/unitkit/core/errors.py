"""Custom exception hierarchy for the unit runtime."""


class UnitError(Exception):
    """Base exception for all unit runtime errors."""


# --- Unit lifecycle ---
class UnitStateError(UnitError):
    """Operation not valid in the unit's current lifecycle state."""


class UnitDefinitionError(UnitError):
    """A unit's identity or build output is malformed."""


# --- Capabilities ---
class CapabilityError(UnitError):
    """Capability registry error."""


class InvalidCapabilityError(CapabilityError):
    """A registered capability implementation is not callable."""

    def __init__(self, owner_id: str, name: str, value: object):
        self.owner_id = owner_id
        self.name = name
        super().__init__(
            f"Capability '{name}' of unit '{owner_id}' is not callable "
            f"(got {type(value).__name__})"
        )


class UnknownCapabilityError(CapabilityError):
    """Dispatch requested for a capability the registry does not hold."""

    def __init__(self, owner_id: str, name: str, available: list[str] | None = None):
        self.owner_id = owner_id
        self.name = name
        self.available = list(available or [])
        hint = f" (available: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Unknown capability '{name}' on unit '{owner_id}'{hint}")


# --- Validation ---
class ValidationError(UnitError):
    """One or more invocation arguments violate the capability schema.

    ``issues`` carries every violation found, not just the first.
    """

    def __init__(self, capability: str, issues: list):
        self.capability = capability
        self.issues = list(issues)
        summary = "; ".join(issue.message for issue in self.issues)
        super().__init__(
            f"Invalid arguments for '{capability}' "
            f"({len(self.issues)} issue(s)): {summary}"
        )


class UndocumentedCapabilityError(UnitError):
    """Strict-mode validation of a capability with no schema entry."""

    def __init__(self, unit_id: str, capability: str):
        self.unit_id = unit_id
        self.capability = capability
        super().__init__(
            f"Capability '{capability}' on unit '{unit_id}' has no schema "
            "entry (strict mode)"
        )


# --- Materialization ---
class CompilationError(UnitError):
    """The typed compile stage rejected the definition text."""

    def __init__(self, detail: str, lineno: int | None = None):
        self.detail = detail
        self.lineno = lineno
        where = f" (line {lineno})" if lineno else ""
        super().__init__(f"Compilation failed{where}: {detail}")


class MaterializationError(UnitError):
    """Evaluating a unit definition failed or produced no constructible type."""

    def __init__(self, detail: str, mode: str = "standard"):
        self.detail = detail
        self.mode = mode
        super().__init__(f"Materialization failed [{mode}]: {detail}")
