"""Unit definitions as text, ready for the materialization engine.

Each definition comes with the names it references, so callers can pass
exactly that dependency surface and nothing more.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from unitkit.materialization.dependencies import default_dependencies

NETWORK_UNIT_DEPENDENCIES: tuple[str, ...] = (
    "Unit",
    "UnitProps",
    "create_unit_schema",
    "Capabilities",
    "Schema",
    "Validator",
    "ValidatorConfig",
    "sleep",
    "utc_now",
    "logger",
)

NETWORK_UNIT_SOURCE = '''
class MaterializedNetworkUnit(Unit):
    """Network unit built from a definition string."""

    def __init__(self, props, base_url, timeout, strict_mode=False):
        self.base_url = base_url
        self.timeout = timeout
        self.strict_mode = strict_mode
        super().__init__(props)

    @classmethod
    def create(cls, config=None):
        options = dict(config or {})
        props = UnitProps(
            dna=create_unit_schema(id="materialized-network", version="1.0.0"),
        )
        base_url = options.get("baseUrl", options.get("base_url", "https://api.example.com"))
        timeout = options.get("timeout", 5000)
        strict_mode = bool(options.get("strictMode", options.get("strict_mode", False)))
        return cls(props, base_url, timeout, strict_mode)

    def build(self):
        capabilities = Capabilities.create(self.dna.id, {
            "get": lambda *args: self.get(*args[:1]),
            "post": lambda *args: self.post(*args[:2]),
        })
        schema = Schema.create(self.dna.id, {
            "get": {
                "name": "get",
                "description": "Make HTTP GET request",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "description": "URL path to request"},
                    },
                    "required": ["path"],
                },
            },
            "post": {
                "name": "post",
                "description": "Make HTTP POST request",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "description": "URL path to request"},
                        "data": {"type": "object", "description": "Data to send in POST body"},
                    },
                    "required": ["path"],
                },
            },
        })
        validator = Validator.create(ValidatorConfig(
            unit_id=self.dna.id,
            capabilities=capabilities,
            schema=schema,
            strict_mode=self.strict_mode,
        ))
        return {"capabilities": capabilities, "schema": schema, "validator": validator}

    async def get(self, path):
        logger.info("network_get", url=self.base_url + path)
        await sleep(0.1)
        return {
            "status": 200,
            "data": {"message": "Hello from MATERIALIZED NetworkUnit!", "path": path},
            "timestamp": utc_now().isoformat(),
        }

    async def post(self, path, data=None):
        logger.info("network_post", url=self.base_url + path, data=data)
        await sleep(0.1)
        return {
            "status": 201,
            "data": {"message": "Created via MATERIALIZED NetworkUnit!", "received": data},
            "timestamp": utc_now().isoformat(),
        }

    def whoami(self):
        return (
            f"[{self.dna.id}] Network unit v{self.dna.version} "
            "- I handle HTTP requests (materialized from text)"
        )

MaterializedNetworkUnit
'''

# Same unit written with annotations; needs the typed compile stage.
TYPED_NETWORK_UNIT_SOURCE = '''
from __future__ import annotations

from typing import Any, TYPE_CHECKING, cast

if TYPE_CHECKING:
    from unitkit.core.models import UnitProps as PropsType


class TypedNetworkUnit(Unit):
    base_url: str
    timeout: int

    def __init__(
        self, props: PropsType, base_url: str, timeout: int, strict_mode: bool = False
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.strict_mode = strict_mode
        super().__init__(props)

    @classmethod
    def create(cls, config: dict[str, Any] | None = None) -> TypedNetworkUnit:
        options: dict[str, Any] = dict(config or {})
        props = UnitProps(
            dna=create_unit_schema(id="typed-network", version="1.0.0"),
        )
        base_url: str = options.get("baseUrl", options.get("base_url", "https://api.example.com"))
        strict_mode: bool = bool(options.get("strictMode", options.get("strict_mode", False)))
        return cls(props, base_url, cast(int, options.get("timeout", 5000)), strict_mode)

    def build(self) -> dict[str, Any]:
        capabilities = Capabilities.create(self.dna.id, {"get": self.get, "post": self.post})
        schema = Schema.create(self.dna.id, {
            "get": {
                "name": "get",
                "description": "Make HTTP GET request",
                "parameters": {
                    "type": "object",
                    "properties": {"path": {"type": "string"}},
                    "required": ["path"],
                },
            },
            "post": {
                "name": "post",
                "description": "Make HTTP POST request",
                "parameters": {
                    "type": "object",
                    "properties": {"path": {"type": "string"}, "data": {"type": "object"}},
                    "required": ["path"],
                },
            },
        })
        validator = Validator.create(ValidatorConfig(
            unit_id=self.dna.id,
            capabilities=capabilities,
            schema=schema,
            strict_mode=self.strict_mode,
        ))
        return {"capabilities": capabilities, "schema": schema, "validator": validator}

    async def get(self, path: str) -> dict[str, Any]:
        logger.info("network_get", url=self.base_url + path)
        await sleep(0.1)
        return {"status": 200, "data": {"path": path}, "timestamp": utc_now().isoformat()}

    async def post(self, path: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        logger.info("network_post", url=self.base_url + path)
        await sleep(0.1)
        return {"status": 201, "data": {"received": data}, "timestamp": utc_now().isoformat()}

    def whoami(self) -> str:
        return f"[{self.dna.id}] Network unit v{self.dna.version} - typed definition"

TypedNetworkUnit
'''


def network_dependencies(**overrides: Any) -> list[tuple[str, Any]]:
    """Bindings for the network definitions: exactly the names they use."""
    defaults = dict(default_dependencies())
    defaults.update(overrides)
    return [(name, defaults[name]) for name in NETWORK_UNIT_DEPENDENCIES]


def load_definition(path: str | Path) -> str:
    """Read definition text from a file."""
    return Path(path).read_text(encoding="utf-8")
