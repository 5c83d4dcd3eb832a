"""Network unit: simulated HTTP get/post capabilities.

No real I/O happens.  Each request waits a fixed simulated latency on the
event loop and always succeeds.  Retry and timeout handling belong to real
transports and are not modelled here; ``timeout`` is carried as
configuration only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from unitkit.core.capabilities import Capabilities
from unitkit.core.contracts import UnitCore
from unitkit.core.ids import utc_now
from unitkit.core.models import UnitProps, create_unit_schema
from unitkit.core.schema import Schema
from unitkit.core.unit import Unit
from unitkit.core.validator import Validator, ValidatorConfig

logger = logging.getLogger(__name__)

SIMULATED_LATENCY_SECONDS = 0.1

NETWORK_SCHEMA: dict[str, dict[str, Any]] = {
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
}


class NetworkConfig(BaseModel):
    """Options accepted by ``NetworkUnit.create``.  Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_url: str = Field(default="https://api.example.com", alias="baseUrl")
    timeout: int = 5000  # ms
    strict_mode: bool = Field(default=False, alias="strictMode")


class NetworkProps(UnitProps):
    base_url: str
    timeout: int
    strict_mode: bool = False


class NetworkUnit(Unit):
    """Handles (simulated) HTTP requests and can teach get/post."""

    UNIT_ID = "network-unit"
    VERSION = "1.0.0"

    @classmethod
    def create(cls, config: Mapping[str, Any] | None = None) -> NetworkUnit:
        options = NetworkConfig.model_validate(dict(config or {}))
        props = NetworkProps(
            dna=create_unit_schema(id=cls.UNIT_ID, version=cls.VERSION),
            base_url=options.base_url,
            timeout=options.timeout,
            strict_mode=options.strict_mode,
        )
        return cls(props)

    def build(self) -> UnitCore:
        capabilities = Capabilities.create(
            self.dna.id,
            {
                "get": self.get,
                "post": self.post,
            },
        )
        schema = Schema.create(self.dna.id, NETWORK_SCHEMA)
        validator = Validator.create(
            ValidatorConfig(
                unit_id=self.dna.id,
                capabilities=capabilities,
                schema=schema,
                strict_mode=self._network_props.strict_mode,
            )
        )
        return UnitCore(capabilities=capabilities, schema=schema, validator=validator)

    @property
    def base_url(self) -> str:
        return self._network_props.base_url

    @property
    def timeout(self) -> int:
        return self._network_props.timeout

    @property
    def _network_props(self) -> NetworkProps:
        return self.props  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Native capabilities
    # ------------------------------------------------------------------

    async def get(self, path: str) -> dict[str, Any]:
        logger.info("GET %s%s", self.base_url, path)
        await asyncio.sleep(SIMULATED_LATENCY_SECONDS)
        return {
            "status": 200,
            "data": {"message": "Hello from NetworkUnit!", "path": path},
            "timestamp": utc_now().isoformat(),
        }

    async def post(self, path: str, data: Any = None) -> dict[str, Any]:
        logger.info("POST %s%s %s", self.base_url, path, data)
        await asyncio.sleep(SIMULATED_LATENCY_SECONDS)
        return {
            "status": 201,
            "data": {"message": "Created via NetworkUnit!", "received": data},
            "timestamp": utc_now().isoformat(),
        }

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def whoami(self) -> str:
        return f"[{self.dna.id}] Network unit v{self.dna.version} - I handle HTTP requests"

    def help(self) -> str:
        return (
            f"=== Network Unit v{self.dna.version} ===\n"
            "I handle HTTP requests against a configured base URL.\n"
            "\n"
            "Capabilities:\n"
            "- get(path): Make GET requests\n"
            "- post(path, data): Make POST requests\n"
            "\n"
            "Usage:\n"
            "  network = NetworkUnit.create({'baseUrl': 'https://api.com'})\n"
            "  response = await network.get('/users')\n"
            "  created = await network.post('/users', {'name': 'John'})\n"
            "\n"
            "I can teach my capabilities to other units via teach()."
        )
