"""Application bootstrap for the command line runners.

Loads settings, configures logging and drives the materialization engine
for the ``inspect`` and ``demo`` commands.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .core.config import Settings, load_settings
from .core.enums import MaterializationMode
from .materialization.dependencies import default_dependencies
from .materialization.engine import MaterializationEngine
from .observability.logger import setup_logging
from .units.definitions import (
    NETWORK_UNIT_SOURCE,
    load_definition,
    network_dependencies,
)

logger = logging.getLogger(__name__)


def bootstrap(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> tuple[Settings, MaterializationEngine]:
    """Load settings, configure logging and build an engine."""
    settings = load_settings(config_path=config_path, overrides=overrides)
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return settings, MaterializationEngine(settings.materialization)


async def run_inspect(
    definition_path: str | Path,
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    unit_config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Materialize a definition file and describe the unit it creates."""
    settings, engine = bootstrap(config_path, overrides)
    source = load_definition(definition_path)
    unit_type = await engine.materialize_with(
        settings.materialization.default_mode, source, default_dependencies()
    )
    config = {"strictMode": settings.validation.strict_mode, **(unit_config or {})}
    unit = unit_type.create(config)
    return {
        "whoami": unit.whoami(),
        "capabilities": unit.capabilities().list(),
        "schema": [d.name for d in unit.schema().list()],
        "mode": settings.materialization.default_mode.value,
        "strict": unit.validator().strict_mode,
    }


async def run_demo(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    base_url: str = "https://demo.api.example.com",
) -> dict[str, Any]:
    """Materialize the bundled network unit, call it and teach it."""
    settings, engine = bootstrap(config_path, overrides)
    mode = settings.materialization.default_mode
    unit_type = await engine.materialize_with(mode, NETWORK_UNIT_SOURCE, network_dependencies())
    network = unit_type.create(
        {"baseUrl": base_url, "strictMode": settings.validation.strict_mode}
    )
    logger.info("Materialized %s in %s mode", network.whoami(), mode.value)

    got = await network.execute("get", "/test")
    posted = await network.execute("post", "/create", {"name": "John"})
    contract = network.teach()

    return {
        "whoami": network.whoami(),
        "mode": mode.value,
        "get": got,
        "post": posted,
        "teaching": contract.summary(),
    }


def parse_mode(value: str | None) -> dict[str, Any]:
    """Settings overrides for an optional --mode CLI value."""
    if not value:
        return {}
    return {"materialization": {"default_mode": MaterializationMode(value).value}}


def parse_strict(flag: bool) -> dict[str, Any]:
    """Settings overrides for the --strict CLI flag (absent keeps config)."""
    if not flag:
        return {}
    return {"validation": {"strict_mode": True}}
