"""Concrete units and their text definitions."""

from unitkit.units.definitions import (
    NETWORK_UNIT_DEPENDENCIES,
    NETWORK_UNIT_SOURCE,
    TYPED_NETWORK_UNIT_SOURCE,
    load_definition,
    network_dependencies,
)
from unitkit.units.network import NetworkConfig, NetworkUnit

__all__ = [
    "NETWORK_UNIT_DEPENDENCIES",
    "NETWORK_UNIT_SOURCE",
    "NetworkConfig",
    "NetworkUnit",
    "TYPED_NETWORK_UNIT_SOURCE",
    "load_definition",
    "network_dependencies",
]
