"""
Raffle configuration.

A `RaffleConfig` carries everything the engine is parameterised with. Named
networks live in a TOML project file laid out like a moccasin project:

    [project]
    default_network = "pyevm"
    base_uri = "ipfs://.../"

    [networks.pyevm]
    entrance_fee = 10000000000000000
    interval = 60

Values in `[project]` are defaults for every network; a `[networks.<name>]`
table overrides them. The active network is the explicit argument, else
`RAFFLE_NETWORK` from the environment, else `default_network`.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from eth_utils import is_address, to_bytes, to_checksum_address

from .errors import ConfigError

DEVELOPMENT_NETWORKS = ("pyevm", "anvil")
DEFAULT_CONFIG_FILE = "raffle.toml"
NETWORK_ENV_VAR = "RAFFLE_NETWORK"

# Values used by the Chainlink VRF v2 coordinator mock
DEFAULT_KEY_HASH = b"\x00" * 32
DEFAULT_CALLBACK_GAS_LIMIT = 500_000
DEFAULT_REQUEST_CONFIRMATIONS = 3
DEFAULT_BASE_URI = "ipfs://"


@dataclass(frozen=True)
class RaffleConfig:
    entrance_fee: int
    interval: int
    key_hash: bytes = DEFAULT_KEY_HASH
    subscription_id: int = 0
    callback_gas_limit: int = DEFAULT_CALLBACK_GAS_LIMIT
    request_confirmations: int = DEFAULT_REQUEST_CONFIRMATIONS
    num_words: int = 1
    base_uri: str = DEFAULT_BASE_URI
    name: str = "Dogie"
    symbol: str = "DOG"
    network: str = "pyevm"
    vrf_coordinator: Optional[str] = None

    def __post_init__(self):
        if self.entrance_fee <= 0:
            raise ConfigError(f"entrance_fee must be positive, got {self.entrance_fee}")
        if self.interval <= 0:
            raise ConfigError(f"interval must be positive, got {self.interval}")
        if self.callback_gas_limit <= 0:
            raise ConfigError("callback_gas_limit must be positive")
        if self.num_words < 1:
            raise ConfigError("num_words must be at least 1")
        if len(self.key_hash) != 32:
            raise ConfigError(f"key_hash must be 32 bytes, got {len(self.key_hash)}")
        if self.vrf_coordinator is not None and not is_address(self.vrf_coordinator):
            raise ConfigError(f"vrf_coordinator is not an address: {self.vrf_coordinator}")

    @property
    def is_development(self) -> bool:
        return self.network in DEVELOPMENT_NETWORKS

    @classmethod
    def from_dict(cls, data: Dict[str, Any], network: str = "pyevm") -> "RaffleConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        missing = [k for k in ("entrance_fee", "interval") if k not in kwargs]
        if missing:
            raise ConfigError(f"network {network!r} is missing {', '.join(missing)}")
        if isinstance(kwargs.get("key_hash"), str):
            try:
                kwargs["key_hash"] = to_bytes(hexstr=kwargs["key_hash"])
            except ValueError as e:
                raise ConfigError(f"key_hash is not hex: {e}") from e
        coordinator = kwargs.get("vrf_coordinator")
        if coordinator:
            if not is_address(coordinator):
                raise ConfigError(f"vrf_coordinator is not an address: {coordinator}")
            kwargs["vrf_coordinator"] = to_checksum_address(coordinator)
        else:
            kwargs["vrf_coordinator"] = None
        kwargs["network"] = network
        return cls(**kwargs)


def load_config(
    path: Union[str, Path] = DEFAULT_CONFIG_FILE, network: Optional[str] = None
) -> RaffleConfig:
    """Read `path` and build the config of the active network."""
    path = Path(path)
    try:
        with path.open("rb") as f:
            doc = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}") from e

    project = doc.get("project", {})
    networks = doc.get("networks", {})
    name = network or os.getenv(NETWORK_ENV_VAR) or project.get("default_network", "pyevm")
    if name not in networks:
        raise ConfigError(f"unknown network {name!r}; known: {', '.join(sorted(networks))}")

    merged = {k: v for k, v in project.items() if k != "default_network"}
    merged.update(networks[name])
    cfg = RaffleConfig.from_dict(merged, network=name)
    if not cfg.is_development and (cfg.vrf_coordinator is None or cfg.subscription_id <= 0):
        raise ConfigError(f"network {name!r} needs vrf_coordinator and subscription_id")
    return cfg
