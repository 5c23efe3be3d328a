from pathlib import Path

import pytest

from nft_raffle.config import RaffleConfig, load_config
from nft_raffle.errors import ConfigError

PROJECT_FILE = Path(__file__).resolve().parents[2] / "raffle.toml"


def test_project_file_default_network(monkeypatch):
    monkeypatch.delenv("RAFFLE_NETWORK", raising=False)
    cfg = load_config(PROJECT_FILE)
    assert cfg.network == "pyevm"
    assert cfg.is_development
    assert cfg.entrance_fee == 10**16
    assert cfg.interval == 60
    assert cfg.name == "Dogie"
    assert cfg.key_hash == b"\x00" * 32
    assert cfg.base_uri.startswith("ipfs://")


def test_network_from_environment(monkeypatch):
    monkeypatch.setenv("RAFFLE_NETWORK", "sepolia")
    cfg = load_config(PROJECT_FILE)
    assert cfg.network == "sepolia"
    assert not cfg.is_development
    assert cfg.interval == 3600
    assert cfg.subscription_id == 1234
    assert cfg.vrf_coordinator == "0x8103B0A8A00be2DDC778e6e7eaa21791Cd364625"


def test_unknown_network():
    with pytest.raises(ConfigError, match="unknown network"):
        load_config(PROJECT_FILE, network="mainnet")


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.toml")


def test_live_network_needs_coordinator(tmp_path):
    path = tmp_path / "raffle.toml"
    path.write_text(
        '[networks.sepolia]\nentrance_fee = 1\ninterval = 1\n'
    )
    with pytest.raises(ConfigError, match="vrf_coordinator"):
        load_config(path, network="sepolia")


def test_missing_fee(tmp_path):
    path = tmp_path / "raffle.toml"
    path.write_text('[networks.pyevm]\ninterval = 1\n')
    with pytest.raises(ConfigError, match="entrance_fee"):
        load_config(path, network="pyevm")


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(entrance_fee=0, interval=60),
        dict(entrance_fee=1, interval=0),
        dict(entrance_fee=1, interval=60, key_hash=b"\x00"),
        dict(entrance_fee=1, interval=60, num_words=0),
        dict(entrance_fee=1, interval=60, callback_gas_limit=0),
        dict(entrance_fee=1, interval=60, vrf_coordinator="not-an-address"),
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ConfigError):
        RaffleConfig(**kwargs)
