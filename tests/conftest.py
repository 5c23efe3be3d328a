import logging

import pytest

from nft_raffle import raffle
from nft_raffle.chain import Chain
from nft_raffle.config import RaffleConfig
from nft_raffle.mocks import MockVRFCoordinator

ENTRANCE_FEE = 10**16  # 0.01 ETH
INTERVAL = 60
GENESIS_TIMESTAMP = 1_700_000_000


@pytest.fixture
def chain():
    """Fresh execution environment with a fixed clock"""
    return Chain(timestamp=GENESIS_TIMESTAMP)


@pytest.fixture
def account(chain):
    """Default funded account"""
    acct = chain.generate_address()
    chain.set_balance(acct, 10**18)  # 1 ETH initial funding
    return acct


@pytest.fixture
def mock_vrf(chain):
    """Deploy the mock VRF coordinator with a funded subscription"""
    mock = MockVRFCoordinator(chain)
    mock.subscription_id = mock.create_subscription()
    mock.fund_subscription(mock.subscription_id, 2 * 10**18)
    return mock


@pytest.fixture
def raffle_config(mock_vrf):
    return RaffleConfig(
        entrance_fee=ENTRANCE_FEE,
        interval=INTERVAL,
        key_hash=b"\x00" * 32,
        subscription_id=mock_vrf.subscription_id,
        callback_gas_limit=100000,
        base_uri="ipfs://QmDogie/",
        vrf_coordinator=mock_vrf.address,
    )


@pytest.fixture
def raffle_contract(chain, mock_vrf, raffle_config):
    """Deploy the raffle and register it as a consumer"""
    raffle_instance = raffle.deploy(raffle_config, mock_vrf, chain)
    mock_vrf.add_consumer(mock_vrf.subscription_id, raffle_instance)
    return raffle_instance


@pytest.fixture
def players(chain):
    """Three more funded accounts"""
    addrs = [chain.generate_address() for _ in range(3)]
    for addr in addrs:
        chain.set_balance(addr, 10**18)
    return addrs


@pytest.fixture(autouse=True)
def _debug_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="nft_raffle")
