import logging
import os
from dataclasses import replace

from dotenv import load_dotenv

from nft_raffle.chain import Chain
from nft_raffle.config import RaffleConfig, load_config
from nft_raffle.errors import ConfigError
from nft_raffle.raffle import Raffle, deploy as deploy_raffle
from script.deploy_mock import deploy_mock

VRF_SUB_FUND_AMOUNT = 2 * 10**18  # 2 LINK


def deploy(config: RaffleConfig, chain: Chain) -> Raffle:
    if not config.is_development:
        # live coordinators are provisioned out of band
        raise ConfigError(f"network {config.network!r} needs a live VRF coordinator client")

    # Deploy mock first and give the raffle a funded subscription
    mock = deploy_mock(chain)
    subscription_id = mock.create_subscription()
    mock.fund_subscription(subscription_id, VRF_SUB_FUND_AMOUNT)
    print(f"Subscription {subscription_id} funded with {VRF_SUB_FUND_AMOUNT}")

    config = replace(config, subscription_id=subscription_id, vrf_coordinator=mock.address)
    raffle_contract = deploy_raffle(config, mock, chain)
    mock.add_consumer(subscription_id, raffle_contract)

    print(f"Raffle deployed at: {raffle_contract.address}")
    return raffle_contract


def main() -> Raffle:
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    config = load_config(os.getenv("RAFFLE_CONFIG", "raffle.toml"))
    return deploy(config, Chain())


if __name__ == "__main__":
    main()
