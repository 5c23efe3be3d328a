from nft_raffle.chain import Chain
from nft_raffle.mocks import MockVRFCoordinator


def deploy_mock(chain: Chain) -> MockVRFCoordinator:
    mock = MockVRFCoordinator(chain)
    print(f"Mock VRF Coordinator at: {mock.address}")
    return mock


def main() -> MockVRFCoordinator:
    return deploy_mock(Chain())


if __name__ == "__main__":
    main()
