from .vrf_coordinator import MockVRFCoordinator

__all__ = ["MockVRFCoordinator"]
