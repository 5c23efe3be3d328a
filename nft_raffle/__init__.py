"""
NFT raffle: players buy entries, an automation caller triggers the draw,
a VRF coordinator supplies the randomness and the winner takes the pool
plus a freshly minted collectible.
"""

__version__ = "0.1.0"

from .award import Award, AwardIssuer
from .chain import Chain
from .config import RaffleConfig, load_config
from .cycle import Cycle, RaffleState
from .errors import *  # noqa: F401,F403
from .events import AwardIssued, CycleStarted, EntryAccepted, EventLog
from .gate import AutomationGate
from .keeper import Keeper
from .ledger import EntryLedger
from .raffle import Raffle, deploy
from .selector import pick
from .tracker import RandomnessRequestTracker
from .vrf import RandomnessProvider

__all__ = [
    "Award",
    "AwardIssuer",
    "AutomationGate",
    "AwardIssued",
    "Chain",
    "Cycle",
    "CycleStarted",
    "EntryAccepted",
    "EntryLedger",
    "EventLog",
    "Keeper",
    "Raffle",
    "RaffleConfig",
    "RaffleState",
    "RandomnessProvider",
    "RandomnessRequestTracker",
    "deploy",
    "load_config",
    "pick",
]
