"""
Raffle errors.

Every failure raised by the engine derives from `RaffleError`. The four
intermediate classes group errors by how a caller should react:

* `RejectedInput`    - caller error, nothing changed, retry with fixed input.
* `PrematureTrigger` - a draw was requested before it was due; racing
                       automation callers see this routinely.
* `InvariantGuard`   - should be unreachable under correct orchestration;
                       a forged callback or an orchestration bug.
* `LookupMiss`       - a read for a record that does not exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class RaffleError(Exception):
    """Base class for all raffle engine errors."""
    pass


class RejectedInput(RaffleError):
    pass


class PrematureTrigger(RaffleError):
    pass


class InvariantGuard(RaffleError):
    pass


class LookupMiss(RaffleError):
    pass


@dataclass(eq=False)
class InsufficientPayment(RejectedInput):
    """Raised when an entry pays less than the entrance fee."""
    paid: int
    required: int

    def __str__(self) -> str:
        return f"InsufficientPayment: paid={self.paid} < entrance_fee={self.required}"


@dataclass(eq=False)
class CycleNotOpen(RejectedInput):
    """Raised when entering while a winner is being calculated."""
    state: int

    def __str__(self) -> str:
        return f"CycleNotOpen: Raffle not open (state={self.state})"


@dataclass(eq=False)
class UpkeepNotNeeded(PrematureTrigger):
    """
    Raised by `perform_upkeep` when the automation gate is closed.

    Attributes:
        balance: Pool balance at the time of the call.
        player_count: Number of entries at the time of the call.
        state: Raffle state at the time of the call.
    """
    balance: int
    player_count: int
    state: int

    def __str__(self) -> str:
        return (
            f"UpkeepNotNeeded: balance={self.balance} "
            f"players={self.player_count} state={self.state}"
        )


@dataclass(eq=False)
class RequestAlreadyPending(InvariantGuard):
    pending_id: int

    def __str__(self) -> str:
        return f"RequestAlreadyPending: request {self.pending_id} is still outstanding"


@dataclass(eq=False)
class UnknownRequest(InvariantGuard):
    request_id: int

    def __str__(self) -> str:
        return f"UnknownRequest: nonexistent request {self.request_id}"


@dataclass(eq=False)
class EmptyPool(InvariantGuard):
    def __str__(self) -> str:
        return "EmptyPool: cannot pick a winner from an empty pool"


@dataclass(eq=False)
class OnlyCoordinatorCanFulfill(InvariantGuard):
    """Raised when randomness is delivered by anyone but the configured coordinator."""
    have: Optional[str]
    want: str

    def __str__(self) -> str:
        return f"OnlyCoordinatorCanFulfill: have={self.have} want={self.want}"


@dataclass(eq=False)
class IndexOutOfRange(LookupMiss):
    index: int
    count: int

    def __str__(self) -> str:
        return f"IndexOutOfRange: index={self.index} count={self.count}"


@dataclass(eq=False)
class UnknownToken(LookupMiss):
    token_id: int

    def __str__(self) -> str:
        return f"UnknownToken: token {self.token_id} was never minted"


@dataclass(eq=False)
class InsufficientFunds(RaffleError):
    """Raised by the execution environment when a value transfer is not covered."""
    account: str
    balance: int
    amount: int

    def __str__(self) -> str:
        return (
            f"InsufficientFunds: {self.account} has {self.balance}, "
            f"needs {self.amount}"
        )


class ConfigError(RaffleError):
    """Raised for invalid or missing raffle configuration."""
    pass


__all__ = [
    "RaffleError",
    "RejectedInput",
    "PrematureTrigger",
    "InvariantGuard",
    "LookupMiss",
    "InsufficientPayment",
    "CycleNotOpen",
    "UpkeepNotNeeded",
    "RequestAlreadyPending",
    "UnknownRequest",
    "EmptyPool",
    "OnlyCoordinatorCanFulfill",
    "IndexOutOfRange",
    "UnknownToken",
    "InsufficientFunds",
    "ConfigError",
]
