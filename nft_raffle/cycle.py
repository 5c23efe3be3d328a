"""The single active raffle round and its state enum."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RaffleState(IntEnum):
    OPEN = 0
    CALCULATING = 1


@dataclass
class Cycle:
    """
    One raffle round. There is exactly one per raffle; it is reset in place
    by `restart` when a round completes instead of being replaced.
    """

    entrance_fee: int
    interval: int
    state: RaffleState = RaffleState.OPEN
    balance: int = 0
    started_at: int = 0

    def restart(self, now: int) -> None:
        self.state = RaffleState.OPEN
        self.balance = 0
        self.started_at = now

    @property
    def is_open(self) -> bool:
        return self.state == RaffleState.OPEN

    def elapsed(self, now: int) -> int:
        return now - self.started_at
