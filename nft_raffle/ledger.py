"""Entrant pool for the active cycle."""

from __future__ import annotations

import logging
from typing import List

from .cycle import Cycle
from .errors import CycleNotOpen, IndexOutOfRange, InsufficientPayment

logger = logging.getLogger(__name__)


class EntryLedger:
    """
    Tracks paid entries and the pool balance of a `Cycle`. One record per
    paid entry: the same address may appear several times and each entry
    counts separately towards the odds.
    """

    def __init__(self, cycle: Cycle):
        self.cycle = cycle
        self._entrants: List[str] = []

    def check(self, paid_amount: int) -> None:
        """Raise if an entry paying `paid_amount` would be rejected."""
        if paid_amount < self.cycle.entrance_fee:
            raise InsufficientPayment(paid_amount, self.cycle.entrance_fee)
        if not self.cycle.is_open:
            raise CycleNotOpen(int(self.cycle.state))

    def enter(self, participant: str, paid_amount: int) -> int:
        """Record one entry; returns the entrant's index in the pool."""
        self.check(paid_amount)
        self._entrants.append(participant)
        self.cycle.balance += paid_amount
        logger.debug("entry %d by %s (%d paid)", len(self._entrants) - 1, participant, paid_amount)
        return len(self._entrants) - 1

    def reset(self) -> None:
        self._entrants = []
        self.cycle.balance = 0

    def entrant_at(self, index: int) -> str:
        if index < 0 or index >= len(self._entrants):
            raise IndexOutOfRange(index, len(self._entrants))
        return self._entrants[index]

    def count(self) -> int:
        return len(self._entrants)

    @property
    def balance(self) -> int:
        return self.cycle.balance
