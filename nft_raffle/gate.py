"""Upkeep eligibility check used by automation callers."""

from __future__ import annotations

from .cycle import Cycle
from .ledger import EntryLedger


class AutomationGate:
    def __init__(self, cycle: Cycle, ledger: EntryLedger):
        self.cycle = cycle
        self.ledger = ledger

    def evaluate(self, now: int) -> bool:
        """
        True when a draw is due: the raffle is open, has a positive balance,
        has at least one entry, and the interval has elapsed. Never mutates.
        """
        return (
            self.cycle.is_open
            and self.cycle.balance > 0
            and self.ledger.count() > 0
            and self.cycle.elapsed(now) >= self.cycle.interval
        )
