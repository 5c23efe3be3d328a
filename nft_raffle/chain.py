"""
Execution environment for the raffle.

`Chain` plays the part the EVM plays for an on-chain raffle. It owns the
clock and native-value balances and serialises state-changing calls. A
failed transaction restores the balance table, so fee settlement and
payouts are all-or-nothing.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from eth_account import Account
from eth_utils import to_checksum_address

from .errors import InsufficientFunds


class Chain:
    def __init__(self, timestamp: Optional[int] = None):
        self._timestamp = int(time.time()) if timestamp is None else int(timestamp)
        self._balances: Dict[str, int] = {}
        self._local = threading.local()
        self._lock = threading.RLock()
        self._snapshots: List[Dict[str, int]] = []

    # --- clock ----------------------------------------------------------------

    @property
    def timestamp(self) -> int:
        return self._timestamp

    def time_travel(self, seconds: int = 0, timestamp: Optional[int] = None) -> None:
        """Move the clock forward by `seconds`, or to an absolute `timestamp`."""
        with self._lock:
            target = self._timestamp + int(seconds) if timestamp is None else int(timestamp)
            if target < self._timestamp:
                raise ValueError("time cannot move backwards")
            self._timestamp = target

    # --- accounts -------------------------------------------------------------

    def generate_address(self) -> str:
        return Account.create().address

    def get_balance(self, address: str) -> int:
        return self._balances.get(to_checksum_address(address), 0)

    def set_balance(self, address: str, value: int) -> None:
        if value < 0:
            raise ValueError("balance must be non-negative")
        with self._lock:
            self._balances[to_checksum_address(address)] = int(value)

    def transfer(self, sender: str, to: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        sender = to_checksum_address(sender)
        to = to_checksum_address(to)
        with self._lock:
            have = self._balances.get(sender, 0)
            if have < amount:
                raise InsufficientFunds(sender, have, amount)
            self._balances[sender] = have - amount
            self._balances[to] = self._balances.get(to, 0) + amount

    # --- callers --------------------------------------------------------------

    def _senders(self) -> List[str]:
        # per thread, so concurrent callers do not see each other's prank
        senders = getattr(self._local, "senders", None)
        if senders is None:
            senders = self._local.senders = []
        return senders

    @property
    def msg_sender(self) -> Optional[str]:
        senders = self._senders()
        return senders[-1] if senders else None

    @contextmanager
    def prank(self, address: str) -> Iterator[str]:
        """Run the enclosed calls as `address`."""
        address = to_checksum_address(address)
        senders = self._senders()
        senders.append(address)
        try:
            yield address
        finally:
            senders.pop()

    # --- transactions ---------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Serialise a state-changing call. Balances are snapshotted on entry and
        restored if the body raises; the exception is re-raised unchanged.
        """
        with self._lock:
            self._snapshots.append(dict(self._balances))
            try:
                yield
            except BaseException:
                self._balances = self._snapshots[-1]
                raise
            finally:
                self._snapshots.pop()
