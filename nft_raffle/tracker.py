"""Correlates outstanding randomness requests with the cycle that issued them."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from .cycle import Cycle
from .errors import RequestAlreadyPending, UnknownRequest

logger = logging.getLogger(__name__)


class RandomnessRequestTracker:
    """
    Holds at most one pending request. Identifiers come from `allocate`,
    normally the randomness provider's request call; without one the
    tracker numbers requests itself starting at 1.
    """

    def __init__(self):
        self._pending: Dict[int, Cycle] = {}
        self._next_id = 1

    def issue(self, cycle: Cycle, allocate: Optional[Callable[[], int]] = None) -> int:
        if self._pending:
            raise RequestAlreadyPending(next(iter(self._pending)))
        if allocate is None:
            request_id = self._next_id
            self._next_id += 1
        else:
            request_id = int(allocate())
        self._pending[request_id] = cycle
        logger.debug("request %d pending", request_id)
        return request_id

    def resolve(self, request_id: int) -> Cycle:
        try:
            cycle = self._pending.pop(request_id)
        except KeyError:
            raise UnknownRequest(request_id) from None
        logger.debug("request %d resolved", request_id)
        return cycle

    def peek(self, request_id: int) -> Cycle:
        """Like `resolve`, without consuming the mapping."""
        try:
            return self._pending[request_id]
        except KeyError:
            raise UnknownRequest(request_id) from None

    def pending_id(self) -> Optional[int]:
        return next(iter(self._pending), None)

    def __len__(self) -> int:
        return len(self._pending)
