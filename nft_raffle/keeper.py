"""
Reference automation caller.

Polls `check_upkeep` and calls `perform_upkeep` only when it reports a draw
is due. Losing a race to another caller surfaces as `UpkeepNotNeeded`,
which is treated as a normal outcome.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from .errors import PrematureTrigger, RequestAlreadyPending
from .raffle import Raffle

logger = logging.getLogger(__name__)


class Keeper:
    def __init__(self, raffle: Raffle):
        self.raffle = raffle
        self.performed: List[int] = []

    def run_once(self) -> Optional[int]:
        """Returns the new request id, or None if nothing was started."""
        needed, perform_data = self.raffle.check_upkeep(b"")
        if not needed:
            return None
        try:
            request_id = self.raffle.perform_upkeep(perform_data)
        except (PrematureTrigger, RequestAlreadyPending) as e:
            logger.debug("lost upkeep race: %s", e)
            return None
        self.performed.append(request_id)
        return request_id

    def run(
        self,
        poll_seconds: float,
        max_iterations: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> List[int]:
        """Poll until `max_iterations` checks have run (forever if None)."""
        started: List[int] = []
        i = 0
        while max_iterations is None or i < max_iterations:
            request_id = self.run_once()
            if request_id is not None:
                started.append(request_id)
            i += 1
            if max_iterations is None or i < max_iterations:
                sleep(poll_seconds)
        return started
