"""Events emitted by the raffle, kept in an append-only log."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class EntryAccepted:
    participant: str


@dataclass(frozen=True)
class CycleStarted:
    request_id: int


@dataclass(frozen=True)
class AwardIssued:
    winner: str
    token_id: int


Event = Union[EntryAccepted, CycleStarted, AwardIssued]


class EventLog:
    """
    Append-only event log. Events are appended as the last step of the call
    that produced them, so a reverted call leaves no events behind.
    """

    def __init__(self):
        self._events: List[Event] = []
        self._lock = threading.Lock()

    def emit(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)

    def get_logs(self, name: Optional[str] = None) -> List[Event]:
        with self._lock:
            events = list(self._events)
        if name is None:
            return events
        return [e for e in events if type(e).__name__ == name]

    def last(self, name: Optional[str] = None) -> Optional[Event]:
        logs = self.get_logs(name)
        return logs[-1] if logs else None

    def __len__(self) -> int:
        return len(self._events)
