"""In-memory storage, for tests and one-off runs without a database."""

import threading
from dataclasses import replace
from typing import List, Optional

from data.stores import DecisionStore, ReasoningLog
from infrastructure.events import ReasoningEvent
from models.decision import DecisionRecord


class InMemoryReasoningLog(ReasoningLog):

    def __init__(self):
        self._events: List[ReasoningEvent] = []
        self._lock = threading.Lock()

    def append(self, event: ReasoningEvent) -> None:
        with self._lock:
            self._events.append(event)

    def clear_for(self, gameweek: int) -> int:
        with self._lock:
            before = len(self._events)
            self._events = [e for e in self._events if e.gameweek != gameweek]
            return before - len(self._events)

    def query(self, gameweek: int, limit: int = 50) -> List[ReasoningEvent]:
        with self._lock:
            matching = [e for e in self._events if e.gameweek == gameweek or e.gameweek is None]
        # Insertion order breaks timestamp ties
        return list(reversed(matching))[:limit]


class InMemoryDecisionStore(DecisionStore):

    def __init__(self):
        self._records: List[DecisionRecord] = []
        self._lock = threading.Lock()

    def save(self, record: DecisionRecord) -> DecisionRecord:
        with self._lock:
            stored = replace(record, id=len(self._records) + 1)
            self._records.append(stored)
            return stored

    def latest(self, gameweek: int) -> Optional[DecisionRecord]:
        with self._lock:
            for record in reversed(self._records):
                if record.gameweek == gameweek:
                    return record
        return None

    def recent(self, limit: int = 20) -> List[DecisionRecord]:
        with self._lock:
            return list(reversed(self._records))[:limit]
