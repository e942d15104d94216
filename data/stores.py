"""
Storage capabilities used by the Decision Recorder.

Injected rather than global so a run can be exercised against an in-memory
store in tests and against sqlite in production.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from infrastructure.events import ReasoningEvent
from models.decision import DecisionRecord


class ReasoningLog(ABC):
    """Append-only reasoning feed, scoped by gameweek."""

    @abstractmethod
    def append(self, event: ReasoningEvent) -> None:
        """Append one event."""

    @abstractmethod
    def clear_for(self, gameweek: int) -> int:
        """Remove every event for gameweek; returns how many were removed."""

    @abstractmethod
    def query(self, gameweek: int, limit: int = 50) -> List[ReasoningEvent]:
        """Events for gameweek plus global events, newest first."""


class DecisionStore(ABC):
    """Decision snapshots, one per successful run."""

    @abstractmethod
    def save(self, record: DecisionRecord) -> DecisionRecord:
        """Persist the record and return it with its id assigned."""

    @abstractmethod
    def latest(self, gameweek: int) -> Optional[DecisionRecord]:
        """Most recently saved record for gameweek, or None."""

    @abstractmethod
    def recent(self, limit: int = 20) -> List[DecisionRecord]:
        """Most recent records across all gameweeks, newest first."""
