"""
Reasoning event definitions.

Reasoning events are the human-readable narration of an analysis run. The UI
polls them per gameweek and renders them in arrival order, so the order in
which a run emits them is part of the contract.

During a run, events are buffered in a ReasoningTrail. The Decision Recorder
writes the trail to the reasoning log at the end of the run.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional
import json


class ReasoningCategory(Enum):
    """Category tag shown next to each reasoning event."""
    START = "start"
    THINKING = "thinking"
    INFO = "info"
    INSIGHT = "insight"
    WARNING = "warning"
    SUCCESS = "success"
    CAPTAIN = "captain"
    TRANSFER = "transfer"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ReasoningEvent:
    """
    One line of the reasoning feed.

    gameweek is None for global events that show up in every gameweek's feed.
    """

    gameweek: Optional[int]
    message: str
    category: ReasoningCategory = ReasoningCategory.INFO
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        data = asdict(self)
        data['category'] = self.category.value
        data['timestamp'] = self.timestamp.isoformat()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReasoningEvent':
        """Deserialize event from dictionary."""
        timestamp = data.get('timestamp')
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return cls(
            gameweek=data.get('gameweek'),
            message=data['message'],
            category=ReasoningCategory(data.get('category', 'info')),
            timestamp=timestamp or _utcnow(),
        )

    @classmethod
    def from_json(cls, json_str: str) -> 'ReasoningEvent':
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        scope = "global" if self.gameweek is None else f"GW{self.gameweek}"
        return f"[{self.category.value}] {scope}: {self.message}"


class ReasoningTrail:
    """
    Ordered, run-local buffer of reasoning events for one gameweek.

    Strategies and the engine append to the trail as they compute; nothing
    is written to the shared log until the run finishes.
    """

    def __init__(self, gameweek: int):
        self.gameweek = gameweek
        self._events: List[ReasoningEvent] = []

    def emit(self, message: str,
             category: ReasoningCategory = ReasoningCategory.INFO) -> ReasoningEvent:
        event = ReasoningEvent(gameweek=self.gameweek, message=message, category=category)
        self._events.append(event)
        return event

    def start(self, message: str) -> ReasoningEvent:
        return self.emit(message, ReasoningCategory.START)

    def thinking(self, message: str) -> ReasoningEvent:
        return self.emit(message, ReasoningCategory.THINKING)

    def info(self, message: str) -> ReasoningEvent:
        return self.emit(message, ReasoningCategory.INFO)

    def insight(self, message: str) -> ReasoningEvent:
        return self.emit(message, ReasoningCategory.INSIGHT)

    def warning(self, message: str) -> ReasoningEvent:
        return self.emit(message, ReasoningCategory.WARNING)

    def success(self, message: str) -> ReasoningEvent:
        return self.emit(message, ReasoningCategory.SUCCESS)

    @property
    def events(self) -> List[ReasoningEvent]:
        return list(self._events)

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self._events]

    def __iter__(self) -> Iterator[ReasoningEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
