"""Persisted decision snapshot."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from models.recommendation import Recommendation


@dataclass(frozen=True)
class DecisionRecord:
    """
    One stored Recommendation for a gameweek.

    Created once per successful run and never mutated.
    """
    gameweek: int
    recommendation: Recommendation
    created_at: datetime
    strategy: str = "heuristic"
    id: Optional[int] = None  # assigned by the store

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'gameweek': self.gameweek,
            'strategy': self.strategy,
            'created_at': self.created_at.isoformat(),
            'recommendation': self.recommendation.to_dict(),
        }
