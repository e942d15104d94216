"""
Base Strategy Class

Both recommendation strategies implement one capability: given the enriched
analysis context, produce a Recommendation. Which strategy runs is decided by
configuration when the engine is built, never inside the engine.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from infrastructure.events import ReasoningTrail
from models.fixture import FixtureEntry, SpecialGameweek
from models.player import Player, SquadSlot
from models.recommendation import Chip, Recommendation
from planning.fixture_analyzer import FixtureRun

logger = logging.getLogger(__name__)


@dataclass
class AnalysisContext:
    """
    Everything a strategy needs for one gameweek, built by the engine from
    the raw request (free transfers, fixture profiles, candidate pools).
    """
    gameweek: int
    squad: Sequence[SquadSlot]
    market: List[Player]  # selectable, in-form, not in the squad
    top_players: List[Player]  # selectable, best form first, squad included
    free_transfers: int
    budget: float
    max_penalty: int = -8
    fixture_profiles: Dict[int, List[FixtureEntry]] = field(default_factory=dict)
    easiest_runs: List[FixtureRun] = field(default_factory=list)
    hardest_runs: List[FixtureRun] = field(default_factory=list)
    easy_fixture_teams: List[Tuple[int, List[FixtureEntry]]] = field(default_factory=list)
    special_gameweeks: List[SpecialGameweek] = field(default_factory=list)
    chips_available: List[Chip] = field(default_factory=list)
    chips_used: List[Chip] = field(default_factory=list)
    injury_concerns: List[Player] = field(default_factory=list)
    team_names: Dict[int, str] = field(default_factory=dict)

    def team_name(self, team_id: int) -> str:
        return self.team_names.get(team_id, f"Team {team_id}")


class RecommendationStrategy(ABC):
    """
    Base class for recommendation strategies.

    Subclasses must implement recommend(), emitting reasoning events into the
    trail in the order they compute them.
    """

    name = "base"

    @abstractmethod
    def recommend(self, context: AnalysisContext, trail: ReasoningTrail) -> Recommendation:
        """Produce a recommendation for context.gameweek."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
