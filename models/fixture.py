"""
Fixture models.

Fixtures are immutable facts about the season schedule. FixtureEntry is a
single team's view of one fixture, used to build forward-looking profiles.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Fixture:
    """A scheduled match with per-side difficulty ratings (1-5, lower = easier)."""
    id: int
    gameweek: int
    team_h: int
    team_a: int
    team_h_difficulty: int
    team_a_difficulty: int


@dataclass(frozen=True)
class FixtureEntry:
    """One upcoming fixture from a single team's perspective."""
    gameweek: int
    difficulty: int
    is_home: bool
    opponent: int

    @property
    def label(self) -> str:
        """Compact label, e.g. 'GW12(2H)'."""
        return f"GW{self.gameweek}({self.difficulty}{'H' if self.is_home else 'A'})"


@dataclass(frozen=True)
class SpecialGameweek:
    """A gameweek where some teams play twice or not at all."""
    gameweek: int
    teams_with_double_fixture: int
    teams_with_no_fixture: int
    double_teams: Tuple[int, ...] = ()
    blank_teams: Tuple[int, ...] = ()

    @property
    def is_double(self) -> bool:
        return self.teams_with_double_fixture > 0

    @property
    def is_blank(self) -> bool:
        return self.teams_with_no_fixture > 0

    def describe(self) -> str:
        return (f"GW{self.gameweek}: {self.teams_with_double_fixture} teams with doubles, "
                f"{self.teams_with_no_fixture} teams blanking")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gameweek': self.gameweek,
            'teams_with_double_fixture': self.teams_with_double_fixture,
            'teams_with_no_fixture': self.teams_with_no_fixture,
        }
