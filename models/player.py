"""
Player and squad domain models.

Players are read-only records sourced from the FPL bootstrap data.
A SquadSlot pins a player to a roster position (1-11 starting, 12-15 bench)
together with the captaincy flags.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

INJURY_CHANCE_THRESHOLD = 75  # chance_of_playing below this is a concern


class Position(Enum):
    """Playing position as used by FPL (element_type 1-4)."""
    GKP = "GKP"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"

    @classmethod
    def from_element_type(cls, element_type: int) -> "Position":
        positions = {1: cls.GKP, 2: cls.DEF, 3: cls.MID, 4: cls.FWD}
        if element_type not in positions:
            raise ValueError(f"Unknown element_type: {element_type}")
        return positions[element_type]

    @property
    def element_type(self) -> int:
        return {"GKP": 1, "DEF": 2, "MID": 3, "FWD": 4}[self.value]


class PlayerStatus(Enum):
    """Availability status, collapsed from the FPL status codes."""
    AVAILABLE = "available"
    DOUBTFUL = "doubtful"
    UNAVAILABLE = "unavailable"
    OTHER = "other"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "PlayerStatus":
        # a=available, d=doubtful, i=injured, s=suspended, u=unavailable, n=not eligible
        if code == 'a':
            return cls.AVAILABLE
        if code == 'd':
            return cls.DOUBTFUL
        if code in ('i', 's', 'u', 'n'):
            return cls.UNAVAILABLE
        return cls.OTHER

    @property
    def selectable(self) -> bool:
        return self in (PlayerStatus.AVAILABLE, PlayerStatus.DOUBTFUL)


@dataclass(frozen=True)
class Player:
    """A player as seen by the decision engine."""
    id: int
    name: str  # web_name
    team: str  # short team name, e.g. 'ARS'
    team_id: int
    position: Position
    now_cost: int  # tenths of a million (85 == £8.5m)
    form: Optional[float] = None  # None when FPL has no form data
    total_points: int = 0
    points_per_game: float = 0.0
    expected_goal_involvements: float = 0.0
    status: PlayerStatus = PlayerStatus.AVAILABLE
    news: str = ""
    chance_of_playing: Optional[int] = None  # 0-100, None when not reported

    @property
    def price(self) -> float:
        """Price in millions, one decimal place."""
        return round(self.now_cost / 10, 1)

    @property
    def has_injury_concern(self) -> bool:
        if self.news:
            return True
        return (self.chance_of_playing is not None
                and self.chance_of_playing < INJURY_CHANCE_THRESHOLD)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'team': self.team,
            'team_id': self.team_id,
            'position': self.position.value,
            'price': self.price,
            'form': self.form,
            'total_points': self.total_points,
            'points_per_game': self.points_per_game,
            'expected_goal_involvements': self.expected_goal_involvements,
            'status': self.status.value,
            'news': self.news,
            'chance_of_playing': self.chance_of_playing,
        }


@dataclass(frozen=True)
class SquadSlot:
    """One of the 15 roster positions in the manager's squad."""
    position: int  # 1-11 starting XI, 12-15 bench
    player: Player
    is_captain: bool = False
    is_vice_captain: bool = False
    selling_price: Optional[int] = None  # tenths, may differ from now_cost

    def __post_init__(self):
        if not 1 <= self.position <= 15:
            raise ValueError(f"Squad position must be 1-15, got {self.position}")

    @property
    def is_starter(self) -> bool:
        return self.position <= 11
