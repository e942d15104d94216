"""Builders for domain objects used across the test suite."""

from typing import Dict, List, Optional

from models.fixture import Fixture
from models.player import Player, PlayerStatus, Position, SquadSlot

SQUAD_SHAPE = [Position.GKP] * 2 + [Position.DEF] * 5 + [Position.MID] * 5 + [Position.FWD] * 3
TEAM_SHORT_NAMES = {i: f"T{i:02d}" for i in range(1, 21)}


def make_player(id: int, position: Position = Position.MID, form: Optional[float] = 5.0,
                team_id: int = 1, now_cost: int = 60, total_points: int = 30,
                status: PlayerStatus = PlayerStatus.AVAILABLE, news: str = "",
                chance_of_playing: Optional[int] = None, name: Optional[str] = None) -> Player:
    return Player(
        id=id,
        name=name or f"Player{id}",
        team=TEAM_SHORT_NAMES.get(team_id, "UNK"),
        team_id=team_id,
        position=position,
        now_cost=now_cost,
        form=form,
        total_points=total_points,
        points_per_game=round(total_points / 10, 1),
        status=status,
        news=news,
        chance_of_playing=chance_of_playing,
    )


def make_squad(forms: Optional[Dict[int, Optional[float]]] = None,
               default_form: float = 5.0, **overrides) -> List[SquadSlot]:
    """
    A legal 15-player squad, ids 1-15 in roster order (2 GKP, 5 DEF, 5 MID, 3 FWD).

    Args:
        forms: form override per player id
        default_form: form for everyone else
        overrides: player id -> dict of make_player kwargs, keyed 'p<id>'
    """
    forms = forms or {}
    squad = []
    for i, position in enumerate(SQUAD_SHAPE, start=1):
        kwargs = dict(position=position, form=forms.get(i, default_form),
                      team_id=(i - 1) % 10 + 1)
        kwargs.update(overrides.get(f"p{i}", {}))
        squad.append(SquadSlot(position=i, player=make_player(i, **kwargs)))
    return squad


def make_round(gameweek: int, first_id: int, teams: Optional[List[int]] = None,
               home_difficulty: int = 2, away_difficulty: int = 3) -> List[Fixture]:
    """One fixture per consecutive pair of teams (1v2, 3v4, ...)."""
    teams = teams if teams is not None else list(range(1, 21))
    fixtures = []
    for n, (home, away) in enumerate(zip(teams[::2], teams[1::2])):
        fixtures.append(Fixture(
            id=first_id + n, gameweek=gameweek, team_h=home, team_a=away,
            team_h_difficulty=home_difficulty, team_a_difficulty=away_difficulty,
        ))
    return fixtures


def make_season(first_gameweek: int, last_gameweek: int) -> List[Fixture]:
    fixtures = []
    for gw in range(first_gameweek, last_gameweek + 1):
        fixtures.extend(make_round(gw, first_id=gw * 100))
    return fixtures
