"""
FPL raw-record adapters.

Turns the JSON payloads of the public FPL API (bootstrap-static, fixtures,
entry picks and entry history) into domain models and assembles a
RecommendationRequest. No network I/O happens here: callers fetch the
payloads however they like and pass them in.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from analyzer.engine import RecommendationRequest
from infrastructure.errors import ConfigurationError
from models.fixture import Fixture
from models.history import GameweekHistoryEntry
from models.player import Player, PlayerStatus, Position, SquadSlot
from services.chip_availability import ChipPolicy
from services.free_transfer_tracker import FreeTransferTracker, history_from_response
from utils.gameweek import get_target_gameweek

logger = logging.getLogger('fpl_analyzer.fpl_records')


def _to_float(value: Any) -> Optional[float]:
    # FPL sends most decimals as strings ("5.2"); blank means no data
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def player_from_element(element: Dict[str, Any], teams: Iterable[Dict[str, Any]]) -> Player:
    """Build a Player from one bootstrap `elements` record."""
    team_id = element['team']
    short_name = next(
        (t.get('short_name') for t in teams if t.get('id') == team_id), None
    ) or 'Unknown'

    return Player(
        id=element['id'],
        name=element.get('web_name', ''),
        team=short_name,
        team_id=team_id,
        position=Position.from_element_type(element['element_type']),
        now_cost=element.get('now_cost', 0),
        form=_to_float(element.get('form')),
        total_points=element.get('total_points') or 0,
        points_per_game=_to_float(element.get('points_per_game')) or 0.0,
        expected_goal_involvements=_to_float(element.get('expected_goal_involvements')) or 0.0,
        status=PlayerStatus.from_code(element.get('status')),
        news=element.get('news') or '',
        chance_of_playing=element.get('chance_of_playing_next_round'),
    )


def players_from_bootstrap(bootstrap: Dict[str, Any]) -> List[Player]:
    """All players in a bootstrap-static payload, in payload order."""
    teams = bootstrap.get('teams', [])
    players = [player_from_element(e, teams) for e in bootstrap.get('elements', [])]
    logger.debug(f"FplRecords: Parsed {len(players)} players")
    return players


def fixtures_from_api(fixtures: Iterable[Dict[str, Any]]) -> List[Fixture]:
    """Scheduled fixtures; ones without a gameweek yet (`event` null) are skipped."""
    result = []
    for f in fixtures:
        if f.get('event') is None:
            continue
        result.append(Fixture(
            id=f['id'],
            gameweek=f['event'],
            team_h=f['team_h'],
            team_a=f['team_a'],
            team_h_difficulty=f['team_h_difficulty'],
            team_a_difficulty=f['team_a_difficulty'],
        ))
    return result


def squad_from_picks(picks: Iterable[Dict[str, Any]],
                     players_by_id: Mapping[int, Player]) -> List[SquadSlot]:
    """
    Squad slots from entry picks, ordered by roster position.

    Raises:
        ConfigurationError: if a pick references a player not in players_by_id
    """
    squad = []
    for pick in picks:
        player = players_by_id.get(pick['element'])
        if player is None:
            raise ConfigurationError(f"Pick references unknown player {pick['element']}")
        squad.append(SquadSlot(
            position=pick['position'],
            player=player,
            is_captain=bool(pick.get('is_captain')),
            is_vice_captain=bool(pick.get('is_vice_captain')),
            selling_price=pick.get('selling_price'),
        ))
    return sorted(squad, key=lambda s: s.position)


def history_from_api(history: Dict[str, Any]) -> List[GameweekHistoryEntry]:
    """Gameweek transfer history from an entry history payload."""
    return history_from_response(history)


def chips_used_from_history(history: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Chip plays from an entry history payload, e.g. [{'name': 'wildcard', 'event': 5}]."""
    return [
        {'name': c.get('name'), 'event': c.get('event')}
        for c in history.get('chips', []) or []
    ]


def target_gameweek(events: Iterable[Dict[str, Any]]) -> int:
    """Next gameweek, else current + 1; ConfigurationError when neither exists."""
    return get_target_gameweek(events)


def build_request(bootstrap: Dict[str, Any], fixtures: Iterable[Dict[str, Any]],
                  picks: Iterable[Dict[str, Any]], history: Dict[str, Any],
                  bank: int = 0, free_transfers: Optional[int] = None,
                  max_penalty: int = -8,
                  chip_policy: Optional[ChipPolicy] = None) -> RecommendationRequest:
    """
    Assemble a RecommendationRequest from raw FPL payloads.

    Args:
        bootstrap: bootstrap-static payload (elements, teams, events)
        fixtures: fixtures payload
        picks: the manager's 15 picks
        history: entry history payload (current, chips)
        bank: money in the bank, tenths of a million
        free_transfers: entitlement reported by FPL, when known; otherwise
            derived from the history
        max_penalty: most points the manager will spend on hits (<= 0)
        chip_policy: seasonal chip allowances (default: config/chip_policy.yaml)
    """
    gameweek = target_gameweek(bootstrap.get('events', []))

    players = players_from_bootstrap(bootstrap)
    players_by_id = {p.id: p for p in players}
    squad = squad_from_picks(picks, players_by_id)

    if free_transfers is None:
        free_transfers = FreeTransferTracker().calculate(
            history_from_api(history), target_gw=gameweek
        )['free_transfers']

    chips_used = chips_used_from_history(history)
    policy = chip_policy or ChipPolicy.load()

    return RecommendationRequest(
        squad=squad,
        all_players=players,
        fixtures=fixtures_from_api(fixtures),
        budget=round((bank or 0) / 10, 1),
        free_transfers_hint=free_transfers,
        gameweek=gameweek,
        max_penalty=max_penalty,
        chips_available=policy.available_chips(chips_used),
        chips_used=[c['name'] for c in chips_used],
    )
