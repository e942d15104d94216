"""
Candidate selection for transfer planning.

Splits players into the two pools the strategies work from:
- market: selectable players outside the squad, best form first
- weak links: squad members whose form has dropped below the threshold
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from models.player import Player, SquadSlot

logger = logging.getLogger('fpl_analyzer.planning')

WEAK_FORM_THRESHOLD = 4.0
DEFAULT_MARKET_LIMIT = 30


def _form_key(player: Player):
    # Highest form first, players without form data last
    return (player.form is None, -(player.form or 0.0))


def rank_by_form(players: Iterable[Player]) -> List[Player]:
    """Sort by form descending; stable, so equal form keeps input order."""
    return sorted(players, key=_form_key)


def select_market(all_players: Iterable[Player], exclude_ids: Optional[Set[int]] = None,
                  min_form: Optional[float] = None,
                  limit: Optional[int] = DEFAULT_MARKET_LIMIT) -> List[Player]:
    """
    Selectable players ranked by form.

    Args:
        all_players: Every player in the game
        exclude_ids: Players to leave out (normally the current squad)
        min_form: Minimum form to qualify, if any
        limit: Maximum number returned (None for no limit)
    """
    exclude_ids = exclude_ids or set()

    pool = []
    seen: Set[int] = set()
    for p in all_players:
        if p.id in exclude_ids or p.id in seen:
            continue
        if not p.status.selectable:
            continue
        if min_form is not None and (p.form is None or p.form < min_form):
            continue
        seen.add(p.id)
        pool.append(p)

    ranked = rank_by_form(pool)
    return ranked if limit is None else ranked[:limit]


def select_weak_links(squad: Sequence[SquadSlot],
                      threshold: float = WEAK_FORM_THRESHOLD) -> List[Player]:
    """Squad members with form below threshold, weakest first."""
    weak = [s.player for s in squad
            if s.player.form is not None and s.player.form < threshold]
    return sorted(weak, key=lambda p: p.form)


def injury_concerns(squad: Sequence[SquadSlot]) -> List[Player]:
    """Squad members with a news item or a chance of playing below 75%."""
    return [s.player for s in squad if s.player.has_injury_concern]


def squad_by_form(squad: Sequence[SquadSlot]) -> List[Player]:
    """Squad players ranked by form (captaincy order)."""
    return rank_by_form(s.player for s in squad)
