#!/usr/bin/env python3
"""
Gameweek Utilities

Single source of truth for which gameweek an analysis targets.
Works on the `events` list of the FPL bootstrap payload
({'id': 8, 'is_current': True, 'is_next': False, 'finished': False, ...}).
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from infrastructure.errors import ConfigurationError

logger = logging.getLogger('fpl_analyzer.gameweek_utils')

Event = Dict[str, Any]


def get_current_gameweek(events: Iterable[Event]) -> Optional[int]:
    """
    Get the current gameweek ID.

    Returns:
        int: Current gameweek ID (e.g., 8)
        None: If no gameweek is flagged current (pre-season)
    """
    for event in events:
        if event.get('is_current'):
            return event['id']
    logger.debug("GameweekUtils: No current gameweek flagged")
    return None


def get_next_gameweek(events: Iterable[Event]) -> Optional[int]:
    """
    Get the next gameweek ID.

    Returns:
        int: Next gameweek ID
        None: If no next gameweek is flagged (end of season)
    """
    for event in events:
        if event.get('is_next'):
            return event['id']
    logger.debug("GameweekUtils: No next gameweek flagged")
    return None


def get_target_gameweek(events: Iterable[Event]) -> int:
    """
    Gameweek a recommendation should be produced for.

    The next gameweek when FPL flags one, otherwise the one after the
    current gameweek.

    Raises:
        ConfigurationError: if neither a next nor a current gameweek exists
    """
    events = list(events)

    next_gw = get_next_gameweek(events)
    if next_gw is not None:
        return next_gw

    current_gw = get_current_gameweek(events)
    if current_gw is not None:
        logger.info(f"GameweekUtils: No next gameweek flagged, using GW{current_gw + 1}")
        return current_gw + 1

    raise ConfigurationError("Cannot determine the target gameweek: no current or next gameweek")


def get_latest_finished_gameweek(events: Iterable[Event]) -> Optional[int]:
    """
    Get the most recent finished gameweek.

    Returns:
        int: Latest finished gameweek ID
        None: If no gameweeks finished yet
    """
    finished: List[int] = [e['id'] for e in events if e.get('finished')]
    return max(finished) if finished else None


def is_gameweek_finished(events: Iterable[Event], gameweek_id: int) -> bool:
    """Check if a gameweek is finished."""
    for event in events:
        if event.get('id') == gameweek_id:
            return bool(event.get('finished'))
    return False
