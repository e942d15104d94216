"""Gameweek history entries used to derive free transfer entitlement."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GameweekHistoryEntry:
    """Transfers made in one past gameweek and whether they cost points."""
    gameweek: int
    transfers: int
    hit: bool = False
    transfer_cost: int = 0  # points deducted, 4 per extra transfer
