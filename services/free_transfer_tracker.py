"""
Free Transfer Tracker Service

Derives the number of free transfers available this gameweek from the
manager's gameweek-by-gameweek history. The entitlement is never stored:
it is recomputed from the full history on every request.

Usage:
    from services.free_transfer_tracker import FreeTransferTracker

    tracker = FreeTransferTracker()
    result = tracker.from_history_response(history_json, target_gw=12)
    print(f"Free transfers: {result['free_transfers']}")
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from models.history import GameweekHistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_FREE_TRANSFERS = 1
MAX_BANKED_TRANSFERS = 5


def compute_entitlement(history: Iterable[GameweekHistoryEntry]) -> int:
    """
    Fold the history into this gameweek's free transfer count (1-5).

    Per gameweek, in chronological order:
    - hit taken: reset to 1, nothing carries over
    - transfers made without a hit: min(5, current - made + 1), floored at 1
    - no transfers: min(5, current + 1)
    """
    entitlement = DEFAULT_FREE_TRANSFERS

    for entry in history:
        if entry.transfers < 0:
            raise ValueError(f"GW{entry.gameweek}: negative transfer count {entry.transfers}")

        if entry.hit:
            entitlement = DEFAULT_FREE_TRANSFERS
        elif entry.transfers > 0:
            entitlement = min(MAX_BANKED_TRANSFERS, entitlement - entry.transfers + 1)
            entitlement = max(DEFAULT_FREE_TRANSFERS, entitlement)
        else:
            entitlement = min(MAX_BANKED_TRANSFERS, entitlement + 1)

    return entitlement


def history_from_response(history: Dict[str, Any]) -> List[GameweekHistoryEntry]:
    """Convert an FPL entry/{id}/history/ response into history entries."""
    entries = []
    for gw_data in history.get('current', []) or []:
        cost = gw_data.get('event_transfers_cost') or 0
        entries.append(GameweekHistoryEntry(
            gameweek=gw_data['event'],
            transfers=gw_data.get('event_transfers') or 0,
            hit=cost > 0,
            transfer_cost=cost,
        ))
    entries.sort(key=lambda e: e.gameweek)
    return entries


class FreeTransferTracker:
    """
    Calculates available free transfers from FPL history data.

    FPL Rules:
    - 1 free transfer per gameweek, banked if unused
    - Max 5 banked free transfers
    - Taking a hit (-4 per extra transfer) resets the bank to 1
    """

    def calculate(
        self,
        history: List[GameweekHistoryEntry],
        target_gw: Optional[int] = None,
        override_ft: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Calculate free transfers for the target gameweek.

        Args:
            history: Past gameweeks, any order
            target_gw: Only history before this gameweek counts (default: all)
            override_ft: Manual override for special events

        Returns:
            {
                'free_transfers': int,      # Available FTs for target GW
                'calculated': int,          # What the history alone gives
                'last_gw_transfers': int,   # Transfers made in the last counted GW
                'hits_taken': int,          # GWs in which a hit was taken
                'calculation': str,         # Human-readable explanation
                'is_override': bool,
                'target_gw': Optional[int],
            }
        """
        counted = sorted(history, key=lambda e: e.gameweek)
        if target_gw is not None:
            counted = [e for e in counted if e.gameweek < target_gw]

        calculated = compute_entitlement(counted)
        last = counted[-1] if counted else None
        hits_taken = sum(1 for e in counted if e.hit)

        if not counted:
            calculation = f"New team - {DEFAULT_FREE_TRANSFERS} FT available"
        elif last.hit:
            calculation = f"GW{last.gameweek}: took a -{last.transfer_cost} hit → reset to 1 FT"
        else:
            calculation = (
                f"GW{last.gameweek}: made {last.transfers} transfer(s) → "
                f"{calculated} FT(s) available"
            )

        if override_ft is not None:
            free_transfers = override_ft
            calculation = f"Override: {override_ft} FTs (calculated was {calculated})"
        else:
            free_transfers = calculated

        result = {
            'free_transfers': free_transfers,
            'calculated': calculated,
            'last_gw_transfers': last.transfers if last else 0,
            'hits_taken': hits_taken,
            'calculation': calculation,
            'is_override': override_ft is not None,
            'target_gw': target_gw,
        }

        logger.info(
            f"FreeTransferTracker: GW{target_gw if target_gw is not None else '?'} - "
            f"{free_transfers} FTs available - {calculation}"
        )
        return result

    def from_history_response(
        self,
        history: Dict[str, Any],
        target_gw: Optional[int] = None,
        override_ft: Optional[int] = None
    ) -> Dict[str, Any]:
        """Same as calculate(), starting from the raw FPL history response."""
        return self.calculate(history_from_response(history), target_gw, override_ft)


def get_free_transfers(history: Dict[str, Any], override_ft: Optional[int] = None) -> int:
    """
    Quick helper to get just the free transfer count from a history response.
    """
    tracker = FreeTransferTracker()
    return tracker.from_history_response(history, override_ft=override_ft)['free_transfers']
