"""
FPL Rules Engine

Holds the FPL squad and transfer rules the engine states in its output, and
checks the captaincy invariants on squads and recommendations.

The engine does not decide squad legality: composition, club and budget
limits are passed to the reasoning service as constraints, not enforced.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from models.player import SquadSlot
from models.recommendation import Recommendation


@dataclass(frozen=True)
class SquadConstraints:
    """FPL squad building constraints."""
    TOTAL_PLAYERS = 15
    STARTING_PLAYERS = 11
    BENCH_PLAYERS = 4

    MAX_PLAYERS_PER_TEAM = 3

    GOALKEEPERS = 2
    DEFENDERS = 5
    MIDFIELDERS = 5
    FORWARDS = 3


@dataclass(frozen=True)
class TransferRules:
    """FPL transfer rules."""
    FREE_TRANSFERS_PER_WEEK = 1
    MAX_BANKED_TRANSFERS = 5
    POINTS_HIT_PER_TRANSFER = 4


class RulesEngine:
    """
    Source of truth for the rules the engine relies on.
    """

    def __init__(self):
        self.constraints = SquadConstraints()
        self.transfer_rules = TransferRules()

    # ========================================================================
    # CAPTAINCY
    # ========================================================================

    def validate_captaincy(self, squad: Sequence[SquadSlot]) -> Tuple[bool, str]:
        """
        Check the squad has at most one captain and at most one vice-captain,
        and that they are different players. Unflagged squads pass.
        """
        captains = [s for s in squad if s.is_captain]
        vice_captains = [s for s in squad if s.is_vice_captain]

        if len(captains) > 1:
            return False, "More than one captain designated"
        if len(vice_captains) > 1:
            return False, "More than one vice-captain designated"
        if captains and vice_captains and captains[0].player.id == vice_captains[0].player.id:
            return False, "Captain and vice-captain must be different players"

        return True, "Captaincy is valid"

    def validate_recommendation(self, recommendation: Recommendation) -> Tuple[bool, str]:
        """Check the recommendation's captain and vice-captain differ."""
        captain = recommendation.captain
        vice = recommendation.vice_captain
        if captain and vice and captain.id == vice.id:
            return False, f"Captain and vice-captain are both {captain.name}"

        outgoing = [t.player_out_id for t in recommendation.transfers]
        incoming = [t.player_in_id for t in recommendation.transfers]
        if len(set(outgoing)) != len(outgoing):
            return False, "A player is transferred out more than once"
        if len(set(incoming)) != len(incoming):
            return False, "A player is transferred in more than once"

        return True, "Recommendation is valid"

    # ========================================================================
    # TRANSFERS
    # ========================================================================

    def transfer_cost(self, transfers: int, free_transfers: int) -> int:
        """Points deducted for making `transfers` with `free_transfers` available."""
        extra = max(0, transfers - free_transfers)
        return extra * self.transfer_rules.POINTS_HIT_PER_TRANSFER

    def max_paid_transfers(self, max_penalty: int) -> int:
        """How many extra transfers a points budget (<= 0) allows."""
        return abs(max_penalty) // self.transfer_rules.POINTS_HIT_PER_TRANSFER

    def constraint_lines(self, free_transfers: int, max_penalty: int) -> List[str]:
        """Human-readable constraints for the reasoning service."""
        c = self.constraints
        hit = self.transfer_rules.POINTS_HIT_PER_TRANSFER
        return [
            f"Free transfers available: {free_transfers} "
            f"(unused transfers carry over, capped at {self.transfer_rules.MAX_BANKED_TRANSFERS})",
            f"Max point hits allowed: {max_penalty} "
            f"(each transfer beyond the free ones costs -{hit} points, "
            f"so at most {self.max_paid_transfers(max_penalty)} extra)",
            f"Must maintain valid squad: {c.GOALKEEPERS} GKP, {c.DEFENDERS} DEF, "
            f"{c.MIDFIELDERS} MID, {c.FORWARDS} FWD",
            f"Max {c.MAX_PLAYERS_PER_TEAM} players from same team",
            "Transfers must be within budget",
        ]
