"""
Heuristic Strategy

Rule-based recommendations that need no external service. Always available,
and used as the fallback when the reasoning service is down (if configured).

Rules:
- Captain is the squad's highest-form player, vice-captain the second highest
- Weak links (form below 4.0) are swapped one-for-one, weakest first, for
  same-position market players whose form is more than 1.0 higher
- Never more transfers than are free this week
- Chips are held; blank/double gameweeks ahead are flagged, not planned

Deterministic: identical inputs give identical recommendations.
"""

import logging
from typing import List, Optional, Set

from agents.base_strategy import AnalysisContext, RecommendationStrategy
from infrastructure.events import ReasoningCategory, ReasoningTrail
from models.player import Player
from models.recommendation import (
    CaptainPick,
    Chip,
    ChipAdvice,
    Confidence,
    Recommendation,
    TransferProposal,
)
from planning.candidate_selector import (
    WEAK_FORM_THRESHOLD,
    select_weak_links,
    squad_by_form,
)

logger = logging.getLogger('fpl_analyzer.heuristic')

FORM_MARGIN = 1.0
MAX_KEY_INSIGHTS = 3

HOLD_REASONING = (
    "No blank or double gameweeks detected. Save chips for better opportunities - "
    "fixture congestion usually brings blanks and doubles later in the season."
)


def _fmt_form(player: Player) -> str:
    return "n/a" if player.form is None else f"{player.form}"


def _tenths(value: float) -> int:
    # FPL form has one decimal place
    return round(value * 10)


class HeuristicStrategy(RecommendationStrategy):
    """
    Form-driven recommendations.

    Args:
        weak_form_threshold: Squad players below this form are transfer-out candidates
        form_margin: A replacement's form must beat the outgoing player's by more than this
    """

    name = "heuristic"

    def __init__(self, weak_form_threshold: float = WEAK_FORM_THRESHOLD,
                 form_margin: float = FORM_MARGIN):
        self.weak_form_threshold = weak_form_threshold
        self.form_margin = form_margin

    def recommend(self, context: AnalysisContext, trail: ReasoningTrail) -> Recommendation:
        free_transfers = context.free_transfers
        trail.start("Running rule-based analysis...")

        ranked = squad_by_form(context.squad)
        captain = ranked[0] if ranked else None
        vice_captain = ranked[1] if len(ranked) > 1 else None

        trail.thinking(f"Evaluating {len(context.squad)} players in your squad...")
        trail.info(f"You have {free_transfers} free transfer(s) available")
        trail.info(f"Found {len(context.market)} high-form players not in your squad")

        weak_links = select_weak_links(context.squad, self.weak_form_threshold)
        transfers = self._match_transfers(weak_links, context, trail)

        if not transfers:
            trail.success("No obvious transfer improvements found - squad looks solid")
        elif len(transfers) < free_transfers:
            trail.info(
                f"Recommending {len(transfers)} of {free_transfers} available transfers "
                f"- quality over quantity"
            )

        insights: List[str] = []

        if context.injury_concerns:
            names = ', '.join(p.name for p in context.injury_concerns)
            insights.append(f"Watch {names} - injury concerns reported")

        top_performers = [p.name for p in ranked[:3]]
        if top_performers:
            insights.append(f"Your top performers: {', '.join(top_performers)}")
            trail.insight(f"Top form in your squad: {', '.join(top_performers)}")

        if captain:
            trail.emit(
                f"Recommending {captain.name} as captain - highest form ({_fmt_form(captain)}) in squad",
                ReasoningCategory.CAPTAIN
            )

        trail.thinking("Evaluating chip strategy...")
        chip_advice, chip_note = self._chip_advice(context)
        insights.append(chip_note)
        trail.insight(chip_note)

        recommendation = Recommendation(
            transfers=transfers,
            captain=self._captain_pick(captain, vice=False),
            vice_captain=self._captain_pick(vice_captain, vice=True),
            chip_advice=chip_advice,
            confidence=Confidence.MEDIUM if transfers else Confidence.HIGH,
            summary=self._summary(transfers, captain),
            key_insights=insights[:MAX_KEY_INSIGHTS],
        )

        logger.info(
            f"HeuristicStrategy: GW{context.gameweek} - {len(transfers)} transfer(s), "
            f"captain {captain.name if captain else 'none'}"
        )
        return recommendation

    # ------------------------------------------------------------------

    def _match_transfers(self, weak_links: List[Player], context: AnalysisContext,
                         trail: ReasoningTrail) -> List[TransferProposal]:
        """Pair weak links with replacements, one-to-one, up to the free transfer count."""
        transfers: List[TransferProposal] = []
        used_in_ids: Set[int] = set()
        used_out_ids: Set[int] = set()

        for weak in weak_links:
            if len(transfers) >= context.free_transfers:
                break
            if weak.id in used_out_ids:
                continue

            replacement = self._find_replacement(weak, context.market, used_in_ids)
            if replacement is None:
                continue

            trail.warning(f"Identified {weak.name} (form: {_fmt_form(weak)}) as potential transfer out")
            trail.insight(f"{replacement.name} has excellent form ({_fmt_form(replacement)})")

            transfers.append(TransferProposal(
                player_out_id=weak.id,
                player_out_name=weak.name,
                player_in_id=replacement.id,
                player_in_name=replacement.name,
                reason=self._transfer_reason(weak, replacement, context),
            ))
            used_in_ids.add(replacement.id)
            used_out_ids.add(weak.id)

        return transfers

    def _find_replacement(self, weak: Player, market: List[Player],
                          used_in_ids: Set[int]) -> Optional[Player]:
        # Market is ranked by form, so the first match is the best one
        for candidate in market:
            if candidate.position != weak.position or candidate.id in used_in_ids:
                continue
            if candidate.form is None:
                continue
            if _tenths(candidate.form) - _tenths(weak.form) > _tenths(self.form_margin):
                return candidate
        return None

    def _transfer_reason(self, weak: Player, replacement: Player,
                         context: AnalysisContext) -> str:
        reason = (
            f"{weak.name} has poor form ({_fmt_form(weak)}). "
            f"{replacement.name} offers better value with form of {_fmt_form(replacement)}"
        )
        upcoming = context.fixture_profiles.get(replacement.team_id, [])[:5]
        if upcoming:
            avg = sum(e.difficulty for e in upcoming) / len(upcoming)
            reason += f" and an average fixture difficulty of {avg:.1f} over the next {len(upcoming)}"
        return reason + "."

    def _captain_pick(self, player: Optional[Player], vice: bool) -> Optional[CaptainPick]:
        if player is None:
            return None
        if vice:
            reason = f"Second highest form ({_fmt_form(player)}) - reliable backup option"
        else:
            reason = (f"Best form in squad ({_fmt_form(player)}) with "
                      f"{player.total_points} total points this season")
        return CaptainPick(id=player.id, name=player.name, reason=reason)

    def _chip_advice(self, context: AnalysisContext):
        """Hold chips; flag special gameweeks without choosing a chip for them."""
        available = [c.display_name for c in context.chips_available]
        if available:
            future = (f"Chips left: {', '.join(available)}. Hold Wildcard for fixture swings, "
                      f"Free Hit for blank GWs, Bench Boost & Triple Captain for double GWs.")
        else:
            future = "No chips left to plan around."

        if context.special_gameweeks:
            labels = ', '.join(f"GW{s.gameweek}" for s in context.special_gameweeks)
            details = '; '.join(s.describe() for s in context.special_gameweeks)
            reasoning = f"Blank/double gameweeks ahead - {details}. Hold chips this week and plan around them."
            note = f"Special gameweeks ahead ({labels}) - plan chips around them"
        else:
            reasoning = HOLD_REASONING
            note = "No blank or double gameweeks ahead - holding chips"

        advice = ChipAdvice(
            chip_to_play_this_week=Chip.NONE,
            reasoning=reasoning,
            future_strategy=future,
        )
        return advice, note

    def _summary(self, transfers: List[TransferProposal], captain: Optional[Player]) -> str:
        captain_name = captain.name if captain else "No one"
        if transfers:
            return (f"Found {len(transfers)} recommended transfer(s) to improve your squad. "
                    f"{captain_name} is the top captain pick based on current form.")
        return (f"Your squad is in good shape! No urgent transfers needed. "
                f"{captain_name} remains the best captain option.")
