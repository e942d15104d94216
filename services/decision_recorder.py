"""
Decision Recorder

Owns the two pieces of state that outlive a run: the reasoning log and the
decision store. Both are written only at the end of a run.

A successful run rewrites the gameweek's log: the run's buffered events,
then a completion marker and a narration of the result (insights, transfers,
captaincy). A failed run rewrites the log with whatever was buffered plus a
single error event, and stores no decision.

Usage:
    from data.memory_store import InMemoryDecisionStore, InMemoryReasoningLog
    from services.decision_recorder import DecisionRecorder

    recorder = DecisionRecorder(InMemoryReasoningLog(), InMemoryDecisionStore())
    record = recorder.record(gameweek, recommendation, trail, strategy="heuristic")
    feed = recorder.reasoning_log(gameweek)
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from data.stores import DecisionStore, ReasoningLog
from infrastructure.events import ReasoningCategory, ReasoningEvent, ReasoningTrail
from models.decision import DecisionRecord
from models.recommendation import Recommendation

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 50
DEFAULT_DECISION_LIMIT = 20


class DecisionRecorder:
    """Writes run results to the reasoning log and the decision store."""

    def __init__(self, log: ReasoningLog, store: DecisionStore):
        self.log = log
        self.store = store

    def record(self, gameweek: int, recommendation: Recommendation,
               trail: Optional[ReasoningTrail] = None,
               strategy: Optional[str] = None) -> DecisionRecord:
        """
        Rewrite the gameweek's log and store the decision.

        Args:
            gameweek: Gameweek the recommendation is for
            recommendation: Validated recommendation
            trail: Events the run buffered, written before the result narration
            strategy: Name of the strategy that produced the recommendation

        Returns:
            The stored DecisionRecord, with its id assigned
        """
        self._rewrite(gameweek, trail)

        self._append(gameweek, "Analysis complete!", ReasoningCategory.SUCCESS)

        for insight in recommendation.key_insights:
            self._append(gameweek, insight, ReasoningCategory.INSIGHT)

        if recommendation.transfers:
            for transfer in recommendation.transfers:
                self._append(
                    gameweek,
                    f"📝 Transfer: {transfer.player_out_name} → {transfer.player_in_name}",
                    ReasoningCategory.TRANSFER
                )
                self._append(gameweek, f"   Reason: {transfer.reason}", ReasoningCategory.INFO)
        else:
            self._append(gameweek, "No transfers recommended - team looks solid!",
                         ReasoningCategory.SUCCESS)

        if recommendation.captain:
            captain = recommendation.captain
            self._append(gameweek, f"👑 Captain: {captain.name} - {captain.reason}",
                         ReasoningCategory.CAPTAIN)
        if recommendation.vice_captain:
            vice = recommendation.vice_captain
            self._append(gameweek, f"🥈 Vice: {vice.name} - {vice.reason}", ReasoningCategory.INFO)

        record = self.store.save(DecisionRecord(
            gameweek=gameweek,
            recommendation=recommendation,
            created_at=datetime.now(timezone.utc),
            strategy=strategy or "heuristic",
        ))
        logger.info(f"DecisionRecorder: Recorded decision {record.id} for GW{gameweek}")
        return record

    def record_failure(self, gameweek: int, trail: Optional[ReasoningTrail],
                       error: BaseException) -> None:
        """Rewrite the gameweek's log with the partial trail and one error event."""
        self._rewrite(gameweek, trail)
        self._append(gameweek, f"Error during analysis: {error}", ReasoningCategory.ERROR)
        logger.warning(f"DecisionRecorder: Recorded failure for GW{gameweek}: {error}")

    def latest_decision(self, gameweek: int) -> Optional[DecisionRecord]:
        """Most recent decision for the gameweek, or None if it was never analysed."""
        return self.store.latest(gameweek)

    def recent_decisions(self, limit: int = DEFAULT_DECISION_LIMIT) -> List[DecisionRecord]:
        return self.store.recent(limit)

    def reasoning_log(self, gameweek: int, limit: int = DEFAULT_LOG_LIMIT) -> List[ReasoningEvent]:
        """Events for the gameweek plus global events, newest first."""
        return self.log.query(gameweek, limit)

    def log_global(self, message: str,
                   category: ReasoningCategory = ReasoningCategory.INFO) -> ReasoningEvent:
        """Append an event that shows up in every gameweek's feed."""
        event = ReasoningEvent(gameweek=None, message=message, category=category)
        self.log.append(event)
        return event

    def _rewrite(self, gameweek: int, trail: Optional[ReasoningTrail]):
        removed = self.log.clear_for(gameweek)
        logger.debug(f"DecisionRecorder: Cleared {removed} old events for GW{gameweek}")
        if trail is None:
            return
        for event in trail:
            self.log.append(event)

    def _append(self, gameweek: int, message: str, category: ReasoningCategory):
        self.log.append(ReasoningEvent(gameweek=gameweek, message=message, category=category))
