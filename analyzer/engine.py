"""
Decision Engine

Entry point for one recommendation run:

    1. Validate the request
    2. Take the gameweek's run lock (one in-flight run per gameweek)
    3. Enrich the raw data: fixture profiles, blank/double gameweeks,
       fixture-run rankings, market and weak-link pools
    4. Ask the configured strategy for a Recommendation
    5. Check the recommendation, then hand it and the run's reasoning trail
       to the Decision Recorder

Usage:
    from analyzer.engine import create_engine
    from utils.config import load_config

    engine = create_engine(load_config())
    recommendation = engine.produce_recommendation(request)
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from agents.base_strategy import AnalysisContext, RecommendationStrategy
from agents.heuristic import HeuristicStrategy
from agents.narrative import NarrativeStrategy
from analyzer.llm_client import ReasoningClient
from data.database import Database, SqliteDecisionStore, SqliteReasoningLog
from infrastructure.errors import (
    AnalysisInProgress,
    ConfigurationError,
    ParseError,
    UpstreamUnavailable,
)
from infrastructure.events import ReasoningTrail
from models.fixture import Fixture
from models.player import Player, SquadSlot
from models.recommendation import Recommendation
from planning.candidate_selector import injury_concerns, select_market
from planning.fixture_analyzer import FixtureAnalyzer, easy_fixture_teams
from rules.rules_engine import RulesEngine
from services.chip_availability import normalise_chips
from services.decision_recorder import DecisionRecorder

logger = logging.getLogger('fpl_analyzer.engine')


@dataclass
class RecommendationRequest:
    """Raw inputs for one run, as assembled by the caller."""
    squad: Sequence[SquadSlot]
    all_players: Sequence[Player]
    fixtures: Sequence[Fixture]
    budget: float  # millions
    free_transfers_hint: int
    gameweek: Optional[int]
    max_penalty: int = -8
    chips_available: Iterable[Any] = field(default_factory=list)
    chips_used: Iterable[Any] = field(default_factory=list)


@dataclass
class EngineSettings:
    """Tunables for context building and run serialisation."""
    market_min_form: float = 4.0
    market_limit: int = 30
    top_players_limit: int = 100
    profile_window: int = 5
    special_lookahead: int = 10
    ranking_fixtures: int = 5
    season_length: Optional[int] = 38
    lock_timeout_seconds: float = 30.0

    @classmethod
    def from_config(cls, decision_config: Dict[str, Any]) -> "EngineSettings":
        """Pick the engine's keys out of the decision_config section."""
        known = {k: v for k, v in decision_config.items() if k in cls.__dataclass_fields__}
        return cls(**known)


class DecisionEngine:
    """
    Produces, checks and records one Recommendation per call.

    Args:
        strategy: Primary recommendation strategy
        recorder: Writes the reasoning log and decision store
        fallback: Strategy to use when the primary's upstream is unavailable
            (None: the error propagates)
        settings: Context-building and locking tunables
    """

    def __init__(self, strategy: RecommendationStrategy, recorder: DecisionRecorder,
                 fallback: Optional[RecommendationStrategy] = None,
                 settings: Optional[EngineSettings] = None):
        self.strategy = strategy
        self.recorder = recorder
        self.fallback = fallback
        self.settings = settings or EngineSettings()
        self.rules = RulesEngine()
        self.fixture_analyzer = FixtureAnalyzer(
            profile_window=self.settings.profile_window,
            special_lookahead=self.settings.special_lookahead,
            ranking_fixtures=self.settings.ranking_fixtures,
            season_length=self.settings.season_length,
        )

        self._locks: Dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

        logger.info(
            f"DecisionEngine: Using {self.strategy.name} strategy"
            + (f" with {self.fallback.name} fallback" if self.fallback else "")
        )

    # ========================================================================
    # ENTRY POINT
    # ========================================================================

    def produce_recommendation(self, request: RecommendationRequest) -> Recommendation:
        """
        Run the full pipeline for request.gameweek.

        Raises:
            ConfigurationError: request is missing or has invalid fields
            AnalysisInProgress: another run for the gameweek held the lock too long
            UpstreamUnavailable: reasoning service failed and no fallback is set
            ParseError: reasoning service reply was not a valid recommendation
        """
        self._validate(request)
        gameweek = request.gameweek

        lock = self._lock_for(gameweek)
        if not lock.acquire(timeout=self.settings.lock_timeout_seconds):
            logger.warning(f"DecisionEngine: GW{gameweek} run rejected - another run in progress")
            raise AnalysisInProgress(gameweek)

        trail = ReasoningTrail(gameweek)
        try:
            recommendation, strategy_name = self._run(request, trail)
            self.recorder.record(gameweek, recommendation, trail, strategy=strategy_name)
            return recommendation
        except Exception as e:
            logger.error(f"DecisionEngine: GW{gameweek} analysis failed: {e}")
            self.recorder.record_failure(gameweek, trail, e)
            raise
        finally:
            lock.release()

    # ========================================================================
    # PIPELINE
    # ========================================================================

    def _run(self, request: RecommendationRequest, trail: ReasoningTrail):
        context = self.build_context(request)

        trail.start("Starting team analysis...")
        trail.info(
            f"Current budget: £{context.budget:.1f}m, Free transfers: {context.free_transfers}"
        )

        if context.injury_concerns:
            trail.warning(f"Found {len(context.injury_concerns)} player(s) with injury concerns")
            for p in context.injury_concerns:
                detail = p.news or f"Chance of playing: {p.chance_of_playing}%"
                trail.warning(f"⚠️ {p.name}: {detail}")

        if context.easiest_runs:
            trail.info(f"Best fixture runs: {_describe_runs(context, context.easiest_runs)}")
        if context.hardest_runs:
            trail.info(f"Toughest fixture runs: {_describe_runs(context, context.hardest_runs)}")

        trail.thinking("Analyzing player form and fixture difficulty...")

        strategy = self.strategy
        try:
            recommendation = strategy.recommend(context, trail)
        except UpstreamUnavailable as e:
            if self.fallback is None:
                raise
            logger.warning(
                f"DecisionEngine: {strategy.name} unavailable ({e}), "
                f"falling back to {self.fallback.name}"
            )
            trail.warning("Reasoning service unavailable - falling back to rule-based analysis")
            strategy = self.fallback
            recommendation = strategy.recommend(context, trail)

        is_valid, message = self.rules.validate_recommendation(recommendation)
        if not is_valid:
            raise ParseError(f"Invalid recommendation from {strategy.name}: {message}")

        return recommendation, strategy.name

    def build_context(self, request: RecommendationRequest) -> AnalysisContext:
        """Enrich the raw request into the context the strategies work from."""
        settings = self.settings
        gameweek = request.gameweek
        squad_ids = {slot.player.id for slot in request.squad}

        market = select_market(
            request.all_players, exclude_ids=squad_ids,
            min_form=settings.market_min_form, limit=settings.market_limit
        )
        top_players = select_market(request.all_players, limit=settings.top_players_limit)

        profiles = self.fixture_analyzer.build_profiles(request.fixtures, gameweek)
        special = self.fixture_analyzer.detect_special_gameweeks(request.fixtures, gameweek)
        easiest, hardest = self.fixture_analyzer.rank(profiles)

        team_names = {p.team_id: p.team for p in request.all_players}
        team_names.update({slot.player.team_id: slot.player.team for slot in request.squad})

        context = AnalysisContext(
            gameweek=gameweek,
            squad=list(request.squad),
            market=market,
            top_players=top_players,
            free_transfers=request.free_transfers_hint,
            budget=request.budget,
            max_penalty=request.max_penalty,
            fixture_profiles=profiles,
            easiest_runs=easiest,
            hardest_runs=hardest,
            easy_fixture_teams=easy_fixture_teams(profiles),
            special_gameweeks=special,
            chips_available=normalise_chips(request.chips_available),
            chips_used=normalise_chips(request.chips_used),
            injury_concerns=injury_concerns(request.squad),
            team_names=team_names,
        )

        logger.debug(
            f"DecisionEngine: GW{gameweek} context - {len(market)} market players, "
            f"{len(profiles)} team profiles, {len(special)} special gameweeks"
        )
        return context

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _validate(self, request: RecommendationRequest):
        if request.gameweek is None:
            raise ConfigurationError("No gameweek could be resolved for this analysis")
        if not _is_int(request.gameweek) or request.gameweek < 1:
            raise ConfigurationError(f"Invalid gameweek: {request.gameweek!r}")
        if not request.squad:
            raise ConfigurationError("Squad is empty")
        if request.all_players is None:
            raise ConfigurationError("Player pool is missing")
        if request.fixtures is None:
            raise ConfigurationError("Fixture list is missing")
        if isinstance(request.budget, bool) or not isinstance(request.budget, (int, float)):
            raise ConfigurationError(f"Invalid budget: {request.budget!r}")
        if not _is_int(request.max_penalty) or request.max_penalty > 0:
            raise ConfigurationError(
                f"Max penalty must be zero or negative, got {request.max_penalty!r}"
            )
        if not _is_int(request.free_transfers_hint) or request.free_transfers_hint < 0:
            raise ConfigurationError(
                f"Invalid free transfer count: {request.free_transfers_hint!r}"
            )

        is_valid, message = self.rules.validate_captaincy(request.squad)
        if not is_valid:
            raise ConfigurationError(f"Invalid squad: {message}")

    def _lock_for(self, gameweek: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(gameweek, threading.Lock())


def _is_int(value) -> bool:
    # bool is an int subclass; reject it explicitly
    return isinstance(value, int) and not isinstance(value, bool)


def _describe_runs(context: AnalysisContext, runs, limit: int = 3) -> str:
    return ', '.join(
        f"{context.team_name(r.team_id)} ({r.average_difficulty:.1f})" for r in runs[:limit]
    )


def create_recorder(database_path: str) -> DecisionRecorder:
    """Recorder backed by the sqlite database at database_path."""
    db = Database(database_path)
    return DecisionRecorder(SqliteReasoningLog(db), SqliteDecisionStore(db))


def create_engine(config: Dict[str, Any],
                  recorder: Optional[DecisionRecorder] = None) -> DecisionEngine:
    """
    Build an engine from a load_config() dict.

    The narrative strategy is used when an API key is configured and demo
    mode is off; otherwise the heuristic strategy. The heuristic fallback is
    attached only when llm_fallback_to_heuristic is set.
    """
    decision_config = config.get('decision_config', {})
    llm_config = config.get('llm_config', {})

    if recorder is None:
        recorder = create_recorder(config['database_path'])

    heuristic = HeuristicStrategy(
        weak_form_threshold=decision_config.get('weak_form_threshold', 4.0),
        form_margin=decision_config.get('form_margin', 1.0),
    )

    api_key = config.get('anthropic_api_key')
    if api_key and not config.get('demo_mode'):
        client = ReasoningClient(
            api_key=api_key,
            model=llm_config.get('model', 'claude-opus-4-20250514'),
            max_tokens=llm_config.get('max_tokens', 2000),
            timeout=float(llm_config.get('timeout_seconds', 60)),
            max_retries=llm_config.get('max_retries', 2),
        )
        strategy: RecommendationStrategy = NarrativeStrategy(client)
        fallback = heuristic if config.get('llm_fallback_to_heuristic') else None
    else:
        logger.info("DecisionEngine: No API key or demo mode on - using heuristic strategy")
        strategy = heuristic
        fallback = None

    return DecisionEngine(
        strategy, recorder, fallback=fallback,
        settings=EngineSettings.from_config(decision_config),
    )
