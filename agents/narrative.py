"""
Narrative Strategy

Delegates the recommendation to the external reasoning service. The prompt is
built from the same enriched context the heuristic strategy uses, and the
reply must contain one JSON object in the Recommendation schema.

Failures are never papered over here:
- UpstreamUnavailable when the service call fails or times out
- ParseError when the reply holds no valid recommendation
"""

import logging

from agents.base_strategy import AnalysisContext, RecommendationStrategy
from analyzer.llm_client import ReasoningClient
from analyzer.prompts import build_analysis_prompt
from analyzer.reply_parser import parse_recommendation
from infrastructure.events import ReasoningTrail
from models.recommendation import Recommendation
from rules.rules_engine import RulesEngine

logger = logging.getLogger('fpl_analyzer.narrative')


class NarrativeStrategy(RecommendationStrategy):
    """Recommendation from the reasoning service."""

    name = "narrative"

    def __init__(self, client: ReasoningClient, rules: RulesEngine = None):
        self.client = client
        self.rules = rules or RulesEngine()

    def recommend(self, context: AnalysisContext, trail: ReasoningTrail) -> Recommendation:
        prompt = build_analysis_prompt(context, self.rules)
        logger.debug(f"NarrativeStrategy: GW{context.gameweek} prompt is {len(prompt)} characters")

        trail.thinking("Consulting the reasoning service...")
        reply = self.client.complete(prompt)

        trail.thinking("Reading the recommendation...")
        recommendation = parse_recommendation(reply)

        logger.info(
            f"NarrativeStrategy: GW{context.gameweek} - {len(recommendation.transfers)} transfer(s), "
            f"chip {recommendation.chip_advice.chip_to_play_this_week.value}"
        )
        return recommendation
