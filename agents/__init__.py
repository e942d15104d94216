"""
Recommendation strategies.

Both strategies implement RecommendationStrategy.recommend(context, trail):
- HeuristicStrategy: rule-based, no external dependency
- NarrativeStrategy: delegates to the external reasoning service
"""

from .base_strategy import AnalysisContext, RecommendationStrategy
from .heuristic import HeuristicStrategy
from .narrative import NarrativeStrategy

__all__ = [
    'AnalysisContext',
    'RecommendationStrategy',
    'HeuristicStrategy',
    'NarrativeStrategy',
]
