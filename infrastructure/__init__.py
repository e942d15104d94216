"""
Infrastructure shared by the decision engine components.

- Reasoning event definitions and the run-local ReasoningTrail
- The error taxonomy
"""

from .events import ReasoningEvent, ReasoningCategory, ReasoningTrail
from .errors import (
    AnalyzerError,
    ConfigurationError,
    UpstreamUnavailable,
    ParseError,
    AnalysisInProgress,
)

__all__ = [
    'ReasoningEvent',
    'ReasoningCategory',
    'ReasoningTrail',
    'AnalyzerError',
    'ConfigurationError',
    'UpstreamUnavailable',
    'ParseError',
    'AnalysisInProgress',
]
