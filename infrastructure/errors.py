"""
Error taxonomy for the decision engine.

Component code (transfer accounting, fixture analysis, candidate selection,
the heuristic strategy) works on data it has been handed and only fails on
contract violations. These exceptions cover the runtime failures that callers
are expected to handle.
"""


class AnalyzerError(Exception):
    """Base class for all decision engine errors."""


class ConfigurationError(AnalyzerError):
    """A required context field is missing or invalid. Not retried."""


class UpstreamUnavailable(AnalyzerError):
    """The external reasoning service failed or timed out."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class ParseError(AnalyzerError):
    """A reasoning service reply did not contain a valid recommendation."""

    def __init__(self, message: str, raw_reply: str = ""):
        super().__init__(message)
        self.raw_reply = raw_reply


class AnalysisInProgress(AnalyzerError):
    """Another run for the same gameweek still holds the run lock."""

    def __init__(self, gameweek: int):
        super().__init__(f"Analysis already running for GW{gameweek}")
        self.gameweek = gameweek
