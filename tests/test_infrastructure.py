"""
Tests for reasoning events and the error taxonomy.

Covers:
- ReasoningEvent creation and serialization
- ReasoningTrail ordering
- Error attributes callers rely on
"""

from datetime import datetime, timezone

from infrastructure.errors import (
    AnalysisInProgress,
    AnalyzerError,
    ConfigurationError,
    ParseError,
    UpstreamUnavailable,
)
from infrastructure.events import ReasoningCategory, ReasoningEvent, ReasoningTrail


class TestReasoningEvent:

    def test_serialization(self):
        event = ReasoningEvent(
            gameweek=12,
            message="Analysis complete!",
            category=ReasoningCategory.SUCCESS,
            timestamp=datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc),
        )

        data = event.to_dict()

        assert data == {
            'gameweek': 12,
            'message': "Analysis complete!",
            'category': 'success',
            'timestamp': '2025-10-01T12:00:00+00:00',
        }
        assert ReasoningEvent.from_json(event.to_json()) == event

    def test_global_event(self):
        event = ReasoningEvent(gameweek=None, message="Season data refreshed")

        assert event.category == ReasoningCategory.INFO
        assert event.timestamp.tzinfo is not None
        assert str(event) == "[info] global: Season data refreshed"


class TestReasoningTrail:

    def test_keeps_emission_order(self):
        trail = ReasoningTrail(12)
        trail.start("one")
        trail.thinking("two")
        trail.warning("three")
        trail.emit("four", ReasoningCategory.CAPTAIN)

        assert trail.messages == ["one", "two", "three", "four"]
        assert [e.category for e in trail] == [
            ReasoningCategory.START,
            ReasoningCategory.THINKING,
            ReasoningCategory.WARNING,
            ReasoningCategory.CAPTAIN,
        ]
        assert all(e.gameweek == 12 for e in trail.events)
        assert len(trail) == 4

    def test_events_is_a_copy(self):
        trail = ReasoningTrail(12)
        trail.info("one")

        trail.events.clear()

        assert len(trail) == 1


class TestErrors:

    def test_all_errors_share_a_base(self):
        for error in (ConfigurationError("x"), UpstreamUnavailable("x"),
                      ParseError("x"), AnalysisInProgress(3)):
            assert isinstance(error, AnalyzerError)

    def test_attributes(self):
        assert UpstreamUnavailable("slow", timed_out=True).timed_out is True
        assert ParseError("bad", raw_reply="{").raw_reply == "{"
        error = AnalysisInProgress(7)
        assert error.gameweek == 7
        assert "GW7" in str(error)
