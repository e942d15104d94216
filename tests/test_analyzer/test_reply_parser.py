"""Tests for pulling the recommendation out of a reasoning service reply."""

import json

import pytest

from analyzer.reply_parser import extract_json_object, parse_recommendation
from infrastructure.errors import ParseError
from models.recommendation import Chip


MINIMAL = {
    "transfers": [],
    "captain": {"id": 1, "name": "A", "reason": "r"},
    "vice_captain": {"id": 2, "name": "B", "reason": "r"},
    "chip_advice": {"chip_to_play_this_week": "none", "reasoning": "", "future_strategy": ""},
    "confidence": "high",
    "summary": "Fine",
    "key_insights": [],
}


class TestExtractJsonObject:

    def test_first_balanced_object(self):
        text = 'Sure! {"a": {"b": 1}} and then {"c": 2}'

        assert extract_json_object(text) == '{"a": {"b": 1}}'

    def test_braces_inside_strings_ignored(self):
        text = 'prefix {"note": "use } and { freely", "n": 1} suffix'

        assert json.loads(extract_json_object(text)) == {"note": "use } and { freely", "n": 1}

    def test_escaped_quotes(self):
        text = '{"quote": "he said \\"hi\\" }", "x": 1}'

        assert json.loads(extract_json_object(text))["x"] == 1

    def test_code_fence(self):
        text = "```json\n" + json.dumps(MINIMAL) + "\n```"

        assert json.loads(extract_json_object(text)) == MINIMAL

    def test_none_when_missing_or_unbalanced(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object('{"open": 1') is None


class TestParseRecommendation:

    def test_minimal_reply(self):
        recommendation = parse_recommendation(json.dumps(MINIMAL))

        assert recommendation.transfers == []
        assert recommendation.chip_advice.chip_to_play_this_week == Chip.NONE

    def test_fpl_chip_spelling_accepted(self):
        reply = dict(MINIMAL, chip_advice=dict(MINIMAL["chip_advice"], chip_to_play_this_week="3xc"))

        recommendation = parse_recommendation(json.dumps(reply))

        assert recommendation.chip_advice.chip_to_play_this_week == Chip.TRIPLE_CAPTAIN

    def test_absent_captain_allowed(self):
        reply = dict(MINIMAL, captain=None, vice_captain=None)

        assert parse_recommendation(json.dumps(reply)).captain is None

    @pytest.mark.parametrize("reply", [
        "",
        "nothing to see",
        "{not json}",
        json.dumps(dict(MINIMAL, confidence="sure")),
        json.dumps(dict(MINIMAL, summary=None)),
        json.dumps(dict(MINIMAL, transfers={})),
        json.dumps(dict(MINIMAL, transfers=[{"player_out_id": "9"}])),
        json.dumps(dict(MINIMAL, captain={"id": True, "name": "A"})),
        json.dumps(dict(MINIMAL, chip_advice={"chip_to_play_this_week": "double-captain"})),
        json.dumps(dict(MINIMAL, vice_captain={"id": 1, "name": "A", "reason": "r"})),
        json.dumps(dict(MINIMAL, key_insights="one")),
    ])
    def test_rejected(self, reply):
        with pytest.raises(ParseError) as exc_info:
            parse_recommendation(reply)

        assert exc_info.value.raw_reply == reply

    def test_round_trip_through_dict(self):
        recommendation = parse_recommendation(json.dumps(MINIMAL))

        assert parse_recommendation(json.dumps(recommendation.to_dict())) == recommendation
