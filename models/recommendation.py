"""
Recommendation models - the decision engine's output contract.

Both strategies (heuristic and narrative) produce a Recommendation. The
narrative strategy builds one from an LLM reply via Recommendation.from_dict,
which validates the schema strictly: a malformed recommendation must never
reach storage.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from infrastructure.errors import ParseError


class Chip(Enum):
    """Chip to play this gameweek ('none' means hold)."""
    NONE = "none"
    WILDCARD = "wildcard"
    FREE_HIT = "free-hit"
    BENCH_BOOST = "bench-boost"
    TRIPLE_CAPTAIN = "triple-captain"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Chip":
        """Parse a chip name, accepting the FPL API spellings."""
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('_', '-').replace(' ', '-')
        aliases = {
            '': cls.NONE,
            'none': cls.NONE,
            'null': cls.NONE,
            'wildcard': cls.WILDCARD,
            'freehit': cls.FREE_HIT,
            'free-hit': cls.FREE_HIT,
            'bboost': cls.BENCH_BOOST,
            'benchboost': cls.BENCH_BOOST,
            'bench-boost': cls.BENCH_BOOST,
            '3xc': cls.TRIPLE_CAPTAIN,
            'triplecaptain': cls.TRIPLE_CAPTAIN,
            'triple-captain': cls.TRIPLE_CAPTAIN,
        }
        if key not in aliases:
            raise ValueError(f"Unknown chip: {value}")
        return aliases[key]

    @property
    def display_name(self) -> str:
        names = {
            'none': 'None',
            'wildcard': 'Wildcard',
            'free-hit': 'Free Hit',
            'bench-boost': 'Bench Boost',
            'triple-captain': 'Triple Captain',
        }
        return names[self.value]


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class TransferProposal:
    """A single suggested transfer."""
    player_out_id: int
    player_out_name: str
    player_in_id: int
    player_in_name: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_out_id': self.player_out_id,
            'player_out_name': self.player_out_name,
            'player_in_id': self.player_in_id,
            'player_in_name': self.player_in_name,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class CaptainPick:
    id: int
    name: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'reason': self.reason}


@dataclass(frozen=True)
class ChipAdvice:
    chip_to_play_this_week: Chip
    reasoning: str
    future_strategy: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chip_to_play_this_week': self.chip_to_play_this_week.value,
            'reasoning': self.reasoning,
            'future_strategy': self.future_strategy,
        }


@dataclass(frozen=True)
class Recommendation:
    """
    The engine's answer for one gameweek.

    Invariant: captain and vice_captain, when both present, are different players.
    """
    transfers: List[TransferProposal]
    captain: Optional[CaptainPick]
    vice_captain: Optional[CaptainPick]
    chip_advice: ChipAdvice
    confidence: Confidence
    summary: str
    key_insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-ready record for the API layer and storage."""
        return {
            'transfers': [t.to_dict() for t in self.transfers],
            'captain': self.captain.to_dict() if self.captain else None,
            'vice_captain': self.vice_captain.to_dict() if self.vice_captain else None,
            'chip_advice': self.chip_advice.to_dict(),
            'confidence': self.confidence.value,
            'summary': self.summary,
            'key_insights': list(self.key_insights),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Recommendation":
        """
        Build a Recommendation from a parsed JSON object.

        Raises:
            ParseError: if any field is missing or has the wrong shape, or the
                captain and vice-captain are the same player.
        """
        if not isinstance(data, dict):
            raise ParseError("Recommendation must be a JSON object")

        transfers_data = data.get('transfers', [])
        if not isinstance(transfers_data, list):
            raise ParseError("'transfers' must be a list")
        transfers = [_parse_transfer(t, i) for i, t in enumerate(transfers_data)]

        captain = _parse_pick(data.get('captain'), 'captain')
        vice_captain = _parse_pick(data.get('vice_captain'), 'vice_captain')
        if captain and vice_captain and captain.id == vice_captain.id:
            raise ParseError("Captain and vice-captain must be different players")

        chip_advice = _parse_chip_advice(data.get('chip_advice'))

        try:
            confidence = Confidence(data.get('confidence'))
        except ValueError:
            raise ParseError(f"Invalid confidence: {data.get('confidence')!r}")

        summary = data.get('summary')
        if not isinstance(summary, str):
            raise ParseError("'summary' must be a string")

        insights = data.get('key_insights', [])
        if not isinstance(insights, list) or not all(isinstance(i, str) for i in insights):
            raise ParseError("'key_insights' must be a list of strings")

        return cls(
            transfers=transfers,
            captain=captain,
            vice_captain=vice_captain,
            chip_advice=chip_advice,
            confidence=confidence,
            summary=summary,
            key_insights=insights,
        )


def _require_int(value: Any, label: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"{label} must be an integer, got {value!r}")
    return value


def _require_str(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise ParseError(f"{label} must be a string, got {value!r}")
    return value


def _parse_transfer(data: Any, index: int) -> TransferProposal:
    if not isinstance(data, dict):
        raise ParseError(f"transfers[{index}] must be an object")
    label = f"transfers[{index}]"
    return TransferProposal(
        player_out_id=_require_int(data.get('player_out_id'), f"{label}.player_out_id"),
        player_out_name=_require_str(data.get('player_out_name'), f"{label}.player_out_name"),
        player_in_id=_require_int(data.get('player_in_id'), f"{label}.player_in_id"),
        player_in_name=_require_str(data.get('player_in_name'), f"{label}.player_in_name"),
        reason=_require_str(data.get('reason', ''), f"{label}.reason"),
    )


def _parse_pick(data: Any, label: str) -> Optional[CaptainPick]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ParseError(f"'{label}' must be an object or null")
    return CaptainPick(
        id=_require_int(data.get('id'), f"{label}.id"),
        name=_require_str(data.get('name'), f"{label}.name"),
        reason=_require_str(data.get('reason', ''), f"{label}.reason"),
    )


def _parse_chip_advice(data: Any) -> ChipAdvice:
    if not isinstance(data, dict):
        raise ParseError("'chip_advice' must be an object")
    try:
        chip = Chip.parse(data.get('chip_to_play_this_week'))
    except ValueError as e:
        raise ParseError(str(e))
    return ChipAdvice(
        chip_to_play_this_week=chip,
        reasoning=_require_str(data.get('reasoning', ''), "chip_advice.reasoning"),
        future_strategy=_require_str(data.get('future_strategy', ''), "chip_advice.future_strategy"),
    )
