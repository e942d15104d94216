"""
Chip Availability Service

Works out which chips a manager can still play from the chips already used.
How many times each chip may be played in a season is policy, read from
config/chip_policy.yaml, since it changes between seasons (e.g. whether a
second wildcard is granted).

Usage:
    from services.chip_availability import ChipPolicy

    policy = ChipPolicy.load()
    available = policy.available_chips(history.get('chips', []))
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from config.settings import CHIP_POLICY_PATH
from models.recommendation import Chip

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = CHIP_POLICY_PATH

DEFAULT_ALLOWANCES = {
    Chip.WILDCARD: 2,
    Chip.FREE_HIT: 1,
    Chip.BENCH_BOOST: 1,
    Chip.TRIPLE_CAPTAIN: 1,
}


@dataclass(frozen=True)
class ChipStatus:
    """Usage of one chip type against its seasonal allowance."""
    chip: Chip
    allowance: int
    used_count: int
    used_in_gws: Tuple[int, ...]

    @property
    def remaining(self) -> int:
        return max(0, self.allowance - self.used_count)

    @property
    def available(self) -> bool:
        return self.remaining > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chip': self.chip.value,
            'display_name': self.chip.display_name,
            'allowance': self.allowance,
            'used_count': self.used_count,
            'used_in_gws': list(self.used_in_gws),
            'remaining': self.remaining,
            'available': self.available,
        }


def _parse_played_chip(name: Any) -> Optional[Chip]:
    """Chip for an FPL chip name, or None for chips this engine does not plan (e.g. 'manager')."""
    try:
        return Chip.parse(name)
    except ValueError:
        logger.warning(f"ChipPolicy: Ignoring unknown chip {name!r}")
        return None


class ChipPolicy:
    """
    Seasonal chip allowances.

    The allowance for each chip is configurable; the wildcard defaults to two
    per season (one per half).
    """

    def __init__(self, allowances: Optional[Dict[Chip, int]] = None):
        self.allowances = dict(DEFAULT_ALLOWANCES)
        if allowances:
            self.allowances.update(allowances)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ChipPolicy":
        """Load allowances from YAML, falling back to defaults when absent."""
        config_path = Path(path) if path else DEFAULT_POLICY_PATH
        if not config_path.exists():
            logger.debug(f"ChipPolicy: {config_path} not found, using defaults")
            return cls()

        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        allowances = {}
        for name, count in (raw.get('allowances') or {}).items():
            allowances[Chip.parse(name)] = int(count)

        logger.debug(f"ChipPolicy: Loaded allowances from {config_path}")
        return cls(allowances)

    def chip_status(self, chips_used: Iterable[Any]) -> List[ChipStatus]:
        """
        Status of each chip type.

        Args:
            chips_used: chip names, or FPL history chip records
                ({'name': 'bboost', 'event': 24, ...})
        """
        used: Dict[Chip, List[int]] = {chip: [] for chip in self.allowances}
        for item in chips_used:
            if isinstance(item, dict):
                chip = _parse_played_chip(item.get('name'))
                gw = item.get('event')
            else:
                chip = _parse_played_chip(item)
                gw = None
            if chip is None or chip is Chip.NONE:
                continue
            # 0 marks a use with no known gameweek
            used.setdefault(chip, []).append(gw or 0)

        statuses = []
        for chip, allowance in self.allowances.items():
            gws = used.get(chip, [])
            statuses.append(ChipStatus(
                chip=chip,
                allowance=allowance,
                used_count=len(gws),
                used_in_gws=tuple(g for g in gws if g),
            ))
        return statuses

    def available_chips(self, chips_used: Iterable[Any]) -> List[Chip]:
        """Chips with at least one use left, in policy order."""
        return [s.chip for s in self.chip_status(chips_used) if s.available]

    def summary(self, chips_used: Iterable[Any]) -> Dict[str, Any]:
        """Summary of chip status for display/logging."""
        statuses = self.chip_status(list(chips_used))
        return {
            'available': [s.to_dict() for s in statuses if s.available],
            'used_up': [s.to_dict() for s in statuses if not s.available],
        }


def normalise_chips(chips: Iterable[Any]) -> List[Chip]:
    """Parse chip names (any FPL spelling), dropping 'none', unknown chips and duplicates."""
    result: List[Chip] = []
    for name in chips:
        chip = _parse_played_chip(name.get('name') if isinstance(name, dict) else name)
        if chip is not None and chip is not Chip.NONE and chip not in result:
            result.append(chip)
    return result
