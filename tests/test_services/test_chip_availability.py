"""Tests for the seasonal chip policy."""

import logging

from models.recommendation import Chip
from services.chip_availability import ChipPolicy, normalise_chips


class TestChipPolicy:

    def setup_method(self):
        self.policy = ChipPolicy()

    def test_everything_available_at_season_start(self):
        assert self.policy.available_chips([]) == [
            Chip.WILDCARD, Chip.FREE_HIT, Chip.BENCH_BOOST, Chip.TRIPLE_CAPTAIN
        ]

    def test_first_wildcard_leaves_one(self):
        statuses = {s.chip: s for s in self.policy.chip_status([{'name': 'wildcard', 'event': 4}])}

        assert statuses[Chip.WILDCARD].remaining == 1
        assert statuses[Chip.WILDCARD].used_in_gws == (4,)
        assert Chip.WILDCARD in self.policy.available_chips(['wildcard'])

    def test_two_wildcards_use_it_up(self):
        used = [{'name': 'wildcard', 'event': 4}, {'name': 'wildcard', 'event': 22}]

        assert Chip.WILDCARD not in self.policy.available_chips(used)

    def test_single_use_chips(self):
        available = self.policy.available_chips(['bboost', '3xc'])

        assert available == [Chip.WILDCARD, Chip.FREE_HIT]

    def test_wildcard_allowance_is_configurable(self):
        policy = ChipPolicy({Chip.WILDCARD: 1})

        assert Chip.WILDCARD not in policy.available_chips(['wildcard'])

    def test_summary(self):
        summary = self.policy.summary(['freehit'])

        assert [s['chip'] for s in summary['used_up']] == ['free-hit']
        assert len(summary['available']) == 3

    def test_unknown_chips_skipped(self, caplog):
        used = [{'name': 'wildcard', 'event': 3}, {'name': 'manager', 'event': 20}]

        with caplog.at_level(logging.WARNING):
            statuses = {s.chip: s for s in self.policy.chip_status(used)}

        assert set(statuses) == {Chip.WILDCARD, Chip.FREE_HIT, Chip.BENCH_BOOST,
                                 Chip.TRIPLE_CAPTAIN}
        assert statuses[Chip.WILDCARD].used_count == 1
        assert len(self.policy.available_chips(used)) == 4
        assert "manager" in caplog.text


class TestLoadPolicy:

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "chips.yaml"
        path.write_text("allowances:\n  wildcard: 1\n  bboost: 2\n")

        policy = ChipPolicy.load(path)

        assert policy.allowances[Chip.WILDCARD] == 1
        assert policy.allowances[Chip.BENCH_BOOST] == 2
        assert policy.allowances[Chip.FREE_HIT] == 1

    def test_missing_file_uses_defaults(self, tmp_path):
        policy = ChipPolicy.load(tmp_path / "absent.yaml")

        assert policy.allowances[Chip.WILDCARD] == 2

    def test_shipped_policy_loads(self):
        policy = ChipPolicy.load()

        assert policy.allowances[Chip.WILDCARD] == 2


def test_normalise_chips_dedupes_and_drops_none():
    chips = normalise_chips(['wildcard', {'name': 'wildcard'}, 'none', 'triple-captain', Chip.FREE_HIT])

    assert chips == [Chip.WILDCARD, Chip.TRIPLE_CAPTAIN, Chip.FREE_HIT]


def test_normalise_chips_skips_unknown_names():
    assert normalise_chips(['manager', {'name': 'bboost'}]) == [Chip.BENCH_BOOST]
