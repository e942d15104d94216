"""Tests for market and weak-link selection."""

from builders import make_player, make_squad
from models.player import PlayerStatus, Position
from planning.candidate_selector import (
    injury_concerns,
    rank_by_form,
    select_market,
    select_weak_links,
    squad_by_form,
)


class TestSelectMarket:

    def setup_method(self):
        self.players = [
            make_player(101, form=6.0),
            make_player(102, form=8.0),
            make_player(103, form=7.0, status=PlayerStatus.DOUBTFUL),
            make_player(104, form=9.0, status=PlayerStatus.UNAVAILABLE),
            make_player(105, form=3.0),
            make_player(106, form=None),
            make_player(1, form=9.5),  # already in the squad
        ]

    def test_sorted_by_form_and_filtered(self):
        market = select_market(self.players, exclude_ids={1}, limit=None)

        assert [p.id for p in market] == [102, 103, 101, 105, 106]

    def test_min_form_and_limit(self):
        market = select_market(self.players, exclude_ids={1}, min_form=4.0, limit=2)

        assert [p.id for p in market] == [102, 103]

    def test_duplicates_dropped(self):
        market = select_market(self.players + [self.players[0]], exclude_ids={1}, limit=None)

        assert [p.id for p in market].count(101) == 1

    def test_other_status_not_selectable(self):
        market = select_market([make_player(1, status=PlayerStatus.OTHER)], limit=None)

        assert market == []


class TestWeakLinks:

    def test_below_threshold_weakest_first(self):
        squad = make_squad(forms={3: 3.5, 8: 1.0, 12: 3.9, 14: 4.0})

        weak = select_weak_links(squad)

        assert [p.id for p in weak] == [8, 3, 12]

    def test_players_without_form_are_not_weak_links(self):
        squad = make_squad(forms={5: None})

        assert select_weak_links(squad) == []

    def test_custom_threshold(self):
        squad = make_squad(forms={3: 5.5})

        weak = select_weak_links(squad, threshold=6.0)

        assert len(weak) == 15
        assert weak[-1].id == 3


class TestFormRanking:

    def test_none_form_sorts_last_and_ties_are_stable(self):
        players = [
            make_player(1, form=None),
            make_player(2, form=5.0),
            make_player(3, form=7.0),
            make_player(4, form=5.0),
        ]

        assert [p.id for p in rank_by_form(players)] == [3, 2, 4, 1]

    def test_squad_by_form(self):
        squad = make_squad(forms={9: 9.0, 4: 8.0})

        ranked = squad_by_form(squad)

        assert [p.id for p in ranked[:3]] == [9, 4, 1]


def test_injury_concerns():
    squad = make_squad(
        p2={'position': Position.GKP, 'news': 'Knock - 75% chance of playing'},
        p6={'position': Position.DEF, 'chance_of_playing': 50},
        p7={'position': Position.DEF, 'chance_of_playing': 100},
    )

    assert [p.id for p in injury_concerns(squad)] == [2, 6]
