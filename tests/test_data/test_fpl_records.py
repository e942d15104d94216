"""Tests for the FPL payload adapters."""

import pytest

from data.fpl_records import (
    build_request,
    chips_used_from_history,
    fixtures_from_api,
    history_from_api,
    player_from_element,
    players_from_bootstrap,
    squad_from_picks,
    target_gameweek,
)
from infrastructure.errors import ConfigurationError
from models.player import PlayerStatus, Position
from models.recommendation import Chip
from services.chip_availability import ChipPolicy

TEAMS = [{'id': i, 'short_name': f"T{i:02d}"} for i in range(1, 21)]
ELEMENT_TYPES = [1, 1] + [2] * 5 + [3] * 5 + [4] * 3


def element(id, element_type=3, team=1, form="5.0", **extra):
    data = {
        'id': id, 'web_name': f"P{id}", 'team': team, 'element_type': element_type,
        'now_cost': 55, 'form': form, 'total_points': 40, 'points_per_game': "4.0",
        'expected_goal_involvements': "1.25", 'status': 'a', 'news': '',
        'chance_of_playing_next_round': None,
    }
    data.update(extra)
    return data


@pytest.fixture
def bootstrap():
    elements = [element(i, element_type=t, team=(i - 1) % 10 + 1)
                for i, t in enumerate(ELEMENT_TYPES, start=1)]
    elements.append(element(200, element_type=3, team=11, form="7.5"))
    return {
        'elements': elements,
        'teams': TEAMS,
        'events': [
            {'id': 7, 'is_current': False, 'is_next': False, 'finished': True},
            {'id': 8, 'is_current': True, 'is_next': False, 'finished': False},
            {'id': 9, 'is_current': False, 'is_next': True, 'finished': False},
        ],
    }


@pytest.fixture
def picks():
    return [{'element': i, 'position': i, 'is_captain': i == 13, 'is_vice_captain': i == 9,
             'selling_price': 55} for i in range(15, 0, -1)]


class TestPlayers:

    def test_player_from_element(self):
        player = player_from_element(
            element(5, element_type=4, team=3, form="6.3", status='d',
                    news="Knock", chance_of_playing_next_round=75),
            TEAMS
        )

        assert player.name == "P5"
        assert player.team == "T03"
        assert player.position == Position.FWD
        assert player.price == 5.5
        assert player.form == 6.3
        assert player.points_per_game == 4.0
        assert player.expected_goal_involvements == 1.25
        assert player.status == PlayerStatus.DOUBTFUL
        assert player.chance_of_playing == 75

    def test_blank_form_is_none(self):
        assert player_from_element(element(1, form=""), TEAMS).form is None

    def test_unknown_team(self):
        assert player_from_element(element(1, team=99), TEAMS).team == "Unknown"

    def test_players_from_bootstrap(self, bootstrap):
        players = players_from_bootstrap(bootstrap)

        assert len(players) == 16
        assert players[-1].id == 200


class TestFixturesAndSquad:

    def test_unscheduled_fixtures_skipped(self):
        fixtures = fixtures_from_api([
            {'id': 1, 'event': 9, 'team_h': 1, 'team_a': 2,
             'team_h_difficulty': 2, 'team_a_difficulty': 4},
            {'id': 2, 'event': None, 'team_h': 3, 'team_a': 4,
             'team_h_difficulty': 3, 'team_a_difficulty': 3},
        ])

        assert [f.id for f in fixtures] == [1]
        assert fixtures[0].team_a_difficulty == 4

    def test_squad_from_picks(self, bootstrap, picks):
        players = {p.id: p for p in players_from_bootstrap(bootstrap)}

        squad = squad_from_picks(picks, players)

        assert [s.position for s in squad] == list(range(1, 16))
        assert squad[12].is_captain and squad[12].player.id == 13
        assert squad[8].is_vice_captain
        assert squad[0].selling_price == 55

    def test_unknown_pick(self, bootstrap):
        with pytest.raises(ConfigurationError):
            squad_from_picks([{'element': 999, 'position': 1}], {})


class TestGameweekAndChips:

    def test_next_gameweek_preferred(self, bootstrap):
        assert target_gameweek(bootstrap['events']) == 9

    def test_current_plus_one_without_next(self):
        assert target_gameweek([{'id': 38, 'is_current': True, 'is_next': False}]) == 39

    def test_no_gameweek_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            target_gameweek([{'id': 1, 'is_current': False, 'is_next': False}])

    def test_chips_used(self):
        history = {'chips': [{'name': 'wildcard', 'event': 4, 'time': '...'}]}

        assert chips_used_from_history(history) == [{'name': 'wildcard', 'event': 4}]
        assert chips_used_from_history({}) == []


class TestBuildRequest:

    def test_assembles_request(self, bootstrap, picks):
        history = {
            'current': [{'event': gw, 'event_transfers': 0, 'event_transfers_cost': 0}
                        for gw in range(1, 9)],
            'chips': [{'name': 'wildcard', 'event': 3}, {'name': 'bboost', 'event': 6}],
        }
        fixtures = [{'id': 1, 'event': 9, 'team_h': 1, 'team_a': 2,
                     'team_h_difficulty': 2, 'team_a_difficulty': 4}]

        request = build_request(bootstrap, fixtures, picks, history, bank=15,
                                max_penalty=-4, chip_policy=ChipPolicy())

        assert request.gameweek == 9
        assert request.budget == 1.5
        assert request.free_transfers_hint == 5
        assert request.max_penalty == -4
        assert len(request.squad) == 15
        assert len(request.all_players) == 16
        assert request.chips_available == [Chip.WILDCARD, Chip.FREE_HIT, Chip.TRIPLE_CAPTAIN]
        assert request.chips_used == ['wildcard', 'bboost']

    def test_reported_free_transfers_win(self, bootstrap, picks):
        request = build_request(bootstrap, [], picks, {'current': []}, free_transfers=2,
                                chip_policy=ChipPolicy())

        assert request.free_transfers_hint == 2

    def test_unknown_chip_in_history_is_ignored(self, bootstrap, picks):
        history = {'current': [], 'chips': [{'name': 'manager', 'event': 20},
                                            {'name': 'wildcard', 'event': 3}]}

        request = build_request(bootstrap, [], picks, history, chip_policy=ChipPolicy())

        assert request.chips_available == [Chip.WILDCARD, Chip.FREE_HIT,
                                           Chip.BENCH_BOOST, Chip.TRIPLE_CAPTAIN]
        assert request.chips_used == ['manager', 'wildcard']


def test_history_from_api_orders_gameweeks():
    entries = history_from_api({'current': [
        {'event': 2, 'event_transfers': 2, 'event_transfers_cost': 4},
        {'event': 1, 'event_transfers': 0, 'event_transfers_cost': 0},
    ]})

    assert [e.gameweek for e in entries] == [1, 2]
    assert entries[1].hit and entries[1].transfer_cost == 4
