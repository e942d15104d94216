#!/usr/bin/env python3
"""
Fixture Horizon Analysis

Builds a forward-looking fixture profile per team from the flat fixture list
and spots gameweeks where teams blank or play twice:
- Per-team difficulty profiles over the next few gameweeks
- Easiest and hardest fixture runs
- Blank and double gameweeks ahead
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.fixture import Fixture, FixtureEntry, SpecialGameweek

logger = logging.getLogger('fpl_analyzer.planning')

LEAGUE_SIZE = 20
DEFAULT_PROFILE_WINDOW = 5
DEFAULT_SPECIAL_LOOKAHEAD = 10
DEFAULT_RANKING_FIXTURES = 5

FixtureProfiles = Dict[int, List[FixtureEntry]]


@dataclass(frozen=True)
class FixtureRun:
    """A team's upcoming run, summarised."""
    team_id: int
    average_difficulty: float
    fixtures: Tuple[FixtureEntry, ...]


def build_profiles(fixtures: Iterable[Fixture], from_gameweek: int,
                   window_size: int = DEFAULT_PROFILE_WINDOW) -> FixtureProfiles:
    """
    Map each team to its fixtures in [from_gameweek, from_gameweek + window_size].

    The home side gets the home difficulty and the away side the away
    difficulty. Entries are ordered by gameweek, then fixture id, so the
    result does not depend on the order of the input list.
    """
    if from_gameweek < 1 or window_size < 0:
        raise ValueError(f"Invalid window: GW{from_gameweek} + {window_size}")

    last_gameweek = from_gameweek + window_size
    in_window = sorted(
        (f for f in fixtures if from_gameweek <= f.gameweek <= last_gameweek),
        key=lambda f: (f.gameweek, f.id)
    )

    profiles: FixtureProfiles = defaultdict(list)
    for f in in_window:
        profiles[f.team_h].append(FixtureEntry(
            gameweek=f.gameweek, difficulty=f.team_h_difficulty,
            is_home=True, opponent=f.team_a
        ))
        profiles[f.team_a].append(FixtureEntry(
            gameweek=f.gameweek, difficulty=f.team_a_difficulty,
            is_home=False, opponent=f.team_h
        ))

    return dict(profiles)


def detect_special_gameweeks(fixtures: Sequence[Fixture], from_gameweek: int,
                             lookahead: int = DEFAULT_SPECIAL_LOOKAHEAD,
                             league_size: int = LEAGUE_SIZE,
                             season_length: Optional[int] = None) -> List[SpecialGameweek]:
    """
    Find blank and double gameweeks in [from_gameweek, from_gameweek + lookahead].

    A team appearing twice in a gameweek has a double; teams not appearing at
    all (counted against a fixed league size) blank. Gameweeks past
    season_length, when given, are skipped.
    """
    if from_gameweek < 1 or lookahead < 0:
        raise ValueError(f"Invalid lookahead: GW{from_gameweek} + {lookahead}")

    all_teams = set()
    by_gameweek: Dict[int, Dict[int, int]] = defaultdict(lambda: defaultdict(int))
    for f in fixtures:
        all_teams.update((f.team_h, f.team_a))
        by_gameweek[f.gameweek][f.team_h] += 1
        by_gameweek[f.gameweek][f.team_a] += 1

    last_gameweek = from_gameweek + lookahead
    if season_length is not None:
        last_gameweek = min(last_gameweek, season_length)

    special = []
    for gw in range(from_gameweek, last_gameweek + 1):
        counts = by_gameweek.get(gw, {})
        doubles = sorted(t for t, c in counts.items() if c >= 2)
        blanks = max(0, league_size - len(counts))

        if doubles or blanks:
            special.append(SpecialGameweek(
                gameweek=gw,
                teams_with_double_fixture=len(doubles),
                teams_with_no_fixture=blanks,
                double_teams=tuple(doubles),
                blank_teams=tuple(sorted(all_teams - set(counts))),
            ))

    return special


def summarise_run(team_id: int, entries: Sequence[FixtureEntry],
                  num_fixtures: int = DEFAULT_RANKING_FIXTURES) -> Optional[FixtureRun]:
    """Average difficulty over a team's next num_fixtures fixtures."""
    window = tuple(entries[:num_fixtures])
    if not window:
        return None

    difficulties = [e.difficulty for e in window]
    avg_difficulty = sum(difficulties) / len(difficulties)

    return FixtureRun(
        team_id=team_id,
        average_difficulty=round(avg_difficulty, 2),
        fixtures=window,
    )


def rank_fixture_runs(profiles: FixtureProfiles,
                      num_fixtures: int = DEFAULT_RANKING_FIXTURES,
                      top_n: int = 5) -> Tuple[List[FixtureRun], List[FixtureRun]]:
    """
    Rank teams by mean difficulty over their first num_fixtures fixtures.

    Returns:
        (easiest, hardest) - each at most top_n runs; ties go to the lower team id
    """
    if not 3 <= num_fixtures <= 5:
        raise ValueError(f"num_fixtures must be between 3 and 5, got {num_fixtures}")

    runs = [
        run for run in (summarise_run(team_id, entries, num_fixtures)
                        for team_id, entries in profiles.items())
        if run is not None
    ]

    easiest = sorted(runs, key=lambda r: (r.average_difficulty, r.team_id))
    hardest = sorted(runs, key=lambda r: (-r.average_difficulty, r.team_id))
    return easiest[:top_n], hardest[:top_n]


def easy_fixture_teams(profiles: FixtureProfiles, max_difficulty: int = 2,
                       run_length: int = 3, limit: int = 10) -> List[Tuple[int, List[FixtureEntry]]]:
    """Teams whose next run_length fixtures are all rated max_difficulty or easier."""
    easy = []
    for team_id in sorted(profiles):
        entries = profiles[team_id]
        head = entries[:run_length]
        if head and all(e.difficulty <= max_difficulty for e in head):
            easy.append((team_id, entries[:5]))
    return easy[:limit]


class FixtureAnalyzer:
    """
    Fixture horizon analysis with configured windows.

    Defaults: profiles over GW+0..GW+5, blank/double detection over
    GW+0..GW+10, rankings over each team's first 5 fixtures.
    """

    def __init__(self, profile_window: int = DEFAULT_PROFILE_WINDOW,
                 special_lookahead: int = DEFAULT_SPECIAL_LOOKAHEAD,
                 ranking_fixtures: int = DEFAULT_RANKING_FIXTURES,
                 league_size: int = LEAGUE_SIZE,
                 season_length: Optional[int] = None):
        self.profile_window = profile_window
        self.special_lookahead = special_lookahead
        self.ranking_fixtures = ranking_fixtures
        self.league_size = league_size
        self.season_length = season_length

    def build_profiles(self, fixtures: Iterable[Fixture], from_gameweek: int) -> FixtureProfiles:
        profiles = build_profiles(fixtures, from_gameweek, self.profile_window)
        logger.debug(
            f"FixtureAnalyzer: Built profiles for {len(profiles)} teams "
            f"(GW{from_gameweek}-{from_gameweek + self.profile_window})"
        )
        return profiles

    def detect_special_gameweeks(self, fixtures: Sequence[Fixture],
                                 from_gameweek: int) -> List[SpecialGameweek]:
        special = detect_special_gameweeks(
            fixtures, from_gameweek, self.special_lookahead,
            league_size=self.league_size, season_length=self.season_length
        )
        if special:
            logger.info(
                f"FixtureAnalyzer: Special gameweeks ahead: "
                f"{', '.join(f'GW{s.gameweek}' for s in special)}"
            )
        return special

    def rank(self, profiles: FixtureProfiles,
             top_n: int = 5) -> Tuple[List[FixtureRun], List[FixtureRun]]:
        return rank_fixture_runs(profiles, self.ranking_fixtures, top_n)
