import unittest

import pytest

from league_bounties.models import CHAMPIONSHIP, CONSOLATION, SeasonStats
from league_bounties.playoffs import (
    PlayoffPoolError,
    calculate_final_standings,
    calculate_win_points,
    determine_playoff_pools,
    round_hundred,
)


def ss(manager_id, total_wins, fp_for=1000.0, fp_against=1000.0, total_draws=0, top6_wins=0):
    return SeasonStats(
        manager_id=manager_id,
        manager_name=manager_id.upper(),
        roster_id=0,
        total_wins=total_wins,
        total_draws=total_draws,
        fp_for=fp_for,
        fp_against=fp_against,
        top6_wins=top6_wins,
    )


@pytest.mark.parametrize('points, expected', [
    (1250.0, 1300),
    (1249.99, 1200),
    (1150.0, 1200),
    (49.0, 0),
    (0.0, 0),
])
def test_round_hundred_is_half_up(points, expected):
    assert round_hundred(points) == expected


def test_win_points_relative_to_pool_minimum():
    pool = [ss(f'm{i}', w) for i, w in enumerate([8, 8, 7, 6, 6, 5])]
    assert list(calculate_win_points(pool).values()) == [12, 12, 8, 4, 4, 0]


def test_win_points_empty_pool():
    assert calculate_win_points([]) == {}


@pytest.mark.parametrize('size', [0, 11, 13])
def test_pools_need_twelve_managers(size):
    standings = [ss(f'm{i}', i) for i in range(size)]
    with pytest.raises(PlayoffPoolError):
        determine_playoff_pools(standings)
    assert issubclass(PlayoffPoolError, ValueError)


class TestPools(unittest.TestCase):
    def test_split_by_wins(self):
        standings = [ss(f'm{i}', 10 + i) for i in range(12)]
        championship, consolation = determine_playoff_pools(standings)
        self.assertEqual([s.manager_id for s in championship], [f'm{i}' for i in range(11, 5, -1)])
        self.assertEqual([s.manager_id for s in consolation], [f'm{i}' for i in range(5, -1, -1)])

    def test_tiebreakers_use_rounded_points(self):
        standings = [ss(f'f{i}', 1) for i in range(10)]
        # same wins and draws; 1249 and 1210 both round to 1200, so points-against decides
        standings.append(ss('low_for', 10, fp_for=1249.0, fp_against=1300.0))
        standings.append(ss('high_for', 10, fp_for=1210.0, fp_against=1150.0))
        championship, _ = determine_playoff_pools(standings)
        self.assertEqual([s.manager_id for s in championship[:2]], ['low_for', 'high_for'])

    def test_half_up_rounding_breaks_tie(self):
        standings = [ss(f'f{i}', 1) for i in range(10)]
        standings.append(ss('a', 10, fp_for=1210.0, fp_against=2000.0))
        standings.append(ss('b', 10, fp_for=1250.0, fp_against=1000.0))
        championship, _ = determine_playoff_pools(standings)
        self.assertEqual(championship[0].manager_id, 'b')

    def test_draws_then_top6(self):
        standings = [ss(f'f{i}', 1) for i in range(9)]
        standings.append(ss('x', 10, total_draws=0, top6_wins=9))
        standings.append(ss('y', 10, total_draws=1, top6_wins=0))
        standings.append(ss('z', 10, total_draws=0, top6_wins=3))
        championship, _ = determine_playoff_pools(standings)
        self.assertEqual([s.manager_id for s in championship[:3]], ['y', 'x', 'z'])


class TestFinalStandings(unittest.TestCase):
    def setUp(self):
        self.championship = [ss(f'c{i}', w) for i, w in enumerate([8, 8, 7, 6, 6, 5], start=1)]
        self.consolation = [ss(f'k{i}', 4) for i in range(1, 7)]

    def test_pre_playoff_points(self):
        teams = calculate_final_standings(self.championship, self.consolation, {'c1': 15}, {})
        self.assertEqual(len(teams), 12)
        c1 = teams[0]
        self.assertEqual((c1.pool, c1.seed), (CHAMPIONSHIP, 1))
        self.assertEqual(c1.win_points, 12)
        self.assertEqual(c1.bounty_points, 15)
        self.assertEqual(c1.pre_playoff_points, 27)
        self.assertEqual(c1.playoff_points, 27)
        self.assertEqual(teams[6].pool, CONSOLATION)
        self.assertEqual([t.seed for t in teams[6:]], list(range(1, 7)))

    def test_eliminated_teams_rank_below_finalists(self):
        pool = [ss(f'c{i}', 5) for i in range(1, 7)]
        scores = {
            15: {'c1': 10.0, 'c3': 10.0, 'c4': 20.0, 'c5': 30.0, 'c6': 5.0},
            16: {},
            17: {'c2': 50.0, 'c3': 200.0},
        }
        teams = calculate_final_standings(pool, self.consolation, {}, scores)
        ranks = {t.manager_id: t.final_rank for t in teams[:6]}
        # c3 has the best total but missed the cut after week 16
        self.assertEqual(ranks, {'c2': 1, 'c5': 2, 'c4': 3, 'c1': 4, 'c3': 5, 'c6': 6})
        self.assertEqual(teams[2].playoff_points, 210.0)

    def test_ranks_are_a_permutation_per_pool(self):
        scores = {15: {'c3': 40.0, 'k6': 11.0}, 16: {'c6': 90.0}, 17: {'k2': 7.0}}
        teams = calculate_final_standings(self.championship, self.consolation, {'k4': 30}, scores)
        for pool in (CHAMPIONSHIP, CONSOLATION):
            ranks = sorted(t.final_rank for t in teams if t.pool == pool)
            self.assertEqual(ranks, [1, 2, 3, 4, 5, 6])
