import random

import pytest

from league_bounties.config import LINEUP_SLOTS
from league_bounties.lineup import solve_perfect_offense


def brute_force(players, slots=LINEUP_SLOTS):
    """Try every assignment (including leaving players out); small inputs only."""
    best = 0.0

    def go(i, used, total):
        nonlocal best
        best = max(best, total)
        if i == len(players):
            return
        go(i + 1, used, total)
        pos, fp = players[i]
        for s, (_name, eligible) in enumerate(slots):
            if s not in used and pos in eligible:
                go(i + 1, used | {s}, total + fp)

    go(0, frozenset(), 0.0)
    return best


def test_full_lineup_uses_superflex_for_second_qb():
    players = [
        ('QB', 30.0), ('QB', 25.0),
        ('RB', 20.0), ('RB', 15.0), ('RB', 10.0),
        ('WR', 12.0), ('TE', 8.0),
    ]
    # QB 30, RB 20 + 15, WR 12, WR/TE 8, FLEX RB 10, SUPERFLEX QB 25
    assert solve_perfect_offense(players) == pytest.approx(120.0)


def test_empty_roster_scores_zero():
    assert solve_perfect_offense([]) == 0.0


def test_tight_ends_only_fit_three_slots():
    players = [('TE', 10.0), ('TE', 9.0), ('TE', 8.0), ('TE', 7.0)]
    assert solve_perfect_offense(players) == pytest.approx(27.0)


def test_negative_scores_are_left_on_the_bench():
    players = [('QB', -2.0), ('WR', 5.0)]
    assert solve_perfect_offense(players) == pytest.approx(5.0)


def test_input_list_is_not_mutated():
    players = [('WR', 1.0), ('QB', 20.0), ('RB', 5.0)]
    snapshot = list(players)
    solve_perfect_offense(players)
    assert players == snapshot


def _random_roster(rng, n):
    return [(rng.choice(['QB', 'RB', 'WR', 'TE']), round(rng.uniform(-3, 35), 2)) for _ in range(n)]


@pytest.mark.parametrize('seed', range(12))
def test_order_does_not_change_result(seed):
    rng = random.Random(seed)
    players = _random_roster(rng, 12)
    expected = solve_perfect_offense(players)
    for _ in range(5):
        shuffled = list(players)
        rng.shuffle(shuffled)
        assert solve_perfect_offense(shuffled) == pytest.approx(expected)


@pytest.mark.parametrize('seed', range(12))
def test_adding_a_player_never_lowers_the_optimum(seed):
    rng = random.Random(100 + seed)
    players = _random_roster(rng, 6)
    before = solve_perfect_offense(players)
    for extra in _random_roster(rng, 4):
        players = players + [extra]
        after = solve_perfect_offense(players)
        assert after >= before - 1e-9
        before = after


@pytest.mark.parametrize('seed', range(15))
def test_matches_exhaustive_search(seed):
    rng = random.Random(1000 + seed)
    players = _random_roster(rng, rng.randint(1, 7))
    assert solve_perfect_offense(players) == pytest.approx(brute_force(players))
