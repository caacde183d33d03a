import math
from typing import Dict, List, Mapping, Sequence, Tuple

from .config import PLAYOFF_WEEKS, POOL_SIZE
from .models import CHAMPIONSHIP, CONSOLATION, PlayoffTeam, SeasonStats

SAFE_SEEDS = 2
ADVANCING_CONTENDERS = 2


class PlayoffPoolError(ValueError):
    """The league cannot be split into two full playoff pools."""


def round_hundred(points: float) -> float:
    # half-up, so 1250 -> 1300 (Python's round() would give 1200)
    return math.floor(points / 100 + 0.5) * 100


def pool_sort_key(s: SeasonStats) -> Tuple:
    return (
        s.total_wins,
        s.total_draws,
        round_hundred(s.fp_for),
        round_hundred(s.fp_against),
        s.top6_wins,
    )


def determine_playoff_pools(standings: Sequence[SeasonStats]) -> Tuple[List[SeasonStats], List[SeasonStats]]:
    """Split the league into (championship, consolation) pools of six, best seed first.

    Raises PlayoffPoolError unless there are exactly twelve managers.
    """
    expected = POOL_SIZE * 2
    if len(standings) != expected:
        raise PlayoffPoolError(f'Playoff pools need exactly {expected} managers, got {len(standings)}')
    ranked = sorted(standings, key=pool_sort_key, reverse=True)
    return ranked[:POOL_SIZE], ranked[POOL_SIZE:expected]


def calculate_win_points(pool: Sequence[SeasonStats]) -> Dict[str, float]:
    if not pool:
        return {}
    min_wins = min(p.total_wins for p in pool)
    return {p.manager_id: (p.total_wins - min_wins) * 4 for p in pool}


def _resolve_pool(
    pool: Sequence[SeasonStats],
    pool_name: str,
    bounty_points: Mapping[str, float],
    playoff_scores: Mapping[int, Mapping[str, float]],
    playoff_weeks: Sequence[int] = PLAYOFF_WEEKS,
) -> List[PlayoffTeam]:
    win_points = calculate_win_points(pool)
    teams: List[PlayoffTeam] = []
    for seed, p in enumerate(pool, start=1):
        wp = win_points.get(p.manager_id, 0)
        bp = bounty_points.get(p.manager_id, 0)
        pre = wp + bp
        w15, w16, w17 = (playoff_scores.get(week, {}).get(p.manager_id, 0) for week in playoff_weeks)
        teams.append(PlayoffTeam(
            manager_id=p.manager_id,
            manager_name=p.manager_name,
            pool=pool_name,
            seed=seed,
            total_wins=p.total_wins,
            win_points=wp,
            bounty_points=bp,
            pre_playoff_points=pre,
            week15_points=w15,
            week16_points=w16,
            week17_points=w17,
            playoff_points=pre + w15 + w16 + w17,
        ))

    # top seeds survive the week-16 cut; seeds 3+ race for the remaining places
    safe = [t for t in teams if t.seed <= SAFE_SEEDS]
    contenders = sorted(
        (t for t in teams if t.seed > SAFE_SEEDS),
        key=lambda t: t.pre_playoff_points + t.week15_points + t.week16_points,
        reverse=True,
    )
    finalists = safe + contenders[:ADVANCING_CONTENDERS]
    eliminated = contenders[ADVANCING_CONTENDERS:]

    finalists.sort(key=lambda t: t.playoff_points, reverse=True)
    eliminated.sort(key=lambda t: t.playoff_points, reverse=True)
    for rank, team in enumerate(finalists + eliminated, start=1):
        team.final_rank = rank
    return teams


def calculate_final_standings(
    championship_pool: Sequence[SeasonStats],
    consolation_pool: Sequence[SeasonStats],
    bounty_points: Mapping[str, float],
    playoff_scores: Mapping[int, Mapping[str, float]],
    playoff_weeks: Sequence[int] = PLAYOFF_WEEKS,
) -> List[PlayoffTeam]:
    """Rank each pool 1..6 independently; teams come back in seed order, championship pool first.

    ``playoff_scores`` maps week -> manager_id -> points for the three
    ``playoff_weeks`` (15-17).
    """
    return (
        _resolve_pool(championship_pool, CHAMPIONSHIP, bounty_points, playoff_scores, playoff_weeks)
        + _resolve_pool(consolation_pool, CONSOLATION, bounty_points, playoff_scores, playoff_weeks)
    )
