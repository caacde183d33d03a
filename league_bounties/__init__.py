from .bounties import calculate_bounties, total_bounty_points
from .lineup import solve_perfect_offense
from .playoffs import PlayoffPoolError, calculate_final_standings, calculate_win_points, determine_playoff_pools
from .stats import compute_season_stats, compute_weekly_stats

__all__ = [
    'calculate_bounties',
    'total_bounty_points',
    'solve_perfect_offense',
    'PlayoffPoolError',
    'calculate_final_standings',
    'calculate_win_points',
    'determine_playoff_pools',
    'compute_season_stats',
    'compute_weekly_stats',
]
