import logging
from typing import Dict, List

from .bounties import calculate_bounties, total_bounty_points
from .config import DEFAULT_CONFIG, LeagueConfig
from .models import SeasonInputs, SeasonReport, WeeklyStats
from .playoffs import PlayoffPoolError, calculate_final_standings, determine_playoff_pools
from .stats import compute_season_stats, compute_weekly_stats

logger = logging.getLogger(__name__)


def regular_season_weekly_stats(inputs: SeasonInputs, config: LeagueConfig = DEFAULT_CONFIG) -> List[WeeklyStats]:
    weekly: List[WeeklyStats] = []
    for week in range(1, config.reg_season_weeks + 1):
        matchups = inputs.matchups.get(week) or ()
        if matchups:
            weekly.extend(compute_weekly_stats(week, matchups, inputs.roster_owners, inputs.players, config))
    return weekly


def playoff_week_scores(inputs: SeasonInputs, config: LeagueConfig = DEFAULT_CONFIG) -> Dict[int, Dict[str, float]]:
    """week -> manager_id -> points for each playoff week (empty dict for unplayed weeks)."""
    scores: Dict[int, Dict[str, float]] = {}
    for week in config.playoff_weeks:
        stats = compute_weekly_stats(
            week, inputs.matchups.get(week) or (), inputs.roster_owners, inputs.players, config,
        )
        scores[week] = {s.manager_id: s.fp_for for s in stats}
    return scores


def build_season_report(inputs: SeasonInputs, config: LeagueConfig = DEFAULT_CONFIG) -> SeasonReport:
    """Run the whole pipeline: weekly and season stats, bounties, then playoff pools.

    A league that cannot be split into two pools of six still gets its
    standings and bounties; ``playoff_error`` explains the missing playoffs.
    """
    weekly = regular_season_weekly_stats(inputs, config)
    season_stats = compute_season_stats(weekly, config.divisions, inputs.manager_names)

    regular_matchups = {w: m for w, m in inputs.matchups.items() if w <= config.reg_season_weeks}
    bounties = calculate_bounties(
        inputs.season,
        inputs.league,
        weekly,
        inputs.transactions,
        regular_matchups,
        inputs.players,
        inputs.roster_owners,
        inputs.manager_names,
        inputs.draft_picks,
        config,
    )
    bounty_points = total_bounty_points(bounties)
    playoff_scores = playoff_week_scores(inputs, config)

    report = SeasonReport(
        league=inputs.league,
        season=inputs.season,
        weekly_stats=weekly,
        season_stats=season_stats,
        bounties=bounties,
        bounty_points=bounty_points,
        playoff_scores=playoff_scores,
    )
    try:
        championship, consolation = determine_playoff_pools(season_stats)
    except PlayoffPoolError as e:
        logger.warning('Skipping playoffs for %s %s: %s', inputs.league, inputs.season, e)
        report.playoff_error = str(e)
        return report
    report.playoff_teams = calculate_final_standings(
        championship, consolation, bounty_points, playoff_scores, config.playoff_weeks,
    )
    return report
