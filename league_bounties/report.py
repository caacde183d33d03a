"""Tabular views of a ``SeasonReport`` as pandas DataFrames, plus a JSON-ready dict."""
from dataclasses import asdict
from typing import Any, Dict, Iterable, List

import pandas as pd

from .models import CHAMPIONSHIP, CONSOLATION, BountyResult, PlayoffTeam, SeasonReport, SeasonStats
from .stats import sort_standings

STANDINGS_COLUMNS = [
    'Manager', 'W', 'L', 'D', 'FP', 'FPA', 'H2H W', 'H2H L', 'H2H D', 'Top6 W', 'Top6 L', 'Division',
]
PLAYOFF_COLUMNS = [
    'Rank', 'Manager', 'Seed', 'Win Pts', 'Bounty Pts', 'Pre-Playoff Pts', 'W15', 'W16', 'W17', 'Total',
]


def standings_frame(season_stats: Iterable[SeasonStats]) -> pd.DataFrame:
    rows = []
    for s in sort_standings(season_stats):
        rows.append({
            'Manager': s.manager_name or s.manager_id,
            'W': s.total_wins,
            'L': s.total_losses,
            'D': s.total_draws,
            'FP': round(s.fp_for, 2),
            'FPA': round(s.fp_against, 2),
            'H2H W': s.matchup_wins,
            'H2H L': s.matchup_losses,
            'H2H D': s.matchup_draws,
            'Top6 W': s.top6_wins,
            'Top6 L': s.top6_losses,
            'Division': s.division,
        })
    return pd.DataFrame(rows, columns=STANDINGS_COLUMNS)


def bounties_frame(bounties: Iterable[BountyResult]) -> pd.DataFrame:
    """One row per winner; bounties nobody won get a single row with an empty winner."""
    rows = []
    for b in bounties:
        if not b.winners:
            rows.append({'#': b.id, 'Bounty': b.title, 'Winner': '', 'Details': 'No winner', 'Points': 0})
        for w in b.winners:
            rows.append({'#': b.id, 'Bounty': b.title, 'Winner': w.manager_name, 'Details': w.details, 'Points': w.points})
    return pd.DataFrame(rows, columns=['#', 'Bounty', 'Winner', 'Details', 'Points'])


def playoff_frame(teams: Iterable[PlayoffTeam], pool: str) -> pd.DataFrame:
    rows = []
    for t in sorted((t for t in teams if t.pool == pool), key=lambda t: t.final_rank):
        rows.append({
            'Rank': t.final_rank,
            'Manager': t.manager_name or t.manager_id,
            'Seed': t.seed,
            'Win Pts': t.win_points,
            'Bounty Pts': t.bounty_points,
            'Pre-Playoff Pts': t.pre_playoff_points,
            'W15': t.week15_points,
            'W16': t.week16_points,
            'W17': t.week17_points,
            'Total': t.playoff_points,
        })
    return pd.DataFrame(rows, columns=PLAYOFF_COLUMNS)


def playoff_frames(teams: List[PlayoffTeam]) -> Dict[str, pd.DataFrame]:
    return {CHAMPIONSHIP: playoff_frame(teams, CHAMPIONSHIP), CONSOLATION: playoff_frame(teams, CONSOLATION)}


def report_to_dict(report: SeasonReport) -> Dict[str, Any]:
    return {
        'league': report.league,
        'season': report.season,
        'standings': [asdict(s) for s in sort_standings(report.season_stats)],
        'bounties': [asdict(b) for b in report.bounties],
        'bounty_points': report.bounty_points,
        # JSON object keys must be strings
        'playoff_scores': {str(w): scores for w, scores in report.playoff_scores.items()},
        'playoffs': [asdict(t) for t in report.playoff_teams],
        'playoff_error': report.playoff_error,
    }
