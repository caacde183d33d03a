import logging
from typing import Any, Callable, Dict, Tuple

import requests

from .config import DEFAULT_CONFIG, LeagueConfig, get_league_id
from .models import MatchupRecord, SeasonInputs, TransactionRecord
from .sleeper_api import SleeperAPIError, SleeperClient
from .sleeper_mapper import (
    manager_name_map,
    parse_draft_picks,
    parse_matchups,
    parse_players,
    parse_transactions,
    pick_season_draft,
    roster_owner_map,
)

logger = logging.getLogger(__name__)


class UnknownLeagueError(LookupError):
    pass


def _fetch_week(fetch: Callable[[str, int], Any], league_id: str, week: int, what: str) -> Any:
    # a missing week is an empty week
    try:
        return fetch(league_id, week)
    except (SleeperAPIError, requests.RequestException) as e:
        logger.warning('Could not fetch %s for week %s: %s', what, week, e)
        return []


def load_season(
    client: SleeperClient,
    league: str,
    season: int,
    config: LeagueConfig = DEFAULT_CONFIG,
) -> SeasonInputs:
    """Fetch and parse everything needed for one league-season.

    Matchups cover the regular season and the playoff weeks; transactions
    cover the regular season only. League-level lookups (users, rosters,
    players, drafts) must succeed; per-week failures leave that week empty.
    """
    league_id = get_league_id(league, season, config)
    if not league_id:
        raise UnknownLeagueError(f'No Sleeper league id for {league} {season}')
    logger.info('Loading %s %s (league %s)', league, season, league_id)

    users = client.get_league_users(league_id)
    rosters = client.get_rosters(league_id)
    players = parse_players(client.get_players())
    drafts = client.get_drafts(league_id)

    draft_id = pick_season_draft(drafts, season)
    draft_picks = parse_draft_picks(client.get_draft_picks(draft_id)) if draft_id else ()
    if not draft_id:
        logger.warning('No %s draft found for league %s', season, league_id)

    matchups: Dict[int, Tuple[MatchupRecord, ...]] = {}
    for week in list(range(1, config.reg_season_weeks + 1)) + list(config.playoff_weeks):
        matchups[week] = parse_matchups(_fetch_week(client.get_matchups, league_id, week, 'matchups'))

    transactions: Dict[int, Tuple[TransactionRecord, ...]] = {}
    for week in range(1, config.reg_season_weeks + 1):
        raw = _fetch_week(client.get_transactions, league_id, week, 'transactions')
        transactions[week] = parse_transactions(raw, week)
    logger.info('Loaded %d transactions', sum(len(t) for t in transactions.values()))

    return SeasonInputs(
        league=league,
        season=season,
        matchups=matchups,
        transactions=transactions,
        draft_picks=draft_picks,
        players=players,
        roster_owners=roster_owner_map(rosters),
        manager_names=manager_name_map(users, config),
    )
