import argparse
import json
import logging
import sys
from typing import List, Optional

import pandas as pd
import requests

from .config import DEFAULT_LEAGUE, ConfigError, default_season, load_config
from .loader import UnknownLeagueError, load_season
from .models import CHAMPIONSHIP, CONSOLATION, SeasonReport
from .report import bounties_frame, playoff_frames, report_to_dict, standings_frame
from .season import build_season_report
from .sleeper_api import SleeperAPIError, SleeperClient

logger = logging.getLogger(__name__)


def _print_frame(df: pd.DataFrame) -> None:
    if df.empty:
        print('(no rows)')
        return
    print(df.to_string(index=False, float_format=lambda v: f'{v:.2f}'))


def print_standings(report: SeasonReport) -> None:
    print(f"{report.league.upper()} {report.season} Standings")
    _print_frame(standings_frame(report.season_stats))


def print_bounties(report: SeasonReport) -> None:
    print(f"{report.league.upper()} {report.season} Bounties")
    _print_frame(bounties_frame(report.bounties))


def print_playoffs(report: SeasonReport) -> None:
    if report.playoff_error:
        print(f"Playoffs unavailable: {report.playoff_error}")
        return
    frames = playoff_frames(report.playoff_teams)
    print(f"{report.league.upper()} {report.season} Championship Bracket")
    _print_frame(frames[CHAMPIONSHIP])
    print()
    print(f"{report.league.upper()} {report.season} Consolation Bracket")
    _print_frame(frames[CONSOLATION])


PRINTERS = {
    'standings': print_standings,
    'bounties': print_bounties,
    'playoffs': print_playoffs,
}


def run(cmd: str, league: str, season: int, config_path: Optional[str] = None, as_json: bool = False) -> int:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"Fetching {league.upper()} {season} from Sleeper...")
    client = SleeperClient()
    try:
        inputs = load_season(client, league, season, config)
    except (UnknownLeagueError, SleeperAPIError, requests.RequestException) as e:
        print(f"Error loading season: {e}", file=sys.stderr)
        return 1

    report = build_season_report(inputs, config)
    logger.debug('report built: %d managers, %d bounty winners',
                 len(report.season_stats), sum(len(b.winners) for b in report.bounties))

    print('SUMMARY_TABLE_START')
    PRINTERS[cmd](report)
    if as_json:
        # sentinel so callers/tests can reliably capture the JSON payload
        print('REPORT_JSON_START')
        print(json.dumps(report_to_dict(report), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='league_bounties')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='cmd')

    for name, help_text in (
        ('standings', 'Regular-season standings (weeks 1-14)'),
        ('bounties', 'The ten season bounties and their winners'),
        ('playoffs', 'Final championship and consolation pool rankings'),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument('--league', default=DEFAULT_LEAGUE, help='League key, e.g. bbl, trc, lol (env LB_LEAGUE)')
        p.add_argument('--season', type=int, help='Season year (default: env LB_SEASON, else 2025)')
        p.add_argument('--config', dest='config_path', help='Path to JSON config (league_ids, user_map, belt_holders, divisions)')
        p.add_argument('--json', dest='as_json', action='store_true', help='Also print the full report as JSON')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    if args.cmd not in PRINTERS:
        parser.print_help()
        return 1
    if args.season is None:
        try:
            args.season = default_season()
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
    return run(args.cmd, args.league, args.season, config_path=args.config_path, as_json=args.as_json)


if __name__ == '__main__':
    sys.exit(main())
