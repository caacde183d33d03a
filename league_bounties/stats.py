import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .config import DEFAULT_CONFIG, LeagueConfig
from .models import MatchupRecord, PlayerInfo, PlayerScore, SeasonStats, WeeklyStats

logger = logging.getLogger(__name__)

UNKNOWN = 'Unknown'


def fantasy_position(real_pos: str, config: LeagueConfig = DEFAULT_CONFIG) -> str:
    """Collapse a real-world position code into the fantasy bucket it scores in.

    Defensive codes become 'IDP', line/kicking codes become 'NA', running back
    variants become 'RB'; anything else (QB, WR, TE, DEF, ...) is returned as-is.
    """
    if real_pos in config.idp_positions:
        return 'IDP'
    if real_pos in config.unclassified_positions:
        return 'NA'
    if real_pos in config.rb_positions:
        return 'RB'
    return real_pos


def calculate_top6_win(rank: int, top_n: int = DEFAULT_CONFIG.top_n_weekly) -> int:
    return 1 if rank <= top_n else 0


def _group_by_matchup(matchups: Iterable[MatchupRecord]) -> Dict[Optional[int], List[MatchupRecord]]:
    groups: Dict[Optional[int], List[MatchupRecord]] = {}
    for m in matchups:
        groups.setdefault(m.matchup_id, []).append(m)
    return groups


def find_opponent(m: MatchupRecord, groups: Mapping[Optional[int], Sequence[MatchupRecord]]) -> Optional[MatchupRecord]:
    for op in groups.get(m.matchup_id, ()):
        if op.roster_id != m.roster_id:
            return op
    return None


def compute_weekly_stats(
    week: int,
    matchups: Sequence[MatchupRecord],
    roster_owners: Mapping[int, str],
    players: Mapping[str, PlayerInfo],
    config: LeagueConfig = DEFAULT_CONFIG,
) -> List[WeeklyStats]:
    """Per-manager stats for a single week.

    The result is ordered by points-for descending; the first
    ``config.top_n_weekly`` (six) entries of that (stable) order carry
    ``top6_win = 1``. Equal scores do not share the cut-off, so exactly
    ``min(config.top_n_weekly, len(matchups))`` managers are flagged.
    """
    groups = _group_by_matchup(matchups)
    stats: List[WeeklyStats] = []

    for m in matchups:
        manager_id = roster_owners.get(m.roster_id) or UNKNOWN
        opponent = find_opponent(m, groups)
        fp_for = m.points
        fp_against = opponent.points if opponent else 0.0

        win = loss = draw = 0
        if fp_for > fp_against:
            win = 1
        elif fp_for < fp_against:
            loss = 1
        else:
            draw = 1

        buckets = {'QB': 0.0, 'RB': 0.0, 'WR': 0.0, 'TE': 0.0, 'IDP': 0.0, 'DEF': 0.0}
        best_starter = PlayerScore('', -1)
        for idx, pid in enumerate(m.starters):
            score = m.starters_points[idx] if idx < len(m.starters_points) else 0.0
            player = players.get(pid)
            pos = fantasy_position(player.position, config) if player else UNKNOWN
            if pos in config.def_bucket:
                buckets['DEF'] += score
            elif pos in buckets:
                buckets[pos] += score
            if score > best_starter.score:
                best_starter = PlayerScore(player.full_name if player else UNKNOWN, score)

        points_map = m.players_points or {}
        starters = set(m.starters)
        bench_score = 0.0
        best_bench = PlayerScore('', -1)
        for pid in m.players:
            if pid in starters:
                continue
            score = points_map.get(pid) or 0.0
            bench_score += score
            if score > best_bench.score:
                player = players.get(pid)
                best_bench = PlayerScore(player.full_name if player else UNKNOWN, score)

        stats.append(WeeklyStats(
            week=week,
            manager_id=manager_id,
            roster_id=m.roster_id,
            matchup_id=m.matchup_id,
            fp_for=fp_for,
            fp_against=fp_against,
            win=win,
            loss=loss,
            draw=draw,
            qb_score=buckets['QB'],
            rb_score=buckets['RB'],
            wr_score=buckets['WR'],
            te_score=buckets['TE'],
            wt_score=buckets['WR'] + buckets['TE'],
            idp_score=buckets['IDP'],
            def_score=buckets['DEF'],
            bench_score=bench_score,
            best_starter=best_starter,
            best_bench=best_bench,
        ))

    # positional rank, not dense rank
    stats.sort(key=lambda s: s.fp_for, reverse=True)
    for rank, stat in enumerate(stats, start=1):
        stat.top6_win = calculate_top6_win(rank, config.top_n_weekly)
    logger.debug('week %s: %d weekly stat rows', week, len(stats))
    return stats


def compute_season_stats(
    weekly_stats: Iterable[WeeklyStats],
    divisions: Optional[Mapping[str, str]] = None,
    manager_names: Optional[Mapping[str, str]] = None,
) -> List[SeasonStats]:
    """Fold weekly rows into one season line per manager (first-seen order).

    A head-to-head win and a top-6 finish each count toward ``total_wins``;
    missing the top 6 counts toward ``total_losses`` whatever the matchup result.
    Division records are not computed.
    """
    divisions = divisions or {}
    manager_names = manager_names or {}
    season: Dict[str, SeasonStats] = {}
    for stat in weekly_stats:
        s = season.get(stat.manager_id)
        if s is None:
            s = SeasonStats(
                manager_id=stat.manager_id,
                manager_name=manager_names.get(stat.manager_id) or (UNKNOWN if manager_names else ''),
                roster_id=stat.roster_id,
                division=divisions.get(stat.manager_id, UNKNOWN),
            )
            season[stat.manager_id] = s
        s.fp_for += stat.fp_for
        s.fp_against += stat.fp_against
        s.matchup_wins += stat.win
        s.matchup_losses += stat.loss
        s.matchup_draws += stat.draw
        s.top6_wins += stat.top6_win
        s.top6_losses += 1 - stat.top6_win
        s.total_wins += stat.win + stat.top6_win
        s.total_losses += stat.loss + (1 - stat.top6_win)
        s.total_draws += stat.draw
    return list(season.values())


def sort_standings(season_stats: Iterable[SeasonStats]) -> List[SeasonStats]:
    """Standings table order: total wins, draws, points for, points against."""
    return sorted(
        season_stats,
        key=lambda s: (s.total_wins, s.total_draws, s.fp_for, s.fp_against),
        reverse=True,
    )
