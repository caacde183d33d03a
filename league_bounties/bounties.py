"""The ten season bounties.

Every rule is a plain function over a shared, read-only ``BountyContext`` and
returns exactly one ``BountyResult``. Rules never depend on each other, so
they can be evaluated in any order. Winners are every manager within
``config.bounty_tolerance`` of the best value unless a rule says otherwise; winner
order follows input order (weeks ascending, provider roster order).
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, LeagueConfig, get_belt_holder
from .lineup import solve_perfect_offense
from .models import (
    TRADE,
    WAIVER,
    BountyResult,
    BountyWinner,
    DraftPickRecord,
    MatchupRecord,
    PlayerInfo,
    TransactionRecord,
    WeeklyStats,
)
from .stats import fantasy_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BountyContext:
    league: str
    season: int
    weekly_stats: Tuple[WeeklyStats, ...]
    transactions: Tuple[TransactionRecord, ...]  # flattened, weeks ascending
    matchups: Tuple[Tuple[int, Tuple[MatchupRecord, ...]], ...]  # (week, matchups), weeks ascending
    players: Mapping[str, PlayerInfo]
    roster_owners: Mapping[int, str]
    manager_names: Mapping[str, str]
    draft_picks: Tuple[DraftPickRecord, ...]
    config: LeagueConfig = DEFAULT_CONFIG

    def manager_name(self, manager_id: str) -> str:
        return self.manager_names.get(manager_id) or manager_id

    def player_name(self, player_id: str) -> str:
        player = self.players.get(player_id)
        return player.full_name if player and player.full_name else player_id

    def winner(self, manager_id: str, score: float, details: str, points: float) -> BountyWinner:
        return BountyWinner(manager_id, self.manager_name(manager_id), score, details, points)

    def near(self, value: float, target: float) -> bool:
        return abs(value - target) < self.config.bounty_tolerance


def _best_positive(values: Iterable[float]) -> Optional[float]:
    # nobody wins a metric that no manager scored in
    best = max(values, default=0.0)
    return best if best > 0 else None


def late_round_gem(ctx: BountyContext) -> BountyResult:
    eligible: Dict[str, DraftPickRecord] = {}
    for pick in ctx.draft_picks:
        if pick.round >= ctx.config.late_round_min:
            eligible[pick.player_id] = pick

    kept = set()
    if ctx.weekly_stats:
        last_week = max(s.week for s in ctx.weekly_stats)
        for week, week_matchups in ctx.matchups:
            if week != last_week:
                continue
            for m in week_matchups:
                for pid in m.players:
                    pick = eligible.get(pid)
                    if pick and pick.roster_id == m.roster_id:
                        kept.add(pid)

    # (manager_id, player_id) -> points while on the drafting roster
    gems: Dict[Tuple[str, str], float] = {}
    for week, week_matchups in ctx.matchups:
        if week > ctx.config.reg_season_weeks:
            continue
        for m in week_matchups:
            manager_id = ctx.roster_owners.get(m.roster_id)
            if not manager_id or m.players_points is None:
                continue
            for pid, score in m.players_points.items():
                if pid in kept and eligible[pid].roster_id == m.roster_id:
                    key = (manager_id, pid)
                    gems[key] = gems.get(key, 0.0) + (score or 0.0)

    best = _best_positive(gems.values())
    winners = []
    for (manager_id, pid), pts in gems.items():
        if best is not None and ctx.near(pts, best):
            details = f'{ctx.player_name(pid)} (Rd {eligible[pid].round}, {pts:.2f} pts)'
            winners.append(ctx.winner(manager_id, pts, details, 15))
    return BountyResult(1, 'Late Round Gem', 'Most points from a player drafted in Rd 11+ and kept', tuple(winners))


def the_dealmaker(ctx: BountyContext) -> BountyResult:
    trades: Dict[str, set] = {}
    for t in ctx.transactions:
        if t.kind != TRADE or not t.is_complete:
            continue
        for rid in t.roster_ids:
            manager_id = ctx.roster_owners.get(rid)
            if manager_id:
                trades.setdefault(manager_id, set()).add(t.transaction_id)

    most = max((len(ids) for ids in trades.values()), default=0)
    winners = []
    if most > 0:
        for manager_id, ids in trades.items():
            if len(ids) == most:
                winners.append(ctx.winner(manager_id, most, f'{most} trades', most * 3))
    return BountyResult(2, 'The Dealmaker', 'Most trades completed', tuple(winners))


def waiver_wire_war(ctx: BountyContext) -> BountyResult:
    # (week, player_id) -> number of waiver claims placed on that player that week
    bids: Dict[Tuple[int, str], int] = {}
    for t in ctx.transactions:
        if t.kind != WAIVER:
            continue
        if t.adds is not None:
            claimed: Iterable[str] = t.adds.keys()
        elif t.metadata_player_id:
            claimed = (t.metadata_player_id,)
        else:
            continue
        for pid in claimed:
            bids[(t.week, pid)] = bids.get((t.week, pid), 0) + 1

    most = max(bids.values(), default=0)
    winners = []
    if most > 0:
        for (week, pid), count in bids.items():
            if count != most:
                continue
            successful = next(
                (t for t in ctx.transactions if t.week == week and t.is_complete and t.adds and pid in t.adds),
                None,
            )
            if successful is None:
                logger.debug('waiver war: no completed add for %s in week %s', pid, week)
                continue
            manager_id = ctx.roster_owners.get(successful.adds[pid])
            if manager_id:
                details = f'Won {ctx.player_name(pid)} (Week {week}) with {most} bids'
                winners.append(ctx.winner(manager_id, most, details, 5))
    return BountyResult(3, 'Waiver Wire War', 'Won the most contested waiver claim', tuple(winners))


def best_waiver_value(ctx: BountyContext) -> BountyResult:
    # (manager_id, player_id) -> (effective bid, week added); first completed claim wins
    adds: Dict[Tuple[str, str], Tuple[int, int]] = {}
    for t in ctx.transactions:
        if t.kind != WAIVER or not t.is_complete or not t.adds:
            continue
        bid = t.waiver_bid or 0
        bid = 1 if bid == 0 else bid
        for pid, rid in t.adds.items():
            manager_id = ctx.roster_owners.get(rid)
            if manager_id and (manager_id, pid) not in adds:
                adds[(manager_id, pid)] = (bid, t.week)

    starts: Dict[Tuple[str, str], List[float]] = {}
    for week, week_matchups in ctx.matchups:
        for m in week_matchups:
            manager_id = ctx.roster_owners.get(m.roster_id)
            if not manager_id:
                continue
            for idx, pid in enumerate(m.starters):
                add = adds.get((manager_id, pid))
                if add and week >= add[1]:
                    score = m.starters_points[idx] if idx < len(m.starters_points) else 0.0
                    starts.setdefault((manager_id, pid), []).append(score)

    values: Dict[Tuple[str, str], float] = {}
    for key, scores in starts.items():
        if len(scores) >= 2:
            values[key] = (sum(scores) / len(scores)) / adds[key][0]

    best = _best_positive(values.values())
    winners = []
    for (manager_id, pid), value in values.items():
        if best is not None and ctx.near(value, best):
            details = f'{ctx.player_name(pid)} ({value:.2f} FP/$)'
            winners.append(ctx.winner(manager_id, value, details, 15))
    return BountyResult(4, 'Best Waiver Value', 'Best value (FP/$) from a waiver pickup (min 2 starts)', tuple(winners))


def _sum_by_manager(stats: Iterable[WeeklyStats], metric: Callable[[WeeklyStats], float]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for s in stats:
        totals[s.manager_id] = totals.get(s.manager_id, 0.0) + metric(s)
    return totals


def _top_scorers(ctx: BountyContext, totals: Mapping[str, float], fmt: str, points: float) -> Tuple[BountyWinner, ...]:
    best = _best_positive(totals.values())
    return tuple(
        ctx.winner(manager_id, value, fmt.format(value), points)
        for manager_id, value in totals.items()
        if best is not None and ctx.near(value, best)
    )


def deepest_bench(ctx: BountyContext) -> BountyResult:
    bench_weeks = ctx.config.bench_weeks
    totals = _sum_by_manager((s for s in ctx.weekly_stats if s.week <= bench_weeks), lambda s: s.bench_score)
    # always averaged over the full window, even if a manager has fewer weeks
    averages = {mid: pts / bench_weeks for mid, pts in totals.items()}
    winners = _top_scorers(ctx, averages, '{:.2f} avg bench points', 15)
    return BountyResult(5, 'Deepest Bench', 'Highest average bench points (Weeks 1-4)', winners)


def special_teams_specialist(ctx: BountyContext) -> BountyResult:
    totals = _sum_by_manager(ctx.weekly_stats, lambda s: s.te_score + s.idp_score + s.def_score)
    winners = _top_scorers(ctx, totals, '{:.2f} points', 15)
    return BountyResult(6, 'Special Teams Specialist', 'Most points from TE, IDP, and DEF', winners)


def longest_win_streak(stats: Iterable[WeeklyStats]) -> int:
    current = best = 0
    for s in sorted(stats, key=lambda s: s.week):
        if s.win == 1:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def unstoppable_force(ctx: BountyContext) -> BountyResult:
    by_manager: Dict[str, List[WeeklyStats]] = {}
    for s in ctx.weekly_stats:
        by_manager.setdefault(s.manager_id, []).append(s)
    streaks = {mid: longest_win_streak(stats) for mid, stats in by_manager.items()}

    longest = max(streaks.values(), default=0)
    winners = []
    if longest > 0:
        for manager_id, streak in streaks.items():
            if streak == longest:
                points = 10 + 3 * max(0, streak - 5)
                winners.append(ctx.winner(manager_id, streak, f'{streak} game win streak', points))
    return BountyResult(7, 'Unstoppable Force', 'Longest win streak', tuple(winners))


def perfect_score(m: MatchupRecord, players: Mapping[str, PlayerInfo], config: LeagueConfig = DEFAULT_CONFIG) -> float:
    """Best total the roster could have scored: optimal offense, best DEF/NA, two best IDP."""
    points_map = m.players_points or {}
    offense: List[Tuple[str, float]] = []
    idp: List[float] = []
    def_score = 0.0
    for pid in m.players:
        score = points_map.get(pid) or 0.0
        player = players.get(pid)
        pos = fantasy_position(player.position, config) if player else 'NA'
        if pos in config.def_bucket:
            def_score = max(def_score, score)
        elif pos == 'IDP':
            idp.append(score)
        elif pos in config.offense_positions:
            offense.append((pos, score))
    idp.sort(reverse=True)
    return def_score + sum(idp[:2]) + solve_perfect_offense(offense, config.lineup_slots)


def perfect_weeks(ctx: BountyContext) -> BountyResult:
    counts: Dict[str, int] = {}
    for week, week_matchups in ctx.matchups:
        for m in week_matchups:
            manager_id = ctx.roster_owners.get(m.roster_id)
            if not manager_id or m.players_points is None:
                continue
            best = perfect_score(m, ctx.players, ctx.config)
            if abs(m.points - best) < ctx.config.perfect_week_tolerance:
                counts[manager_id] = counts.get(manager_id, 0) + 1

    most = max(counts.values(), default=0)
    winners = []
    if most > 0:
        for manager_id, count in counts.items():
            if count == most:
                winners.append(ctx.winner(manager_id, most, f'{most} perfect weeks', most * 3))
    return BountyResult(8, 'Perfect Weeks', 'Most perfect lineups set', tuple(winners))


def points_king(ctx: BountyContext) -> BountyResult:
    totals = _sum_by_manager(ctx.weekly_stats, lambda s: s.fp_for)
    winners = _top_scorers(ctx, totals, '{:.2f} total points', 15)
    return BountyResult(9, 'Points King', 'Most total points scored', winners)


def _manager_by_name(ctx: BountyContext, name: str) -> Optional[str]:
    for manager_id, display in ctx.manager_names.items():
        if display == name:
            return manager_id
    return None


def the_belt(ctx: BountyContext) -> BountyResult:
    holder_name = get_belt_holder(ctx.league, ctx.season, ctx.config)
    holder = _manager_by_name(ctx, holder_name) if holder_name else None

    if holder:
        for week, week_matchups in ctx.matchups:
            if week > ctx.config.reg_season_weeks:
                break
            mine = next((m for m in week_matchups if ctx.roster_owners.get(m.roster_id) == holder), None)
            if mine is None:
                continue
            opponent = next(
                (m for m in week_matchups if m.matchup_id == mine.matchup_id and m.roster_id != mine.roster_id),
                None,
            )
            # a draw keeps the belt where it is
            if opponent and opponent.points > mine.points:
                challenger = ctx.roster_owners.get(opponent.roster_id)
                if challenger:
                    logger.debug('belt: week %s %s -> %s', week, holder, challenger)
                    holder = challenger

    winners: Tuple[BountyWinner, ...] = ()
    if holder:
        winners = (ctx.winner(holder, 1, 'Current Holder', 15),)
    return BountyResult(10, 'The Belt', 'Holder of The Belt at end of season', winners)


BOUNTY_RULES: Tuple[Callable[[BountyContext], BountyResult], ...] = (
    late_round_gem,
    the_dealmaker,
    waiver_wire_war,
    best_waiver_value,
    deepest_bench,
    special_teams_specialist,
    unstoppable_force,
    perfect_weeks,
    points_king,
    the_belt,
)


def build_context(
    season: int,
    league: str,
    weekly_stats: Iterable[WeeklyStats],
    transactions: Mapping[int, Sequence[TransactionRecord]],
    matchups: Mapping[int, Sequence[MatchupRecord]],
    players: Mapping[str, PlayerInfo],
    roster_owners: Mapping[int, str],
    manager_names: Mapping[str, str],
    draft_picks: Iterable[DraftPickRecord],
    config: LeagueConfig = DEFAULT_CONFIG,
) -> BountyContext:
    flat: List[TransactionRecord] = []
    for week in sorted(transactions):
        flat.extend(transactions[week])
    return BountyContext(
        league=league,
        season=season,
        weekly_stats=tuple(weekly_stats),
        transactions=tuple(flat),
        matchups=tuple((week, tuple(matchups[week])) for week in sorted(matchups)),
        players=players,
        roster_owners=roster_owners,
        manager_names=manager_names,
        draft_picks=tuple(draft_picks),
        config=config,
    )


def calculate_bounties(
    season: int,
    league: str,
    weekly_stats: Iterable[WeeklyStats],
    transactions: Mapping[int, Sequence[TransactionRecord]],
    matchups: Mapping[int, Sequence[MatchupRecord]],
    players: Mapping[str, PlayerInfo],
    roster_owners: Mapping[int, str],
    manager_names: Mapping[str, str],
    draft_picks: Iterable[DraftPickRecord],
    config: LeagueConfig = DEFAULT_CONFIG,
) -> List[BountyResult]:
    """Evaluate all ten bounties; the result always has ten entries, ids 1..10."""
    ctx = build_context(
        season, league, weekly_stats, transactions, matchups, players,
        roster_owners, manager_names, draft_picks, config,
    )
    return [rule(ctx) for rule in BOUNTY_RULES]


def total_bounty_points(results: Iterable[BountyResult]) -> Dict[str, float]:
    points: Dict[str, float] = {}
    for result in results:
        for w in result.winners:
            points[w.manager_id] = points.get(w.manager_id, 0) + w.points
    return points
