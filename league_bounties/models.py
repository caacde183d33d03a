from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

# Transaction kinds/statuses as reported by Sleeper
TRADE = 'trade'
FREE_AGENT = 'free_agent'
WAIVER = 'waiver'
COMPLETE = 'complete'
FAILED = 'failed'

CHAMPIONSHIP = 'championship'
CONSOLATION = 'consolation'


@dataclass(frozen=True)
class PlayerInfo:
    player_id: str
    full_name: str
    position: str


@dataclass(frozen=True)
class MatchupRecord:
    roster_id: int
    matchup_id: Optional[int]
    points: float
    starters: Tuple[str, ...] = ()
    starters_points: Tuple[float, ...] = ()
    players: Tuple[str, ...] = ()
    # None when the provider omitted players_points for the week
    players_points: Optional[Mapping[str, float]] = None


@dataclass(frozen=True)
class TransactionRecord:
    transaction_id: str
    kind: str
    status: str
    week: int
    roster_ids: Tuple[int, ...] = ()
    adds: Optional[Mapping[str, int]] = None  # player_id -> roster_id
    drops: Optional[Mapping[str, int]] = None
    waiver_bid: Optional[int] = None
    metadata_player_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.status == COMPLETE


@dataclass(frozen=True)
class DraftPickRecord:
    pick_no: int
    round: int
    player_id: str
    roster_id: int


@dataclass(frozen=True)
class PlayerScore:
    name: str
    score: float


@dataclass
class WeeklyStats:
    week: int
    manager_id: str
    roster_id: int
    matchup_id: Optional[int]
    fp_for: float
    fp_against: float
    win: int
    loss: int
    draw: int
    qb_score: float = 0.0
    rb_score: float = 0.0
    wr_score: float = 0.0
    te_score: float = 0.0
    wt_score: float = 0.0  # WR + TE
    idp_score: float = 0.0
    def_score: float = 0.0
    bench_score: float = 0.0
    best_starter: PlayerScore = PlayerScore('', -1)
    best_bench: PlayerScore = PlayerScore('', -1)
    top6_win: int = 0


@dataclass
class SeasonStats:
    manager_id: str
    manager_name: str
    roster_id: int
    total_wins: int = 0
    total_losses: int = 0
    total_draws: int = 0
    fp_for: float = 0.0
    fp_against: float = 0.0
    matchup_wins: int = 0
    matchup_losses: int = 0
    matchup_draws: int = 0
    top6_wins: int = 0
    top6_losses: int = 0
    division: str = 'Unknown'
    # division records are never resolved; kept for the standings table shape
    div_wins: int = 0
    div_losses: int = 0
    div_draws: int = 0


@dataclass(frozen=True)
class BountyWinner:
    manager_id: str
    manager_name: str
    score: float
    details: str
    points: float


@dataclass(frozen=True)
class BountyResult:
    id: int
    title: str
    description: str
    winners: Tuple[BountyWinner, ...] = ()


@dataclass
class PlayoffTeam:
    manager_id: str
    manager_name: str
    pool: str
    seed: int
    total_wins: int
    win_points: float
    bounty_points: float
    pre_playoff_points: float
    week15_points: float
    week16_points: float
    week17_points: float
    playoff_points: float
    final_rank: int = 0


@dataclass(frozen=True)
class SeasonInputs:
    """Everything fetched for one league-season, already parsed into records."""
    league: str
    season: int
    matchups: Mapping[int, Tuple[MatchupRecord, ...]]
    transactions: Mapping[int, Tuple[TransactionRecord, ...]]
    draft_picks: Tuple[DraftPickRecord, ...]
    players: Mapping[str, PlayerInfo]
    roster_owners: Mapping[int, str]
    manager_names: Mapping[str, str]


@dataclass
class SeasonReport:
    league: str
    season: int
    weekly_stats: List[WeeklyStats]
    season_stats: List[SeasonStats]
    bounties: List[BountyResult]
    bounty_points: Dict[str, float]
    playoff_scores: Dict[int, Dict[str, float]]
    playoff_teams: List[PlayoffTeam] = field(default_factory=list)
    playoff_error: Optional[str] = None
