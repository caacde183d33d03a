"""Static league configuration: week ranges, position tables, lineup template,
league ids, display names and the per-season belt holders.

Everything here is immutable. ``load_config`` overlays a JSON file on top of
the defaults and returns a new ``LeagueConfig``.
"""
import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

REG_SEASON_WEEKS = 14
PLAYOFF_WEEKS: Tuple[int, ...] = (15, 16, 17)
POOL_SIZE = 6
TOP_N_WEEKLY = 6
LATE_ROUND_MIN = 11
BENCH_WEEKS = 4
BOUNTY_TOLERANCE = 0.01
PERFECT_WEEK_TOLERANCE = 0.05

DEFAULT_LEAGUE = os.environ.get('LB_LEAGUE', 'trc')
DEFAULT_SEASON = 2025

IDP_POSITIONS = frozenset({'DL', 'DE', 'SS', 'DB', 'LB', 'ILB', 'OLB', 'FS', 'S', 'DT', 'CB'})
UNCLASSIFIED_POSITIONS = frozenset({'OT', 'OL', 'K', 'LS', 'P', 'G', 'C'})
RB_POSITIONS = frozenset({'RB', 'FB', 'HB'})
OFFENSE_POSITIONS = frozenset({'QB', 'RB', 'WR', 'TE'})
# DEF and the unclassified 'NA' bucket are scored together
DEF_BUCKET = frozenset({'DEF', 'NA'})

# Ordered lineup template: (slot name, eligible fantasy positions)
LINEUP_SLOTS: Tuple[Tuple[str, frozenset], ...] = (
    ('QB', frozenset({'QB'})),
    ('RB', frozenset({'RB'})),
    ('RB', frozenset({'RB'})),
    ('WR', frozenset({'WR'})),
    ('WT', frozenset({'WR', 'TE'})),
    ('FLEX', frozenset({'RB', 'WR', 'TE'})),
    ('SFLEX', frozenset({'QB', 'RB', 'WR', 'TE'})),
)

LEAGUE_IDS: Mapping[str, Mapping[int, str]] = MappingProxyType({
    'bbl': MappingProxyType({
        2020: '606956268577447936',
        2021: '650140461830361088',
        2022: '855994274242736128',
        2023: '916955500913225728',
        2024: '1122410215233662976',
        2025: '1254561660018900992',
    }),
    'trc': MappingProxyType({
        2020: '586414421119643648',
        2021: '649913434003042304',
        2022: '855994240486998016',
        2023: '916955581074788352',
        2024: '1122409276741394432',
        2025: '1254561572831895552',
    }),
    'lol': MappingProxyType({
        2024: '1127673083663372288',
        2025: '1254575854462185473',
    }),
})

USER_MAP: Mapping[str, str] = MappingProxyType({
    'playmehere13': 'Mahir',
    'maroofk29': 'Maroof',
    'Faisalshahid': 'Faisal',
    'Vivek360': 'Vivek',
    'Allenworld': 'Johnny',
    'liujo99': 'Johnny',
    'Nabz24': 'Nabeel',
    'beechert': 'Christina',
    'Fizzle123': 'Arif',
    'abbyhas': 'Abby',
    'arkare': 'Amogh',
    'eskrajeff': 'Jeff',
    'Benchwarmers91': 'Neeloy',
    'TaskForceBitchMob': 'EJ',
    'omahawk': 'Omar',
    'KarniclesOfKarnia': 'Karn',
    'ihsleeper': 'Imran',
    'vudoo6': 'Christian',
    'DeliverUsSaxy': 'Siddhant',
    'dpdp': 'Dillon',
    'dillonpatel': 'Dillon',
    'ontickkhan24': 'Ontick',
    'jpedro': 'Jeremy',
    'Shardz': 'Shardul',
    'saraton1n': 'Sara',
    'rubeansss': 'Rubina',
    'mireyaws': 'Mireya',
    'Nikdev': 'Nikhil',
})

# (league key, season) -> display name of the manager holding the belt in week 1
BELT_HOLDERS: Mapping[Tuple[str, int], str] = MappingProxyType({
    ('bbl', 2025): 'Johnny',
    ('bbl', 2024): 'Shardul',
    ('bbl', 2023): 'Vivek',
    ('trc', 2025): 'Arif',
    ('trc', 2024): 'Maroof',
    ('trc', 2023): 'Karn',
})


class ConfigError(ValueError):
    pass


def default_season() -> int:
    """Season from the LB_SEASON environment variable, else DEFAULT_SEASON."""
    raw = os.environ.get('LB_SEASON')
    if not raw:
        return DEFAULT_SEASON
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f'LB_SEASON must be a season year, got {raw!r}') from e


@dataclass(frozen=True)
class LeagueConfig:
    league_ids: Mapping[str, Mapping[int, str]] = field(default_factory=lambda: LEAGUE_IDS)
    user_map: Mapping[str, str] = field(default_factory=lambda: USER_MAP)
    belt_holders: Mapping[Tuple[str, int], str] = field(default_factory=lambda: BELT_HOLDERS)
    # manager_id -> division name; empty means every division is 'Unknown'
    divisions: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    lineup_slots: Tuple[Tuple[str, frozenset], ...] = LINEUP_SLOTS
    reg_season_weeks: int = REG_SEASON_WEEKS
    playoff_weeks: Tuple[int, ...] = PLAYOFF_WEEKS
    top_n_weekly: int = TOP_N_WEEKLY
    late_round_min: int = LATE_ROUND_MIN
    bench_weeks: int = BENCH_WEEKS
    bounty_tolerance: float = BOUNTY_TOLERANCE
    perfect_week_tolerance: float = PERFECT_WEEK_TOLERANCE
    idp_positions: frozenset = IDP_POSITIONS
    unclassified_positions: frozenset = UNCLASSIFIED_POSITIONS
    rb_positions: frozenset = RB_POSITIONS
    offense_positions: frozenset = OFFENSE_POSITIONS
    def_bucket: frozenset = DEF_BUCKET


DEFAULT_CONFIG = LeagueConfig()


def get_league_id(league: str, season: int, config: LeagueConfig = DEFAULT_CONFIG) -> Optional[str]:
    return config.league_ids.get(league, {}).get(season)


def get_real_name(username: str, config: LeagueConfig = DEFAULT_CONFIG) -> str:
    return config.user_map.get(username, username)


def get_belt_holder(league: str, season: int, config: LeagueConfig = DEFAULT_CONFIG) -> Optional[str]:
    return config.belt_holders.get((league, season))


def _parse_belt_holders(raw: Any) -> Dict[Tuple[str, int], str]:
    # JSON shape: {"bbl": {"2025": "Johnny", ...}, ...}
    if not isinstance(raw, dict):
        raise ConfigError('belt_holders must be an object of league -> {season: name}')
    out: Dict[Tuple[str, int], str] = {}
    for league, seasons in raw.items():
        if not isinstance(seasons, dict):
            raise ConfigError(f'belt_holders.{league} must be an object')
        for season, name in seasons.items():
            try:
                out[(str(league), int(season))] = str(name)
            except ValueError as e:
                raise ConfigError(f'Invalid season {season!r} for belt_holders.{league}') from e
    return out


def _parse_league_ids(raw: Any) -> Dict[str, Mapping[int, str]]:
    if not isinstance(raw, dict):
        raise ConfigError('league_ids must be an object of league -> {season: id}')
    out: Dict[str, Mapping[int, str]] = {}
    for league, seasons in raw.items():
        if not isinstance(seasons, dict):
            raise ConfigError(f'league_ids.{league} must be an object')
        try:
            out[str(league)] = MappingProxyType({int(s): str(lid) for s, lid in seasons.items()})
        except ValueError as e:
            raise ConfigError(f'Invalid season key in league_ids.{league}') from e
    return out


def load_config(path: Optional[str] = None, base: LeagueConfig = DEFAULT_CONFIG) -> LeagueConfig:
    """Load a JSON config file and overlay it on ``base``.

    Recognised keys: ``league_ids``, ``user_map``, ``belt_holders`` and
    ``divisions``. Tables from the file are merged over the defaults, so a file
    only needs to list what it adds or changes. Returns ``base`` when no path
    is given.
    """
    if not path:
        return base
    try:
        raw = json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f'Could not read config {path}: {e}') from e
    if not isinstance(raw, dict):
        raise ConfigError(f'Config {path} must contain a JSON object')

    changes: Dict[str, Any] = {}
    if 'league_ids' in raw:
        merged = dict(base.league_ids)
        merged.update(_parse_league_ids(raw['league_ids']))
        changes['league_ids'] = MappingProxyType(merged)
    if 'user_map' in raw:
        if not isinstance(raw['user_map'], dict):
            raise ConfigError('user_map must be an object of username -> display name')
        merged_users = dict(base.user_map)
        merged_users.update({str(k): str(v) for k, v in raw['user_map'].items()})
        changes['user_map'] = MappingProxyType(merged_users)
    if 'belt_holders' in raw:
        merged_belts = dict(base.belt_holders)
        merged_belts.update(_parse_belt_holders(raw['belt_holders']))
        changes['belt_holders'] = MappingProxyType(merged_belts)
    if 'divisions' in raw:
        if not isinstance(raw['divisions'], dict):
            raise ConfigError('divisions must be an object of manager_id -> division')
        changes['divisions'] = MappingProxyType({str(k): str(v) for k, v in raw['divisions'].items()})
    return replace(base, **changes)
