"""Map raw Sleeper API payloads to the typed records the stats code consumes.

Sleeper payloads are loosely shaped: fields go missing, numbers arrive as
strings, and ``players_points``/``adds``/``settings`` may be null. Everything
is normalised here once so the rest of the package can rely on explicit
required/optional fields.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import DEFAULT_CONFIG, LeagueConfig, get_real_name
from .models import (
    DraftPickRecord,
    MatchupRecord,
    PlayerInfo,
    TransactionRecord,
)

# Sleeper's player id for an unfilled lineup slot
EMPTY_SLOT = '0'


def _to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _str_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v)


def _slot_list(value: Any) -> Tuple[str, ...]:
    # starters line up with starters_points by index; an empty slot stays as '0'
    if not isinstance(value, list):
        return ()
    return tuple(str(v) if v else EMPTY_SLOT for v in value)


def _roster_map(value: Any) -> Optional[Mapping[str, int]]:
    # adds/drops: {player_id: roster_id}
    if not isinstance(value, dict):
        return None
    out: Dict[str, int] = {}
    for pid, rid in value.items():
        rid_int = _to_int(rid)
        if rid_int is not None:
            out[str(pid)] = rid_int
    return MappingProxyType(out)


def parse_matchup(raw: Mapping[str, Any]) -> MatchupRecord:
    starters = _slot_list(raw.get('starters'))
    starters_points_raw = raw.get('starters_points') or []
    starters_points = tuple(_to_float(p) for p in starters_points_raw)
    points_raw = raw.get('players_points')
    players_points = None
    if isinstance(points_raw, dict):
        players_points = MappingProxyType({str(pid): _to_float(p) for pid, p in points_raw.items()})
    return MatchupRecord(
        roster_id=_to_int(raw.get('roster_id')) or 0,
        matchup_id=_to_int(raw.get('matchup_id')),
        points=_to_float(raw.get('points')),
        starters=starters,
        starters_points=starters_points,
        players=_str_list(raw.get('players')),
        players_points=players_points,
    )


def parse_matchups(raw_list: Any) -> Tuple[MatchupRecord, ...]:
    if not isinstance(raw_list, list):
        return ()
    return tuple(parse_matchup(m) for m in raw_list if isinstance(m, dict))


def parse_transaction(raw: Mapping[str, Any], week: int) -> TransactionRecord:
    """Build a transaction record; ``week`` is the week the transaction list was fetched for."""
    settings = raw.get('settings') if isinstance(raw.get('settings'), dict) else {}
    metadata = raw.get('metadata') if isinstance(raw.get('metadata'), dict) else {}
    roster_ids = tuple(r for r in (_to_int(x) for x in raw.get('roster_ids') or []) if r is not None)
    meta_pid = metadata.get('player_id')
    return TransactionRecord(
        transaction_id=str(raw.get('transaction_id') or ''),
        kind=str(raw.get('type') or ''),
        status=str(raw.get('status') or ''),
        week=week,
        roster_ids=roster_ids,
        adds=_roster_map(raw.get('adds')),
        drops=_roster_map(raw.get('drops')),
        waiver_bid=_to_int(settings.get('waiver_bid')),
        metadata_player_id=str(meta_pid) if meta_pid else None,
    )


def parse_transactions(raw_list: Any, week: int) -> Tuple[TransactionRecord, ...]:
    if not isinstance(raw_list, list):
        return ()
    return tuple(parse_transaction(t, week) for t in raw_list if isinstance(t, dict))


def parse_draft_picks(raw_list: Any) -> Tuple[DraftPickRecord, ...]:
    if not isinstance(raw_list, list):
        return ()
    picks: List[DraftPickRecord] = []
    for p in raw_list:
        if not isinstance(p, dict) or not p.get('player_id'):
            continue
        picks.append(DraftPickRecord(
            pick_no=_to_int(p.get('pick_no')) or 0,
            round=_to_int(p.get('round')) or 0,
            player_id=str(p['player_id']),
            roster_id=_to_int(p.get('roster_id')) or 0,
        ))
    return tuple(picks)


def parse_players(raw: Any) -> Mapping[str, PlayerInfo]:
    """Player directory from /players/nfl (player_id -> player object)."""
    if not isinstance(raw, dict):
        return MappingProxyType({})
    out: Dict[str, PlayerInfo] = {}
    for pid, pdata in raw.items():
        if not isinstance(pdata, dict):
            continue
        name = pdata.get('full_name')
        if not name:
            first, last = pdata.get('first_name') or '', pdata.get('last_name') or ''
            name = f'{first} {last}'.strip() or str(pid)
        out[str(pid)] = PlayerInfo(
            player_id=str(pid),
            full_name=name,
            position=str(pdata.get('position') or ''),
        )
    return MappingProxyType(out)


def roster_owner_map(rosters: Any) -> Mapping[int, str]:
    """roster_id -> owner (manager) user id; rosters without an owner are left out."""
    out: Dict[int, str] = {}
    for r in rosters or []:
        if not isinstance(r, dict):
            continue
        rid = _to_int(r.get('roster_id'))
        owner = r.get('owner_id')
        if rid is not None and owner:
            out[rid] = str(owner)
    return MappingProxyType(out)


def manager_name_map(users: Any, config: LeagueConfig = DEFAULT_CONFIG) -> Mapping[str, str]:
    """user_id -> display name, translated through the league's username map."""
    out: Dict[str, str] = {}
    for u in users or []:
        if not isinstance(u, dict):
            continue
        uid = u.get('user_id')
        dn = u.get('display_name') or u.get('username') or uid
        if uid and dn:
            out[str(uid)] = get_real_name(str(dn), config)
    return MappingProxyType(out)


def pick_season_draft(drafts: Iterable[Mapping[str, Any]], season: int) -> Optional[str]:
    for d in drafts or []:
        if isinstance(d, dict) and str(d.get('season')) == str(season) and d.get('draft_id'):
            return str(d['draft_id'])
    return None
