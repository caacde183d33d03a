from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .config import LINEUP_SLOTS


def is_eligible(pos: str, slot: Tuple[str, frozenset]) -> bool:
    return pos in slot[1]


@dataclass
class _Search:
    """State for one solve call: the sorted players, slot template and best total so far."""
    players: List[Tuple[str, float]]
    slots: Sequence[Tuple[str, frozenset]]
    best: float = 0.0


def _upper_bound(search: _Search, player_idx: int, open_slots: int) -> float:
    # players are sorted by points desc, so the next `open_slots` are the best still available;
    # negative scores are never worth taking
    return sum(max(fp, 0.0) for _pos, fp in search.players[player_idx:player_idx + open_slots])


def _backtrack(search: _Search, player_idx: int, filled: int, open_slots: int, current: float) -> None:
    if current > search.best:
        search.best = current
    if open_slots == 0 or player_idx >= len(search.players):
        return
    if current + _upper_bound(search, player_idx, open_slots) <= search.best:
        return

    pos, fp = search.players[player_idx]

    _backtrack(search, player_idx + 1, filled, open_slots, current)

    for i, slot in enumerate(search.slots):
        bit = 1 << i
        if filled & bit or not is_eligible(pos, slot):
            continue
        # identical neighbouring slots are filled left to right only
        if i > 0 and search.slots[i - 1][1] == slot[1] and not filled & (1 << (i - 1)):
            continue
        _backtrack(search, player_idx + 1, filled | bit, open_slots - 1, current + fp)


def solve_perfect_offense(
    players: Iterable[Tuple[str, float]],
    slots: Sequence[Tuple[str, frozenset]] = LINEUP_SLOTS,
) -> float:
    """Best offensive total obtainable from ``players`` under the slot template.

    ``players`` holds (fantasy position, points) pairs for QB/RB/WR/TE. Slots may
    be left empty and every player fills at most one slot. The input is not
    modified and its order does not affect the result.
    """
    ordered = sorted(players, key=lambda p: p[1], reverse=True)
    search = _Search(players=ordered, slots=slots)
    _backtrack(search, 0, 0, len(slots), 0.0)
    return search.best
