from __future__ import annotations

"""Round-to-round slot table.

Every matchup of round k (except the Finals) feeds exactly one slot of round
k+1. The table is derived once from the round sizes:

- a round of size n is split in two groups (East, West) of n/2 matchups
- East index i  -> next index i // 2
- West index i  -> next index (i - n/2) // 2 + n/4
- destination side is team_a when i is even within its group, else team_b
- the round feeding the Finals has one matchup per group: East -> team_a,
  West -> team_b
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .types import ROUND_ORDER, ROUND_SIZES, RoundId


@dataclass(frozen=True, slots=True)
class SlotRef:
    round_id: RoundId
    index: int
    side: str  # "team_a" | "team_b"


def build_slot_map(
    round_order: Sequence[RoundId] = ROUND_ORDER,
    round_sizes: Mapping[RoundId, int] = ROUND_SIZES,
) -> Dict[Tuple[RoundId, int], SlotRef]:
    table: Dict[Tuple[RoundId, int], SlotRef] = {}
    for k, rid in enumerate(round_order[:-1]):
        nxt = round_order[k + 1]
        size = int(round_sizes[rid])
        next_size = int(round_sizes[nxt])
        if size != next_size * 2:
            raise ValueError(f"{rid.value} ({size}) must be twice {nxt.value} ({next_size})")

        group = size // 2
        for i in range(size):
            in_group_a = i < group
            pos = i if in_group_a else i - group
            if next_size == 1:
                # Conference finals -> Finals: one matchup per group, mapped by group identity.
                table[(rid, i)] = SlotRef(nxt, 0, "team_a" if in_group_a else "team_b")
                continue
            next_index = pos // 2 if in_group_a else pos // 2 + next_size // 2
            table[(rid, i)] = SlotRef(nxt, next_index, "team_a" if pos % 2 == 0 else "team_b")
    return table


SLOT_MAP: Dict[Tuple[RoundId, int], SlotRef] = build_slot_map()

_FEEDERS: Dict[Tuple[RoundId, int], Dict[str, Tuple[RoundId, int]]] = {}
for (_rid, _i), _ref in SLOT_MAP.items():
    _FEEDERS.setdefault((_ref.round_id, _ref.index), {})[_ref.side] = (_rid, _i)


def destination(round_id: RoundId, index: int) -> Optional[SlotRef]:
    """Slot of the next round that `round_id[index]`'s winner moves into (None for the Finals)."""
    return SLOT_MAP.get((round_id, index))


def feeders(round_id: RoundId, index: int) -> Dict[str, Tuple[RoundId, int]]:
    """{side: (round_id, index)} of the matchups feeding `round_id[index]` (empty for the first round)."""
    return dict(_FEEDERS.get((round_id, index), {}))


def downstream_path(round_id: RoundId, index: int) -> List[SlotRef]:
    """Every slot a winner of `round_id[index]` could reach, in round order."""
    out: List[SlotRef] = []
    ref = destination(round_id, index)
    while ref is not None:
        out.append(ref)
        ref = destination(ref.round_id, ref.index)
    return out
