from __future__ import annotations

"""Consistency checks for hand-edited or imported bracket records.

Engine outputs always pass; these checks exist for records that were built
or edited outside the progression functions.
"""

from typing import Any, List, Mapping, Optional, Union

from .errors import InvalidBracket
from .models import Bracket, coerce_bracket
from .play_in import EIGHTH_SEED, SEVENTH_SEED, seed_slot
from .slotmap import feeders
from .types import ROUND_ORDER, normalize_ref


def _same_occupant(team: Optional[str], expected: Optional[str]) -> bool:
    return normalize_ref(team) == normalize_ref(expected)


def _seed_mismatch(seed: Optional[int], expected: Optional[int]) -> bool:
    return seed is not None and expected is not None and seed != expected


def check_consistency(bracket: Union[Bracket, Mapping[str, Any]]) -> List[str]:
    """Return a list of problems; empty means consistent."""
    try:
        b = coerce_bracket(bracket)
    except InvalidBracket as exc:
        return list(exc.details) if isinstance(exc.details, list) else [exc.message]

    problems: List[str] = []

    for rid in ROUND_ORDER[1:]:
        for j, m in enumerate(b.round(rid)):
            for side, (src_rid, src_i) in feeders(rid, j).items():
                src = b.matchup(src_rid, src_i)
                team, seed = m.slot(side)
                if not _same_occupant(team, src.winner):
                    problems.append(
                        f"{rid.value}[{j}].{side} is {team!r} but {src_rid.value}[{src_i}] winner is {src.winner!r}"
                    )
                elif _seed_mismatch(seed, src.winner_seed):
                    problems.append(
                        f"{rid.value}[{j}].{side} seed {seed} differs from {src_rid.value}[{src_i}] winner seed {src.winner_seed}"
                    )

    for sub in b.play_in or ():
        conf = sub.conference.value
        final = sub.final
        if not _same_occupant(final.team_a, sub.seventh_eighth.loser):
            problems.append(f"play_in.{conf}.final.team_a is {final.team_a!r} but the 7v8 loser is {sub.seventh_eighth.loser!r}")
        if not _same_occupant(final.team_b, sub.ninth_tenth.winner):
            problems.append(f"play_in.{conf}.final.team_b is {final.team_b!r} but the 9v10 winner is {sub.ninth_tenth.winner!r}")

        for seed, expected in ((SEVENTH_SEED, sub.seventh_seed), (EIGHTH_SEED, sub.eighth_seed)):
            ref = seed_slot(sub.conference, seed)
            team, _ = b.matchup(ref.round_id, ref.index).slot(ref.side)
            if not _same_occupant(team, expected):
                problems.append(
                    f"{ref.round_id.value}[{ref.index}].{ref.side} is {team!r} but the {conf} Play-In {seed} seed is {expected!r}"
                )

    finals = b.finals
    if finals.is_resolved and _seed_mismatch(b.champion_seed, finals.winner_seed):
        problems.append(f"champion_seed {b.champion_seed} differs from the Finals winner seed {finals.winner_seed}")

    return problems
