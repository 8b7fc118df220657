from __future__ import annotations

"""Bracket progression: apply picks and cascade their consequences.

All functions are pure: they take a Bracket and return a new Bracket. The
only mutation happens on a private list-of-lists working copy of the rounds
inside a single call.

Propagation rule (one routine for every round):
- a matchup's output is its winner (or nothing when unresolved)
- the output is written into the destination slot given by the slot map
- if the slot's occupant changes, the destination loses its result, and
  its own (now empty) output is pushed forward the same way
- the Finals has no destination; champion follows the Finals winner, and
  champion + MVP are reset when the Finals participants change
"""

import logging
from dataclasses import replace
from typing import Any, List, Optional, Tuple, Union

from .errors import InvalidSelection, InvalidSeriesLength, RoundNotFound
from .models import Bracket, Matchup, PlayInSubBracket, _check_series_length
from .slotmap import SlotRef, destination
from .types import ROUND_ORDER, RoundId, clean_ref, normalize_ref, parse_round_id

logger = logging.getLogger(__name__)

WorkingRounds = List[List[Matchup]]


# ---------------------------------------------------------------------------
# Working-copy helpers (shared with play_in)
# ---------------------------------------------------------------------------

def thaw_rounds(bracket: Bracket) -> WorkingRounds:
    return [list(matchups) for matchups in bracket.rounds]


def _same_occupant(cur_team: Optional[str], cur_seed: Optional[int], team: Optional[str], seed: Optional[int]) -> bool:
    return normalize_ref(cur_team) == normalize_ref(team) and cur_seed == seed


def place_participant(rounds: WorkingRounds, ref: SlotRef, team: Optional[str], seed: Optional[int]) -> bool:
    """Write a participant into a slot, invalidating downstream picks if it changed.

    Returns True if the slot changed.
    """
    pos = ref.round_id.position
    target = rounds[pos][ref.index]
    cur_team, cur_seed = target.slot(ref.side)
    if _same_occupant(cur_team, cur_seed, team, seed):
        return False

    was_resolved = target.is_resolved
    rounds[pos][ref.index] = target.with_slot(ref.side, team, seed)
    logger.debug(
        "slot %s[%d].%s: %r -> %r%s",
        ref.round_id.value,
        ref.index,
        ref.side,
        cur_team,
        team,
        " (result cleared)" if was_resolved else "",
    )
    if was_resolved:
        propagate_result(rounds, ref.round_id, ref.index)
    return True


def propagate_result(rounds: WorkingRounds, round_id: RoundId, index: int) -> None:
    """Push `round_id[index]`'s current output into the next round."""
    ref = destination(round_id, index)
    if ref is None:
        return
    source = rounds[round_id.position][index]
    if source.is_resolved:
        place_participant(rounds, ref, source.winner, source.winner_seed)
    else:
        place_participant(rounds, ref, None, None)


def _finals_key(m: Matchup) -> Tuple[str, str]:
    return (normalize_ref(m.team_a), normalize_ref(m.team_b))


def rebuild_bracket(
    bracket: Bracket,
    rounds: WorkingRounds,
    *,
    play_in: Optional[Tuple[PlayInSubBracket, ...]] = None,
) -> Bracket:
    """Freeze the working rounds and re-derive champion / MVP."""
    new_rounds = tuple(tuple(matchups) for matchups in rounds)
    finals = new_rounds[-1][0]

    mvp = bracket.mvp
    if _finals_key(finals) != _finals_key(bracket.finals):
        if mvp is not None:
            logger.debug("finals participants changed; MVP pick %r reset", mvp)
        mvp = None

    return replace(
        bracket,
        rounds=new_rounds,
        play_in=play_in if play_in is not None else bracket.play_in,
        champion=finals.winner if finals.is_resolved else None,
        champion_seed=finals.winner_seed if finals.is_resolved else None,
        mvp=mvp,
    )


def _require_round(round_id: Union[RoundId, str]) -> RoundId:
    rid = parse_round_id(round_id)
    if rid is None:
        raise RoundNotFound(
            f"unknown round {round_id!r}",
            {"round_id": str(round_id), "valid": [r.value for r in ROUND_ORDER]},
        )
    return rid


def _coerce_seed(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidSelection(f"winner_seed must be an integer, got {value!r}", {"winner_seed": value})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidSelection(f"winner_seed must be an integer, got {value!r}", {"winner_seed": value}) from None


def pick_participant(contest: Any, winner: Any, winner_seed: Any) -> Tuple[str, Optional[int]]:
    """Validate a winner against a contest's participants; returns (stored team, seed)."""
    if contest.team_a is None or contest.team_b is None:
        raise InvalidSelection(
            "both participants must be known before a winner can be picked",
            {"team_a": contest.team_a, "team_b": contest.team_b},
        )
    side = contest.side_of(winner)
    if side is None:
        raise InvalidSelection(
            f"{clean_ref(winner)!r} is not a participant of this matchup",
            {"winner": clean_ref(winner), "team_a": contest.team_a, "team_b": contest.team_b},
        )
    team, seed = contest.slot(side)
    given = _coerce_seed(winner_seed)
    if given is not None and seed is not None and given != seed:
        raise InvalidSelection(
            f"winner_seed {given} does not match {team!r} (seed {seed})",
            {"winner": team, "winner_seed": given, "expected_seed": seed},
        )
    return team, seed if seed is not None else given


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def select_winner(
    bracket: Bracket,
    round_id: Union[RoundId, str],
    matchup_index: int,
    winner: str,
    winner_seed: Optional[int] = None,
    series_length: Optional[int] = None,
) -> Bracket:
    """Resolve one series (winner + length atomically) and cascade.

    Raises RoundNotFound, MatchupIndexOutOfRange, InvalidSelection,
    InvalidSeriesLength.
    """
    rid = _require_round(round_id)
    target = bracket.matchup(rid, matchup_index)
    team, seed = pick_participant(target, winner, winner_seed)
    if series_length is None:
        raise InvalidSeriesLength("series_length is required", {"series_length": None})
    _check_series_length(series_length)

    rounds = thaw_rounds(bracket)
    rounds[rid.position][matchup_index] = target.resolved(team, seed, series_length)
    propagate_result(rounds, rid, matchup_index)
    return rebuild_bracket(bracket, rounds)


def clear_matchup(bracket: Bracket, round_id: Union[RoundId, str], matchup_index: int) -> Bracket:
    """Undo a pick: keep participants, drop the result, cascade."""
    rid = _require_round(round_id)
    target = bracket.matchup(rid, matchup_index)
    if not target.is_resolved:
        return bracket

    rounds = thaw_rounds(bracket)
    rounds[rid.position][matchup_index] = target.cleared()
    propagate_result(rounds, rid, matchup_index)
    return rebuild_bracket(bracket, rounds)


def set_mvp(bracket: Bracket, mvp: Optional[str]) -> Bracket:
    """Record (or clear, with None/blank) the Finals MVP pick."""
    return replace(bracket, mvp=clean_ref(mvp))


def is_complete(bracket: Bracket) -> bool:
    """Every series resolved and, when present, every Play-In game decided."""
    if any(not m.is_resolved for _, _, m in bracket.iter_matchups()):
        return False
    if bracket.play_in is not None:
        return all(sub.is_complete for sub in bracket.play_in)
    return True
