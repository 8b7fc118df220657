from __future__ import annotations

"""Play-In picks and their feed into the first round.

Per conference:
- seventh_eighth: winner -> 7 seed (first-round 2v7 slot), loser -> final.team_a
- ninth_tenth:    winner -> final.team_b, loser eliminated
- final:          winner -> 8 seed (first-round 1v8 slot), loser eliminated

Every write re-derives the final's participants and both first-round slots
of the conference; a slot whose occupant changes triggers the same forward
invalidation as a series pick.
"""

import logging
from typing import Optional, Tuple, Union

from .errors import InvalidSelection
from .models import Bracket, PlayInSubBracket
from .progression import pick_participant, place_participant, rebuild_bracket, thaw_rounds
from .slotmap import SlotRef
from .types import (
    PLAY_IN_GAMES,
    Conference,
    PlayInGame,
    RoundId,
    first_round_index,
    normalize_ref,
    parse_play_in_game,
)

logger = logging.getLogger(__name__)

SEVENTH_SEED = 7
EIGHTH_SEED = 8


def seed_slot(conference: Conference, seed: int) -> SlotRef:
    index, side = first_round_index(conference, seed)
    return SlotRef(RoundId.FIRST_ROUND, index, side)


def _require_game(game: Union[PlayInGame, str]) -> PlayInGame:
    g = parse_play_in_game(game)
    if g is None:
        raise InvalidSelection(
            f"unknown Play-In game {game!r}",
            {"game": str(game), "valid": [x.value for x in PLAY_IN_GAMES]},
        )
    return g


def derive_final(sub: PlayInSubBracket) -> PlayInSubBracket:
    """Re-derive the final's participants from the first two games."""
    final = sub.final
    wanted = {
        "team_a": (sub.seventh_eighth.loser, sub.seventh_eighth.loser_seed),
        "team_b": (sub.ninth_tenth.winner, sub.ninth_tenth.winner_seed),
    }
    for side, (team, seed) in wanted.items():
        cur_team, cur_seed = final.slot(side)
        if normalize_ref(cur_team) != normalize_ref(team) or cur_seed != seed:
            if final.is_resolved:
                logger.debug("play-in %s final: %s changed, result cleared", sub.conference.value, side)
            final = final.with_slot(side, team, seed)
    return sub.with_game(PlayInGame.FINAL, final)


def _apply(bracket: Bracket, sub: PlayInSubBracket) -> Bracket:
    sub = derive_final(sub)

    rounds = thaw_rounds(bracket)
    seventh = sub.seventh_eighth.winner
    eighth = sub.final.winner
    place_participant(rounds, seed_slot(sub.conference, SEVENTH_SEED), seventh, SEVENTH_SEED if seventh else None)
    place_participant(rounds, seed_slot(sub.conference, EIGHTH_SEED), eighth, EIGHTH_SEED if eighth else None)

    play_in: Tuple[PlayInSubBracket, ...] = tuple(
        sub if existing.conference == sub.conference else existing for existing in (bracket.play_in or ())
    )
    return rebuild_bracket(bracket, rounds, play_in=play_in)


def resolve_play_in(
    bracket: Bracket,
    conference: Union[Conference, str],
    game: Union[PlayInGame, str],
    winner: str,
    winner_seed: Optional[int] = None,
) -> Bracket:
    """Pick the winner of one Play-In game and feed the first round.

    Raises PlayInNotEnabled, InvalidSelection.
    """
    sub = bracket.play_in_for(conference)
    g = _require_game(game)
    contest = sub.game(g)
    team, seed = pick_participant(contest, winner, winner_seed)
    return _apply(bracket, sub.with_game(g, contest.resolved(team, seed)))


def clear_play_in(bracket: Bracket, conference: Union[Conference, str], game: Union[PlayInGame, str]) -> Bracket:
    """Undo a Play-In pick and re-derive everything it fed."""
    sub = bracket.play_in_for(conference)
    g = _require_game(game)
    contest = sub.game(g)
    if not contest.is_resolved:
        return bracket
    return _apply(bracket, sub.with_game(g, contest.cleared()))
