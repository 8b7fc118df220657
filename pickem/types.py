from __future__ import annotations

"""Closed identifiers and fixed shape constants for playoff brackets.

Round identifiers
-----------------
Rounds are a closed enum with a strict order:
    first_round -> conf_semis -> conf_finals -> finals -> (champion)

Matchups inside a round are laid out East first, West second:
    first_round: E(1v8, 4v5, 3v6, 2v7), W(1v8, 4v5, 3v6, 2v7)
    conf_semis:  E(SF1, SF2), W(SF1, SF2)
    conf_finals: E(CF), W(CF)
    finals:      FIN
"""

import re
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class RoundId(str, Enum):
    FIRST_ROUND = "first_round"
    CONF_SEMIS = "conf_semis"
    CONF_FINALS = "conf_finals"
    FINALS = "finals"

    @property
    def position(self) -> int:
        return ROUND_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return ROUND_DISPLAY_NAMES[self]


class Conference(str, Enum):
    EAST = "east"
    WEST = "west"


class PlayInGame(str, Enum):
    SEVENTH_EIGHTH = "seventh_eighth"
    NINTH_TENTH = "ninth_tenth"
    FINAL = "final"


class MatchupStatus(str, Enum):
    UNSET = "unset"
    PENDING = "pending"
    RESOLVED = "resolved"


ROUND_ORDER: Tuple[RoundId, ...] = (
    RoundId.FIRST_ROUND,
    RoundId.CONF_SEMIS,
    RoundId.CONF_FINALS,
    RoundId.FINALS,
)

ROUND_SIZES: Dict[RoundId, int] = {
    RoundId.FIRST_ROUND: 8,
    RoundId.CONF_SEMIS: 4,
    RoundId.CONF_FINALS: 2,
    RoundId.FINALS: 1,
}

ROUND_DISPLAY_NAMES: Dict[RoundId, str] = {
    RoundId.FIRST_ROUND: "First Round",
    RoundId.CONF_SEMIS: "Conference Semifinals",
    RoundId.CONF_FINALS: "Conference Finals",
    RoundId.FINALS: "NBA Finals",
}

CONFERENCE_ORDER: Tuple[Conference, ...] = (Conference.EAST, Conference.WEST)
PLAY_IN_GAMES: Tuple[PlayInGame, ...] = (
    PlayInGame.SEVENTH_EIGHTH,
    PlayInGame.NINTH_TENTH,
    PlayInGame.FINAL,
)

# Seed pairs of one conference's first round, in matchup order.
FIRST_ROUND_SEED_PAIRS: Tuple[Tuple[int, int], ...] = ((1, 8), (4, 5), (3, 6), (2, 7))

SERIES_LENGTHS: Tuple[int, ...] = (4, 5, 6, 7)
MIN_SERIES_LENGTH = SERIES_LENGTHS[0]
MAX_SERIES_LENGTH = SERIES_LENGTHS[-1]

# Stage key used for the Play-In in score breakdowns and lock lists.
PLAY_IN_STAGE = "play_in"
FINALS_MVP_STAGE = "finals_mvp"


def parse_round_id(value: Union[RoundId, str]) -> Optional[RoundId]:
    """Return the RoundId for an enum member or its string value (None if unknown)."""
    if isinstance(value, RoundId):
        return value
    s = str(value or "").strip().lower()
    for rid in ROUND_ORDER:
        if rid.value == s:
            return rid
    return None


def parse_conference(value: Union[Conference, str]) -> Optional[Conference]:
    if isinstance(value, Conference):
        return value
    c = str(value or "").strip().lower()
    if c.startswith("e"):
        return Conference.EAST
    if c.startswith("w"):
        return Conference.WEST
    return None


def parse_play_in_game(value: Union[PlayInGame, str]) -> Optional[PlayInGame]:
    if isinstance(value, PlayInGame):
        return value
    s = str(value or "").strip().lower()
    for game in PLAY_IN_GAMES:
        if game.value == s:
            return game
    return None


def conference_of(round_id: RoundId, index: int) -> Optional[Conference]:
    """Conference owning `round_id[index]`; the Finals belongs to neither."""
    size = ROUND_SIZES[round_id]
    if size < 2:
        return None
    return Conference.EAST if index < size // 2 else Conference.WEST


def first_round_index(conference: Conference, seed: int) -> Tuple[int, str]:
    """Return (matchup_index, side) of a seed's first-round slot."""
    offset = 0 if conference == Conference.EAST else ROUND_SIZES[RoundId.FIRST_ROUND] // 2
    for i, (high, low) in enumerate(FIRST_ROUND_SEED_PAIRS):
        if seed == high:
            return offset + i, "team_a"
        if seed == low:
            return offset + i, "team_b"
    raise ValueError(f"seed {seed} has no first-round slot")


# ---------------------------------------------------------------------------
# Identifier normalization
# ---------------------------------------------------------------------------

_SEED_PREFIX = re.compile(r"^\(\d+\)\s*")


def clean_ref(value: Any) -> Optional[str]:
    """Trim a stored identifier; blank values become None."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def normalize_ref(value: Any) -> str:
    """Comparison key for participant/player identifiers.

    Trims whitespace, drops a leading display seed like "(4) ", and casefolds.
    """
    s = clean_ref(value)
    if s is None:
        return ""
    return _SEED_PREFIX.sub("", s).strip().casefold()


def same_ref(a: Any, b: Any) -> bool:
    """True when both identifiers are set and normalize to the same key."""
    ka = normalize_ref(a)
    return bool(ka) and ka == normalize_ref(b)
