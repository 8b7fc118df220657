from __future__ import annotations

"""Immutable bracket data model.

Runtime values are frozen dataclasses; `to_dict()` / `from_dict()` convert to
and from the plain JSON-friendly record form that callers persist:

    {
      "rounds": {"first_round": [matchup, ...], "conf_semis": [...], ...},
      "play_in": {"east": {"seventh_eighth": {...}, "ninth_tenth": {...}, "final": {...}},
                  "west": {...}} | None,
      "champion": str | None,
      "champion_seed": int | None,
      "mvp": str | None,
    }

Invariants are enforced at construction, so every Bracket value in memory is
structurally valid.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import (
    IncompleteFinal,
    InvalidBracket,
    InvalidSelection,
    InvalidSeriesLength,
    MatchupIndexOutOfRange,
    PlayInNotEnabled,
    RoundNotFound,
)
from .types import (
    CONFERENCE_ORDER,
    MAX_SERIES_LENGTH,
    MIN_SERIES_LENGTH,
    PLAY_IN_GAMES,
    ROUND_ORDER,
    ROUND_SIZES,
    Conference,
    MatchupStatus,
    PlayInGame,
    RoundId,
    clean_ref,
    conference_of,
    parse_conference,
    parse_round_id,
    same_ref,
)


SIDES: Tuple[str, str] = ("team_a", "team_b")


def _opt_int(value: Any, *, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidBracket(f"{field_name} must be an integer", [f"{field_name}={value!r}"])
    if isinstance(value, float) and not value.is_integer():
        raise InvalidBracket(f"{field_name} must be a whole number, got {value!r}", [f"{field_name}={value!r}"])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidBracket(f"{field_name} must be an integer", [f"{field_name}={value!r}"]) from None


def _check_series_length(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSeriesLength(f"series_length must be an integer, got {value!r}", {"series_length": value})
    if not MIN_SERIES_LENGTH <= value <= MAX_SERIES_LENGTH:
        raise InvalidSeriesLength(
            f"series_length must be in [{MIN_SERIES_LENGTH}, {MAX_SERIES_LENGTH}], got {value}",
            {"series_length": value},
        )
    return value


def _clean_contest_fields(obj: Any) -> None:
    """Shared normalization for two-sided contests (frozen: uses object.__setattr__)."""
    for name in ("team_a", "team_b", "winner"):
        object.__setattr__(obj, name, clean_ref(getattr(obj, name)))
    for name in ("team_a_seed", "team_b_seed", "winner_seed"):
        object.__setattr__(obj, name, _opt_int(getattr(obj, name), field_name=name))

    if obj.winner is not None:
        side = _side_of(obj, obj.winner)
        if side is None:
            raise InvalidSelection(
                f"winner {obj.winner!r} is not a participant of this matchup",
                {"winner": obj.winner, "team_a": obj.team_a, "team_b": obj.team_b},
            )
        # stored as the slot spells it
        object.__setattr__(obj, "winner", getattr(obj, side))
    elif obj.winner_seed is not None:
        object.__setattr__(obj, "winner_seed", None)


def _side_of(obj: Any, team: Any) -> Optional[str]:
    for side in SIDES:
        if same_ref(team, getattr(obj, side)):
            return side
    return None


def _slot_dict(obj: Any) -> Dict[str, Any]:
    return {
        "team_a": obj.team_a,
        "team_a_seed": obj.team_a_seed,
        "team_b": obj.team_b,
        "team_b_seed": obj.team_b_seed,
        "winner": obj.winner,
        "winner_seed": obj.winner_seed,
    }


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidBracket(f"{where} must be an object", [f"{where}: expected object, got {type(value).__name__}"])
    return value


# ---------------------------------------------------------------------------
# Matchup (series) / PlayInMatchup (single game)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Matchup:
    """One best-of-seven series between two seeded participants."""

    team_a: Optional[str] = None
    team_a_seed: Optional[int] = None
    team_b: Optional[str] = None
    team_b_seed: Optional[int] = None
    winner: Optional[str] = None
    winner_seed: Optional[int] = None
    series_length: Optional[int] = None
    conference: Optional[Conference] = None

    def __post_init__(self) -> None:
        _clean_contest_fields(self)
        _check_series_length(self.series_length)
        if self.winner is not None and self.series_length is None:
            raise InvalidSeriesLength("winner and series_length must be set together", {"winner": self.winner})
        if self.winner is None and self.series_length is not None:
            raise InvalidSelection(
                "series_length requires a winner", {"series_length": self.series_length}
            )
        if self.conference is not None and not isinstance(self.conference, Conference):
            object.__setattr__(self, "conference", parse_conference(self.conference))

    # --- queries -----------------------------------------------------------

    @property
    def status(self) -> MatchupStatus:
        if self.winner is not None:
            return MatchupStatus.RESOLVED
        if self.team_a is None and self.team_b is None:
            return MatchupStatus.UNSET
        return MatchupStatus.PENDING

    @property
    def is_resolved(self) -> bool:
        return self.winner is not None

    @property
    def participants(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.team_a, self.team_b)

    def side_of(self, team: Any) -> Optional[str]:
        return _side_of(self, team)

    def slot(self, side: str) -> Tuple[Optional[str], Optional[int]]:
        return getattr(self, side), getattr(self, f"{side}_seed")

    def seed_of(self, team: Any) -> Optional[int]:
        side = self.side_of(team)
        return self.slot(side)[1] if side else None

    @property
    def loser(self) -> Optional[str]:
        if self.winner is None:
            return None
        return self.team_b if self.side_of(self.winner) == "team_a" else self.team_a

    @property
    def loser_seed(self) -> Optional[int]:
        if self.winner is None:
            return None
        return self.team_b_seed if self.side_of(self.winner) == "team_a" else self.team_a_seed

    # --- value updates -----------------------------------------------------

    def cleared(self) -> "Matchup":
        """Same participants, no result."""
        return replace(self, winner=None, winner_seed=None, series_length=None)

    def with_slot(self, side: str, team: Optional[str], seed: Optional[int]) -> "Matchup":
        """Replace one participant; any previous result is dropped."""
        return replace(self.cleared(), **{side: team, f"{side}_seed": seed})

    def resolved(self, winner: str, winner_seed: Optional[int], series_length: int) -> "Matchup":
        side = self.side_of(winner)
        team = self.slot(side)[0] if side else winner
        return replace(self, winner=team, winner_seed=winner_seed, series_length=series_length)

    # --- record form -------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        out = _slot_dict(self)
        out["series_length"] = self.series_length
        out["conference"] = self.conference.value if self.conference else None
        return out

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, conference: Optional[Conference] = None) -> "Matchup":
        conf = parse_conference(d.get("conference")) if d.get("conference") else conference
        return cls(
            team_a=d.get("team_a"),
            team_a_seed=d.get("team_a_seed"),
            team_b=d.get("team_b"),
            team_b_seed=d.get("team_b_seed"),
            winner=d.get("winner"),
            winner_seed=d.get("winner_seed"),
            series_length=_opt_int(d.get("series_length"), field_name="series_length"),
            conference=conf,
        )


Round = Tuple[Matchup, ...]


@dataclass(frozen=True, slots=True)
class PlayInMatchup:
    """One single-game Play-In contest (no series length)."""

    team_a: Optional[str] = None
    team_a_seed: Optional[int] = None
    team_b: Optional[str] = None
    team_b_seed: Optional[int] = None
    winner: Optional[str] = None
    winner_seed: Optional[int] = None

    def __post_init__(self) -> None:
        _clean_contest_fields(self)

    @property
    def is_resolved(self) -> bool:
        return self.winner is not None

    @property
    def participants(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.team_a, self.team_b)

    def side_of(self, team: Any) -> Optional[str]:
        return _side_of(self, team)

    def slot(self, side: str) -> Tuple[Optional[str], Optional[int]]:
        return getattr(self, side), getattr(self, f"{side}_seed")

    def seed_of(self, team: Any) -> Optional[int]:
        side = self.side_of(team)
        return self.slot(side)[1] if side else None

    @property
    def loser(self) -> Optional[str]:
        if self.winner is None:
            return None
        return self.team_b if self.side_of(self.winner) == "team_a" else self.team_a

    @property
    def loser_seed(self) -> Optional[int]:
        if self.winner is None:
            return None
        return self.team_b_seed if self.side_of(self.winner) == "team_a" else self.team_a_seed

    def cleared(self) -> "PlayInMatchup":
        return replace(self, winner=None, winner_seed=None)

    def with_slot(self, side: str, team: Optional[str], seed: Optional[int]) -> "PlayInMatchup":
        return replace(self.cleared(), **{side: team, f"{side}_seed": seed})

    def resolved(self, winner: str, winner_seed: Optional[int]) -> "PlayInMatchup":
        side = self.side_of(winner)
        team = self.slot(side)[0] if side else winner
        return replace(self, winner=team, winner_seed=winner_seed)

    def to_dict(self) -> Dict[str, Any]:
        return _slot_dict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PlayInMatchup":
        return cls(
            team_a=d.get("team_a"),
            team_a_seed=d.get("team_a_seed"),
            team_b=d.get("team_b"),
            team_b_seed=d.get("team_b_seed"),
            winner=d.get("winner"),
            winner_seed=d.get("winner_seed"),
        )


@dataclass(frozen=True, slots=True)
class PlayInSubBracket:
    """Play-In games of one conference.

    seventh_eighth: 7 v 8, winner is the 7 seed, loser drops to `final`
    ninth_tenth:    9 v 10, winner goes to `final`, loser eliminated
    final:          loser(7v8) v winner(9v10), winner is the 8 seed
    """

    conference: Conference
    seventh_eighth: PlayInMatchup = PlayInMatchup()
    ninth_tenth: PlayInMatchup = PlayInMatchup()
    final: PlayInMatchup = PlayInMatchup()

    def __post_init__(self) -> None:
        if not isinstance(self.conference, Conference):
            conf = parse_conference(self.conference)
            if conf is None:
                raise InvalidBracket(f"unknown conference {self.conference!r}", [f"play_in conference={self.conference!r}"])
            object.__setattr__(self, "conference", conf)

    def game(self, game: PlayInGame) -> PlayInMatchup:
        return getattr(self, game.value)

    def with_game(self, game: PlayInGame, matchup: PlayInMatchup) -> "PlayInSubBracket":
        return replace(self, **{game.value: matchup})

    @property
    def seventh_seed(self) -> Optional[str]:
        return self.seventh_eighth.winner

    @property
    def eighth_seed(self) -> Optional[str]:
        return self.final.winner

    @property
    def eliminated(self) -> List[str]:
        out: List[str] = []
        for m in (self.ninth_tenth, self.final):
            if m.loser:
                out.append(m.loser)
        return out

    @property
    def is_complete(self) -> bool:
        return all(self.game(g).is_resolved for g in PLAY_IN_GAMES)

    def to_dict(self) -> Dict[str, Any]:
        return {g.value: self.game(g).to_dict() for g in PLAY_IN_GAMES}

    @classmethod
    def from_dict(cls, conference: Conference, d: Mapping[str, Any]) -> "PlayInSubBracket":
        games = {}
        for g in PLAY_IN_GAMES:
            raw = d.get(g.value)
            games[g.value] = PlayInMatchup.from_dict(_require_mapping(raw, f"play_in.{conference.value}.{g.value}")) if raw is not None else PlayInMatchup()
        return cls(conference=conference, **games)


# ---------------------------------------------------------------------------
# Bracket
# ---------------------------------------------------------------------------


def empty_rounds() -> Tuple[Round, ...]:
    return tuple(
        tuple(Matchup(conference=conference_of(rid, i)) for i in range(ROUND_SIZES[rid]))
        for rid in ROUND_ORDER
    )


@dataclass(frozen=True, slots=True)
class Bracket:
    rounds: Tuple[Round, ...] = empty_rounds()
    play_in: Optional[Tuple[PlayInSubBracket, ...]] = None
    champion: Optional[str] = None
    champion_seed: Optional[int] = None
    mvp: Optional[str] = None

    def __post_init__(self) -> None:
        problems: List[str] = []
        rounds = tuple(tuple(r) for r in (self.rounds or ()))
        if len(rounds) != len(ROUND_ORDER):
            problems.append(f"expected {len(ROUND_ORDER)} rounds, got {len(rounds)}")
        else:
            for rid, matchups in zip(ROUND_ORDER, rounds):
                if len(matchups) != ROUND_SIZES[rid]:
                    problems.append(f"{rid.value}: expected {ROUND_SIZES[rid]} matchups, got {len(matchups)}")
        object.__setattr__(self, "rounds", rounds)

        if self.play_in is not None:
            play_in = tuple(self.play_in)
            confs = tuple(p.conference for p in play_in)
            if confs != CONFERENCE_ORDER:
                problems.append(f"play_in must hold {[c.value for c in CONFERENCE_ORDER]} in order")
            object.__setattr__(self, "play_in", play_in)

        object.__setattr__(self, "champion", clean_ref(self.champion))
        object.__setattr__(self, "champion_seed", _opt_int(self.champion_seed, field_name="champion_seed"))
        object.__setattr__(self, "mvp", clean_ref(self.mvp))

        if not problems:
            finals = rounds[-1][0]
            if finals.is_resolved:
                if not same_ref(self.champion, finals.winner):
                    problems.append("champion must equal the Finals winner")
            elif self.champion is not None:
                problems.append("champion set while the Finals is unresolved")

        if problems:
            raise InvalidBracket("bracket is malformed", problems)

    # --- lookups -----------------------------------------------------------

    def round(self, round_id: Union[RoundId, str]) -> Round:
        rid = parse_round_id(round_id)
        if rid is None:
            raise RoundNotFound(f"unknown round {round_id!r}", {"round_id": str(round_id)})
        return self.rounds[rid.position]

    def matchup(self, round_id: Union[RoundId, str], index: int) -> Matchup:
        matchups = self.round(round_id)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(matchups):
            raise MatchupIndexOutOfRange(
                f"matchup index {index!r} out of range for {parse_round_id(round_id).value}",
                {"round_id": parse_round_id(round_id).value, "index": index, "size": len(matchups)},
            )
        return matchups[index]

    @property
    def finals(self) -> Matchup:
        return self.rounds[-1][0]

    @property
    def has_play_in(self) -> bool:
        return self.play_in is not None

    def play_in_for(self, conference: Union[Conference, str]) -> PlayInSubBracket:
        if self.play_in is None:
            raise PlayInNotEnabled("bracket has no Play-In stage")
        conf = parse_conference(conference)
        for sub in self.play_in:
            if sub.conference == conf:
                return sub
        raise InvalidSelection(f"unknown conference {conference!r}", {"conference": str(conference)})

    def champion_or_raise(self) -> str:
        if not self.finals.is_resolved or self.champion is None:
            raise IncompleteFinal("the Finals is not resolved yet")
        return self.champion

    def iter_matchups(self):
        for rid, matchups in zip(ROUND_ORDER, self.rounds):
            for i, m in enumerate(matchups):
                yield rid, i, m

    # --- record form -------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds": {rid.value: [m.to_dict() for m in matchups] for rid, matchups in zip(ROUND_ORDER, self.rounds)},
            "play_in": (
                {sub.conference.value: sub.to_dict() for sub in self.play_in} if self.play_in is not None else None
            ),
            "champion": self.champion,
            "champion_seed": self.champion_seed,
            "mvp": self.mvp,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Bracket":
        """Parse a bracket record.

        Missing rounds (or short rounds) are padded with unset matchups; extra
        matchups, unknown round keys and non-object entries are rejected.
        """
        d = _require_mapping(d, "bracket")
        problems: List[str] = []
        raw_rounds = d.get("rounds") or {}
        if not isinstance(raw_rounds, Mapping):
            raise InvalidBracket("bracket is malformed", ["rounds: expected object keyed by round id"])

        for key in raw_rounds:
            if parse_round_id(key) is None:
                problems.append(f"rounds: unknown round {key!r}")

        rounds: List[Round] = []
        for rid in ROUND_ORDER:
            raw = raw_rounds.get(rid.value) or []
            if not isinstance(raw, (list, tuple)):
                problems.append(f"{rid.value}: expected a list of matchups")
                raw = []
            size = ROUND_SIZES[rid]
            if len(raw) > size:
                problems.append(f"{rid.value}: expected {size} matchups, got {len(raw)}")
            matchups: List[Matchup] = []
            for i in range(size):
                conf = conference_of(rid, i)
                row = raw[i] if i < len(raw) else None
                if row is None:
                    matchups.append(Matchup(conference=conf))
                    continue
                if not isinstance(row, Mapping):
                    problems.append(f"{rid.value}[{i}]: expected object")
                    matchups.append(Matchup(conference=conf))
                    continue
                labeled = row.get("conference")
                if labeled and parse_conference(labeled) != conf:
                    expected = conf.value if conf else "none"
                    problems.append(f"{rid.value}[{i}]: conference {labeled!r} does not match its slot ({expected})")
                    matchups.append(Matchup(conference=conf))
                    continue
                try:
                    matchups.append(Matchup.from_dict(row, conference=conf))
                except (InvalidBracket, InvalidSelection, InvalidSeriesLength) as exc:
                    problems.append(f"{rid.value}[{i}]: {exc.message}")
                    matchups.append(Matchup(conference=conf))
            rounds.append(tuple(matchups))

        play_in: Optional[Tuple[PlayInSubBracket, ...]] = None
        raw_play_in = d.get("play_in")
        if raw_play_in is not None:
            if not isinstance(raw_play_in, Mapping):
                problems.append("play_in: expected object keyed by conference")
            else:
                subs = []
                for conf in CONFERENCE_ORDER:
                    try:
                        raw_sub = _require_mapping(raw_play_in.get(conf.value) or {}, f"play_in.{conf.value}")
                        subs.append(PlayInSubBracket.from_dict(conf, raw_sub))
                    except (InvalidBracket, InvalidSelection) as exc:
                        problems.append(f"play_in.{conf.value}: {exc.message}")
                play_in = tuple(subs)

        if problems:
            raise InvalidBracket("bracket is malformed", problems)

        finals = rounds[-1][0]
        champion = d.get("champion")
        champion_seed = d.get("champion_seed")
        if clean_ref(champion) is None and finals.is_resolved:
            # Records written before the champion field existed.
            champion, champion_seed = finals.winner, finals.winner_seed

        return cls(
            rounds=tuple(rounds),
            play_in=play_in,
            champion=champion,
            champion_seed=champion_seed,
            mvp=d.get("mvp"),
        )


def coerce_bracket(value: Union[Bracket, Mapping[str, Any]]) -> Bracket:
    if isinstance(value, Bracket):
        return value
    return Bracket.from_dict(value)


__all__ = [
    "SIDES",
    "Matchup",
    "PlayInMatchup",
    "PlayInSubBracket",
    "Round",
    "Bracket",
    "empty_rounds",
    "coerce_bracket",
]
