from __future__ import annotations

"""Bracket templates built from a seeded field.

Two input shapes are accepted:

- seeds by conference: {"east": {1: "BOS", 2: "NYK", ...}, "west": {...}}
- a postseason field (standings contract):
      {"east": {"auto_bids": [...], "play_in": [...], "eliminated": [...]},
       "west": {...}}
  with seed entries {"team_id": ..., "seed": ...}. `eliminated` is ignored.

With the Play-In, seeds 1-6 enter the first round directly and seeds 7-10
fill the Play-In games; the 7/8 first-round slots start empty. Without it,
seeds 1-8 are placed directly.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import InvalidBracket
from .models import Bracket, PlayInMatchup, PlayInSubBracket, empty_rounds
from .types import (
    CONFERENCE_ORDER,
    FIRST_ROUND_SEED_PAIRS,
    Conference,
    RoundId,
    clean_ref,
    first_round_index,
    parse_conference,
)

logger = logging.getLogger(__name__)

DIRECT_SEEDS_WITH_PLAY_IN = range(1, 7)
PLAY_IN_SEEDS = range(7, 11)
DIRECT_SEEDS_WITHOUT_PLAY_IN = range(1, 9)

SeedTable = Dict[int, str]


def _seed_table(conference: Conference, raw: Any, problems: List[str]) -> SeedTable:
    if not isinstance(raw, Mapping):
        problems.append(f"{conference.value}: expected an object of seed -> team")
        return {}
    table: SeedTable = {}
    for key, team in raw.items():
        try:
            seed = int(key)
        except (TypeError, ValueError):
            problems.append(f"{conference.value}: seed {key!r} is not an integer")
            continue
        ref = clean_ref(team)
        if ref is None:
            problems.append(f"{conference.value}: seed {seed} has no team")
            continue
        table[seed] = ref
    return table


def _conference_seeds(seeds: Mapping[Any, Any], problems: List[str]) -> Dict[Conference, SeedTable]:
    out: Dict[Conference, SeedTable] = {}
    for key, raw in seeds.items():
        conf = parse_conference(key)
        if conf is None:
            problems.append(f"unknown conference {key!r}")
            continue
        out[conf] = _seed_table(conf, raw, problems)
    for conf in CONFERENCE_ORDER:
        out.setdefault(conf, {})
    return out


def _require_seeds(conference: Conference, table: SeedTable, wanted: range, problems: List[str]) -> None:
    missing = [s for s in wanted if s not in table]
    if missing:
        problems.append(f"{conference.value}: missing seeds {missing}")


def _play_in_sub(conference: Conference, table: SeedTable) -> PlayInSubBracket:
    return PlayInSubBracket(
        conference=conference,
        seventh_eighth=PlayInMatchup(team_a=table.get(7), team_a_seed=7, team_b=table.get(8), team_b_seed=8),
        ninth_tenth=PlayInMatchup(team_a=table.get(9), team_a_seed=9, team_b=table.get(10), team_b_seed=10),
    )


def new_bracket(seeds: Mapping[Any, Any], *, play_in: bool = True) -> Bracket:
    """Empty bracket with the entry round (and Play-In games) populated.

    Raises InvalidBracket when a required seed is missing.
    """
    if not isinstance(seeds, Mapping):
        raise InvalidBracket("seeds must be an object keyed by conference", [f"seeds={seeds!r}"])

    problems: List[str] = []
    tables = _conference_seeds(seeds, problems)
    direct = DIRECT_SEEDS_WITH_PLAY_IN if play_in else DIRECT_SEEDS_WITHOUT_PLAY_IN
    for conf in CONFERENCE_ORDER:
        _require_seeds(conf, tables[conf], direct, problems)
        if play_in:
            _require_seeds(conf, tables[conf], PLAY_IN_SEEDS, problems)
    if problems:
        raise InvalidBracket("cannot build bracket from seeds", problems)

    rounds = [list(r) for r in empty_rounds()]
    first = rounds[RoundId.FIRST_ROUND.position]
    for conf in CONFERENCE_ORDER:
        table = tables[conf]
        for high, low in FIRST_ROUND_SEED_PAIRS:
            for seed in (high, low):
                if seed not in direct:
                    continue
                index, side = first_round_index(conf, seed)
                first[index] = replace(first[index], **{side: table[seed], f"{side}_seed": seed})

    bracket = Bracket(
        rounds=tuple(tuple(r) for r in rounds),
        play_in=tuple(_play_in_sub(conf, tables[conf]) for conf in CONFERENCE_ORDER) if play_in else None,
    )
    logger.debug("new bracket (play_in=%s)", play_in)
    return bracket


def _field_entries(conf_field: Mapping[str, Any], key: str) -> List[Tuple[Optional[int], Any]]:
    entries = conf_field.get(key) or []
    return [(e.get("seed"), e.get("team_id")) for e in entries if isinstance(e, Mapping)]


def bracket_from_field(field: Mapping[str, Any], *, play_in: Optional[bool] = None) -> Bracket:
    """Build a bracket template from a postseason field.

    `play_in` defaults to True when any conference carries Play-In entries.
    """
    if not isinstance(field, Mapping):
        raise InvalidBracket("field must be an object keyed by conference", [f"field={field!r}"])

    seeds: Dict[str, Dict[Any, Any]] = {}
    has_play_in = False
    for key, conf_field in field.items():
        if not isinstance(conf_field, Mapping):
            raise InvalidBracket("field is malformed", [f"{key}: expected an object"])
        table: Dict[Any, Any] = {}
        for seed, team in _field_entries(conf_field, "auto_bids"):
            table[seed] = team
        pi_entries = _field_entries(conf_field, "play_in")
        has_play_in = has_play_in or bool(pi_entries)
        for seed, team in pi_entries:
            table[seed] = team
        seeds[key] = table

    use_play_in = has_play_in if play_in is None else play_in
    return new_bracket(seeds, play_in=use_play_in)
