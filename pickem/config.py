from __future__ import annotations

"""Scoring configuration.

All numbers here are league-tunable without touching scoring logic. The
defaults are the house rules:

    round          base   exact series length
    first_round    1      0.5
    conf_semis     2      1
    conf_finals    3      1.5
    finals         4      2

    upset bonus 2 (flat), Finals MVP 2.5, Play-In game 1, champion bonus 0
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidBracket
from .types import ROUND_ORDER, RoundId, parse_round_id


DEFAULT_BASE_POINTS: Mapping[RoundId, float] = {
    RoundId.FIRST_ROUND: 1.0,
    RoundId.CONF_SEMIS: 2.0,
    RoundId.CONF_FINALS: 3.0,
    RoundId.FINALS: 4.0,
}

DEFAULT_SERIES_BONUS: Mapping[RoundId, float] = {
    RoundId.FIRST_ROUND: 0.5,
    RoundId.CONF_SEMIS: 1.0,
    RoundId.CONF_FINALS: 1.5,
    RoundId.FINALS: 2.0,
}


def _round_table(raw: Any, default: Mapping[RoundId, float], *, name: str) -> Dict[RoundId, float]:
    out = dict(default)
    if raw is None:
        return out
    if not isinstance(raw, Mapping):
        raise InvalidBracket(f"{name} must be an object keyed by round id", [f"{name}={raw!r}"])
    problems = []
    for key, value in raw.items():
        rid = parse_round_id(key)
        if rid is None:
            problems.append(f"{name}: unknown round {key!r}")
            continue
        try:
            out[rid] = float(value)
        except (TypeError, ValueError):
            problems.append(f"{name}.{rid.value}: not a number ({value!r})")
    if problems:
        raise InvalidBracket(f"invalid {name}", problems)
    return out


_FLAG_STRINGS: Mapping[str, bool] = {"true": True, "false": False}


def _flag(value: Any) -> Optional[bool]:
    """A real bool, or "true"/"false" in any case; None for anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _FLAG_STRINGS.get(value.strip().lower())
    return None


@dataclass(frozen=True, slots=True)
class ScoringPolicy:
    """How a predicted bracket earns points against the official one."""

    base_points: Mapping[RoundId, float] = field(default_factory=lambda: dict(DEFAULT_BASE_POINTS))
    series_bonus: Mapping[RoundId, float] = field(default_factory=lambda: dict(DEFAULT_SERIES_BONUS))
    series_length_bonus_enabled: bool = True

    # Flat, not round-scaled.
    upset_bonus: float = 2.0
    upset_bonus_enabled: bool = True

    mvp_points: float = 2.5

    play_in_points: float = 1.0
    play_in_enabled: bool = True

    # Extra points for the correct champion, on top of the Finals base points.
    champion_bonus: float = 0.0

    def base_for(self, round_id: RoundId) -> float:
        return float(self.base_points.get(round_id, 0.0))

    def series_bonus_for(self, round_id: RoundId) -> float:
        if not self.series_length_bonus_enabled:
            return 0.0
        return float(self.series_bonus.get(round_id, 0.0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_points": {rid.value: float(self.base_for(rid)) for rid in ROUND_ORDER},
            "series_bonus": {rid.value: float(self.series_bonus.get(rid, 0.0)) for rid in ROUND_ORDER},
            "series_length_bonus_enabled": bool(self.series_length_bonus_enabled),
            "upset_bonus": float(self.upset_bonus),
            "upset_bonus_enabled": bool(self.upset_bonus_enabled),
            "mvp_points": float(self.mvp_points),
            "play_in_points": float(self.play_in_points),
            "play_in_enabled": bool(self.play_in_enabled),
            "champion_bonus": float(self.champion_bonus),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ScoringPolicy":
        """Build a policy from league settings; unknown keys ignored, missing keys defaulted."""
        if d is None:
            return cls()
        if not isinstance(d, Mapping):
            raise InvalidBracket("scoring policy must be an object", [f"policy={d!r}"])

        kwargs: Dict[str, Any] = {
            "base_points": _round_table(d.get("base_points"), DEFAULT_BASE_POINTS, name="base_points"),
            "series_bonus": _round_table(d.get("series_bonus"), DEFAULT_SERIES_BONUS, name="series_bonus"),
        }
        problems = []
        for f in fields(cls):
            if f.name in kwargs or f.name not in d or d[f.name] is None:
                continue
            value = d[f.name]
            if f.name.endswith("_enabled"):
                flag = _flag(value)
                if flag is None:
                    problems.append(f"{f.name}: not a boolean ({value!r})")
                else:
                    kwargs[f.name] = flag
                continue
            try:
                kwargs[f.name] = float(value)
            except (TypeError, ValueError):
                problems.append(f"{f.name}: not a number ({value!r})")
        if problems:
            raise InvalidBracket("invalid scoring policy", problems)
        return cls(**kwargs)


DEFAULT_SCORING_POLICY = ScoringPolicy()
