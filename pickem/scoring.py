from __future__ import annotations

"""Score a predicted bracket against the official one.

Read-only and independent from progression. Per series:

    correct winner                         + base_points[round]
    ... and exact length, same team_a/b    + series_bonus[round]   (if enabled)
    ... and official winner seed > loser   + upset_bonus           (if enabled)
    ... and it is the Finals               + champion_bonus

Each correct Play-In game adds play_in_points (no bonuses); a correct Finals
MVP adds mvp_points once. Unplayed official games score nothing and never
raise.

`max_possible` is what the prediction can still earn from games the official
bracket has not decided yet; `possible_points = total + max_possible`.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .config import DEFAULT_SCORING_POLICY, ScoringPolicy
from .models import Bracket, Matchup, PlayInMatchup, coerce_bracket
from .types import (
    FINALS_MVP_STAGE,
    PLAY_IN_GAMES,
    PLAY_IN_STAGE,
    ROUND_ORDER,
    RoundId,
    same_ref,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchupResult:
    """Outcome of one predicted series against its official counterpart."""

    decided: bool = False
    picked: bool = False
    correct: bool = False
    exact_series: bool = False
    upset: bool = False
    base_points: float = 0.0
    series_length_points: float = 0.0
    upset_points: float = 0.0
    champion_points: float = 0.0
    # Still attainable while the official series is undecided.
    remaining: float = 0.0

    @property
    def points(self) -> float:
        return self.base_points + self.series_length_points + self.upset_points + self.champion_points


@dataclass(frozen=True, slots=True)
class RoundScore:
    correct_picks: int = 0
    bonus_count: int = 0
    upset_count: int = 0
    base_points: float = 0.0
    series_length_points: float = 0.0
    upset_points: float = 0.0
    possible_points: float = 0.0

    @property
    def subtotal(self) -> float:
        return self.base_points + self.series_length_points + self.upset_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correct_picks": int(self.correct_picks),
            "bonus_count": int(self.bonus_count),
            "upset_count": int(self.upset_count),
            "base_points": float(self.base_points),
            "series_length_points": float(self.series_length_points),
            "upset_points": float(self.upset_points),
            "subtotal": float(self.subtotal),
            "possible_points": float(self.possible_points),
        }


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    base_points: float = 0.0
    series_length_points: float = 0.0
    upset_points: float = 0.0
    play_in_points: float = 0.0
    mvp_points: float = 0.0
    champion_points: float = 0.0
    correct_picks: int = 0
    correct_series: int = 0
    upsets_called: int = 0
    max_possible: float = 0.0
    rounds: Dict[str, RoundScore] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return (
            self.base_points
            + self.series_length_points
            + self.upset_points
            + self.play_in_points
            + self.mvp_points
            + self.champion_points
        )

    @property
    def possible_points(self) -> float:
        return self.total + self.max_possible

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": float(self.total),
            "base_points": float(self.base_points),
            "series_length_points": float(self.series_length_points),
            "upset_points": float(self.upset_points),
            "play_in_points": float(self.play_in_points),
            "mvp_points": float(self.mvp_points),
            "champion_points": float(self.champion_points),
            "correct_picks": int(self.correct_picks),
            "correct_series": int(self.correct_series),
            "upsets_called": int(self.upsets_called),
            "max_possible": float(self.max_possible),
            "possible_points": float(self.possible_points),
            "rounds": {key: rs.to_dict() for key, rs in self.rounds.items()},
        }


# ---------------------------------------------------------------------------
# Per-contest rules
# ---------------------------------------------------------------------------


def _same_participants(a: Matchup, b: Matchup) -> bool:
    return same_ref(a.team_a, b.team_a) and same_ref(a.team_b, b.team_b)


def is_upset(official: Matchup) -> bool:
    """Official winner seeded numerically higher than the loser; unknown or equal seeds are not upsets."""
    if not official.is_resolved:
        return False
    winner_seed = official.winner_seed if official.winner_seed is not None else official.seed_of(official.winner)
    loser_seed = official.loser_seed
    if winner_seed is None or loser_seed is None:
        return False
    return winner_seed > loser_seed


def score_matchup(
    predicted: Matchup,
    official: Matchup,
    round_id: RoundId,
    policy: ScoringPolicy = DEFAULT_SCORING_POLICY,
) -> MatchupResult:
    picked = predicted.is_resolved
    is_finals = round_id == RoundId.FINALS

    if not official.is_resolved:
        if not picked:
            return MatchupResult()
        remaining = policy.base_for(round_id)
        if predicted.series_length is not None and _same_participants(predicted, official):
            remaining += policy.series_bonus_for(round_id)
        if is_finals:
            remaining += policy.champion_bonus
        return MatchupResult(picked=True, remaining=remaining)

    if not picked or not same_ref(predicted.winner, official.winner):
        return MatchupResult(decided=True, picked=picked)

    exact = predicted.series_length == official.series_length and _same_participants(predicted, official)
    upset = is_upset(official)
    return MatchupResult(
        decided=True,
        picked=True,
        correct=True,
        exact_series=exact,
        upset=upset,
        base_points=policy.base_for(round_id),
        series_length_points=policy.series_bonus_for(round_id) if exact else 0.0,
        upset_points=policy.upset_bonus if (upset and policy.upset_bonus_enabled) else 0.0,
        champion_points=policy.champion_bonus if is_finals else 0.0,
    )


def _score_play_in_game(predicted: PlayInMatchup, official: PlayInMatchup, policy: ScoringPolicy) -> Tuple[bool, float, float]:
    """(correct, points, remaining) for one Play-In game."""
    if not predicted.is_resolved:
        return False, 0.0, 0.0
    if not official.is_resolved:
        return False, 0.0, policy.play_in_points
    if same_ref(predicted.winner, official.winner):
        return True, policy.play_in_points, 0.0
    return False, 0.0, 0.0


# ---------------------------------------------------------------------------
# Whole bracket
# ---------------------------------------------------------------------------


def score(
    predicted: Union[Bracket, Dict[str, Any]],
    official: Union[Bracket, Dict[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> ScoreBreakdown:
    """Score `predicted` against `official` under `policy` (defaults when None)."""
    policy = policy or DEFAULT_SCORING_POLICY
    predicted = coerce_bracket(predicted)
    official = coerce_bracket(official)

    rounds: Dict[str, RoundScore] = {}
    totals = {
        "base_points": 0.0,
        "series_length_points": 0.0,
        "upset_points": 0.0,
        "play_in_points": 0.0,
        "mvp_points": 0.0,
        "champion_points": 0.0,
    }
    correct_picks = correct_series = upsets_called = 0
    max_possible = 0.0

    # Play-In
    if policy.play_in_enabled and predicted.has_play_in and official.has_play_in:
        pi_correct = 0
        pi_points = pi_possible = 0.0
        for p_sub, o_sub in zip(predicted.play_in, official.play_in):
            for g in PLAY_IN_GAMES:
                p_game, o_game = p_sub.game(g), o_sub.game(g)
                correct, points, remaining = _score_play_in_game(p_game, o_game, policy)
                pi_correct += int(correct)
                pi_points += points
                max_possible += remaining
                if p_game.is_resolved and o_game.is_resolved:
                    pi_possible += policy.play_in_points
        rounds[PLAY_IN_STAGE] = RoundScore(
            correct_picks=pi_correct,
            base_points=pi_points,
            possible_points=pi_possible,
        )
        totals["play_in_points"] += pi_points
        correct_picks += pi_correct

    # Elimination rounds
    for rid, p_round, o_round in zip(ROUND_ORDER, predicted.rounds, official.rounds):
        r_correct = r_bonus = r_upsets = 0
        r_base = r_series = r_upset_pts = r_possible = 0.0
        for p_m, o_m in zip(p_round, o_round):
            res = score_matchup(p_m, o_m, rid, policy)
            max_possible += res.remaining
            if res.decided and res.picked:
                r_possible += policy.base_for(rid)
            if not res.correct:
                continue
            r_correct += 1
            r_bonus += int(res.exact_series and policy.series_length_bonus_enabled)
            r_upsets += int(res.upset and policy.upset_bonus_enabled)
            r_base += res.base_points
            r_series += res.series_length_points
            r_upset_pts += res.upset_points
            totals["champion_points"] += res.champion_points

        rounds[rid.value] = RoundScore(
            correct_picks=r_correct,
            bonus_count=r_bonus,
            upset_count=r_upsets,
            base_points=r_base,
            series_length_points=r_series,
            upset_points=r_upset_pts,
            possible_points=r_possible,
        )
        totals["base_points"] += r_base
        totals["series_length_points"] += r_series
        totals["upset_points"] += r_upset_pts
        correct_picks += r_correct
        correct_series += r_bonus
        upsets_called += r_upsets

    # Finals MVP
    if predicted.mvp is not None:
        if official.mvp is None:
            max_possible += policy.mvp_points
        else:
            hit = same_ref(predicted.mvp, official.mvp)
            mvp_points = policy.mvp_points if hit else 0.0
            rounds[FINALS_MVP_STAGE] = RoundScore(
                correct_picks=int(hit),
                base_points=mvp_points,
                possible_points=policy.mvp_points,
            )
            totals["mvp_points"] += mvp_points

    breakdown = ScoreBreakdown(
        correct_picks=correct_picks,
        correct_series=correct_series,
        upsets_called=upsets_called,
        max_possible=max_possible,
        rounds=rounds,
        **totals,
    )
    logger.debug(
        "scored bracket: total=%.1f correct=%d max_possible=%.1f",
        breakdown.total,
        breakdown.correct_picks,
        breakdown.max_possible,
    )
    return breakdown
