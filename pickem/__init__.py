"""Playoff pick'em bracket engine.

This package implements bracket progression and scoring for NBA-style
playoff prediction games (16 seeded teams, best-of-seven series, a Play-In
stage per conference).

Design goals
------------
- Immutable values: every operation takes a Bracket and returns a new one
- One generic propagation routine over a round-to-round slot table
- Cascading invalidation: changing an early pick clears every pick it fed
- Deterministic, read-only scoring under a configurable ScoringPolicy
- Fail loud with structured errors (`pickem.errors.BracketError`)

Public entry points
-------------------
- new_bracket / bracket_from_field
- select_winner / clear_matchup / set_mvp
- resolve_play_in / clear_play_in
- PendingSelection
- score / rank_brackets
- check_consistency
"""

from .config import DEFAULT_SCORING_POLICY, ScoringPolicy
from .errors import (
    BracketError,
    IncompleteFinal,
    InvalidBracket,
    InvalidSelection,
    InvalidSeriesLength,
    MatchupIndexOutOfRange,
    PlayInNotEnabled,
    RoundNotFound,
)
from .leaderboard import LeaderboardEntry, rank_brackets
from .models import Bracket, Matchup, PlayInMatchup, PlayInSubBracket, coerce_bracket
from .pending import PendingSelection
from .play_in import clear_play_in, resolve_play_in
from .progression import clear_matchup, is_complete, select_winner, set_mvp
from .scoring import MatchupResult, RoundScore, ScoreBreakdown, score, score_matchup
from .template import bracket_from_field, new_bracket
from .types import Conference, MatchupStatus, PlayInGame, RoundId
from .validation import check_consistency

__all__ = [
    "DEFAULT_SCORING_POLICY",
    "ScoringPolicy",
    "BracketError",
    "IncompleteFinal",
    "InvalidBracket",
    "InvalidSelection",
    "InvalidSeriesLength",
    "MatchupIndexOutOfRange",
    "PlayInNotEnabled",
    "RoundNotFound",
    "LeaderboardEntry",
    "rank_brackets",
    "Bracket",
    "Matchup",
    "PlayInMatchup",
    "PlayInSubBracket",
    "coerce_bracket",
    "PendingSelection",
    "clear_play_in",
    "resolve_play_in",
    "clear_matchup",
    "is_complete",
    "select_winner",
    "set_mvp",
    "MatchupResult",
    "RoundScore",
    "ScoreBreakdown",
    "score",
    "score_matchup",
    "bracket_from_field",
    "new_bracket",
    "Conference",
    "MatchupStatus",
    "PlayInGame",
    "RoundId",
    "check_consistency",
]
