from __future__ import annotations

"""Two-step pick: choose the team, then the series length.

The engine only accepts atomic picks (winner + length). A UI that asks for
the team first keeps a PendingSelection and commits it once both parts are
known. The value is owned by the caller and never stored in a Bracket.
"""

from dataclasses import dataclass, replace
from typing import Optional, Union

from .errors import InvalidSelection, InvalidSeriesLength
from .models import Bracket, _check_series_length
from .progression import _require_round, select_winner
from .types import RoundId, clean_ref


@dataclass(frozen=True, slots=True)
class PendingSelection:
    round_id: RoundId
    matchup_index: int
    winner: Optional[str] = None
    winner_seed: Optional[int] = None
    series_length: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "round_id", _require_round(self.round_id))
        object.__setattr__(self, "winner", clean_ref(self.winner))
        _check_series_length(self.series_length)

    @classmethod
    def for_matchup(cls, bracket: Bracket, round_id: Union[RoundId, str], matchup_index: int) -> "PendingSelection":
        """Start a selection; an already resolved matchup pre-fills winner and length.

        Lets the caller change only the series length of an existing pick.
        """
        rid = _require_round(round_id)
        m = bracket.matchup(rid, matchup_index)
        return cls(
            round_id=rid,
            matchup_index=matchup_index,
            winner=m.winner,
            winner_seed=m.winner_seed,
            series_length=m.series_length,
        )

    def with_winner(self, winner: Optional[str], winner_seed: Optional[int] = None) -> "PendingSelection":
        return replace(self, winner=winner, winner_seed=winner_seed)

    def with_series_length(self, series_length: Optional[int]) -> "PendingSelection":
        return replace(self, series_length=series_length)

    @property
    def is_complete(self) -> bool:
        return self.winner is not None and self.series_length is not None

    def commit(self, bracket: Bracket) -> Bracket:
        if self.winner is None:
            raise InvalidSelection(
                "pick a winner before committing",
                {"round_id": self.round_id.value, "matchup_index": self.matchup_index},
            )
        if self.series_length is None:
            raise InvalidSeriesLength(
                "pick a series length before committing",
                {"round_id": self.round_id.value, "matchup_index": self.matchup_index},
            )
        return select_winner(
            bracket,
            self.round_id,
            self.matchup_index,
            self.winner,
            winner_seed=self.winner_seed,
            series_length=self.series_length,
        )
