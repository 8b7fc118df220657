from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import ScoringPolicy
from .models import Bracket, coerce_bracket
from .scoring import ScoreBreakdown, score

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    rank: int
    entry_id: str
    breakdown: ScoreBreakdown

    @property
    def total(self) -> float:
        return self.breakdown.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": int(self.rank),
            "entry_id": self.entry_id,
            "total": float(self.breakdown.total),
            "correct_picks": int(self.breakdown.correct_picks),
            "possible_points": float(self.breakdown.possible_points),
            "breakdown": self.breakdown.to_dict(),
        }


def rank_brackets(
    entries: Mapping[str, Union[Bracket, Mapping[str, Any]]],
    official: Union[Bracket, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> List[LeaderboardEntry]:
    """Score every entry and rank them.

    Order: total desc, correct picks desc, entry id asc. Entries tied on
    total and correct picks share a rank (1, 1, 3).
    """
    official = coerce_bracket(official)
    scored = [(str(entry_id), score(coerce_bracket(b), official, policy)) for entry_id, b in entries.items()]
    scored.sort(key=lambda item: (-item[1].total, -item[1].correct_picks, item[0]))

    out: List[LeaderboardEntry] = []
    prev_key = None
    rank = 0
    for pos, (entry_id, breakdown) in enumerate(scored, start=1):
        key = (breakdown.total, breakdown.correct_picks)
        if key != prev_key:
            rank = pos
            prev_key = key
        out.append(LeaderboardEntry(rank=rank, entry_id=entry_id, breakdown=breakdown))

    logger.debug("ranked %d brackets", len(out))
    return out
