from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BracketTemplateRequest(BaseModel):
    # Either seeds ({"east": {"1": "BOS", ...}, "west": {...}}) or a postseason field.
    seeds: Optional[Dict[str, Dict[str, str]]] = None
    field: Optional[Dict[str, Any]] = None
    play_in: Optional[bool] = None


class BracketMutationRequest(BaseModel):
    bracket: Dict[str, Any]
    # Stages the caller has locked (round ids and/or "play_in").
    locked: List[str] = Field(default_factory=list)


class SelectWinnerRequest(BracketMutationRequest):
    round_id: str
    matchup_index: int
    winner: str
    winner_seed: Optional[int] = None
    series_length: Optional[int] = None


class ClearMatchupRequest(BracketMutationRequest):
    round_id: str
    matchup_index: int


class PlayInPickRequest(BracketMutationRequest):
    conference: str
    game: str
    winner: str
    winner_seed: Optional[int] = None


class PlayInClearRequest(BracketMutationRequest):
    conference: str
    game: str


class FinalsMvpRequest(BracketMutationRequest):
    mvp: Optional[str] = None


class ScoreRequest(BaseModel):
    predicted: Dict[str, Any]
    official: Dict[str, Any]
    policy: Optional[Dict[str, Any]] = None


class LeaderboardRequest(BaseModel):
    entries: Dict[str, Dict[str, Any]]
    official: Dict[str, Any]
    policy: Optional[Dict[str, Any]] = None


class ValidateBracketRequest(BaseModel):
    bracket: Dict[str, Any]
