from __future__ import annotations

from fastapi import APIRouter

from pickem.config import ScoringPolicy
from pickem.errors import BracketError
from pickem.leaderboard import rank_brackets
from pickem.models import Bracket
from pickem.play_in import clear_play_in, resolve_play_in
from pickem.progression import clear_matchup, select_winner, set_mvp
from pickem.scoring import score
from pickem.template import bracket_from_field, new_bracket
from pickem.types import FINALS_MVP_STAGE, PLAY_IN_STAGE
from pickem.validation import check_consistency
from app.schemas.brackets import (
    BracketTemplateRequest,
    ClearMatchupRequest,
    FinalsMvpRequest,
    LeaderboardRequest,
    PlayInClearRequest,
    PlayInPickRequest,
    ScoreRequest,
    SelectWinnerRequest,
    ValidateBracketRequest,
)
from app.services.bracket_facade import _bracket_error_response, bracket_payload, locked_response

router = APIRouter()


@router.post("/api/brackets/template")
async def api_bracket_template(req: BracketTemplateRequest):
    try:
        if req.field is not None:
            bracket = bracket_from_field(req.field, play_in=req.play_in)
        else:
            bracket = new_bracket(req.seeds or {}, play_in=True if req.play_in is None else req.play_in)
        return bracket_payload(bracket)
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/select-winner")
async def api_bracket_select_winner(req: SelectWinnerRequest):
    refused = locked_response(req.round_id, req.locked)
    if refused is not None:
        return refused
    try:
        bracket = select_winner(
            Bracket.from_dict(req.bracket),
            req.round_id,
            req.matchup_index,
            req.winner,
            winner_seed=req.winner_seed,
            series_length=req.series_length,
        )
        return bracket_payload(bracket)
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/clear-matchup")
async def api_bracket_clear_matchup(req: ClearMatchupRequest):
    refused = locked_response(req.round_id, req.locked)
    if refused is not None:
        return refused
    try:
        bracket = clear_matchup(Bracket.from_dict(req.bracket), req.round_id, req.matchup_index)
        return bracket_payload(bracket)
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/play-in")
async def api_bracket_play_in(req: PlayInPickRequest):
    refused = locked_response(PLAY_IN_STAGE, req.locked)
    if refused is not None:
        return refused
    try:
        bracket = resolve_play_in(
            Bracket.from_dict(req.bracket),
            req.conference,
            req.game,
            req.winner,
            winner_seed=req.winner_seed,
        )
        return bracket_payload(bracket)
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/play-in/clear")
async def api_bracket_play_in_clear(req: PlayInClearRequest):
    refused = locked_response(PLAY_IN_STAGE, req.locked)
    if refused is not None:
        return refused
    try:
        bracket = clear_play_in(Bracket.from_dict(req.bracket), req.conference, req.game)
        return bracket_payload(bracket)
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/mvp")
async def api_bracket_mvp(req: FinalsMvpRequest):
    refused = locked_response(FINALS_MVP_STAGE, req.locked)
    if refused is not None:
        return refused
    try:
        return bracket_payload(set_mvp(Bracket.from_dict(req.bracket), req.mvp))
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/score")
async def api_bracket_score(req: ScoreRequest):
    try:
        policy = ScoringPolicy.from_dict(req.policy) if req.policy is not None else None
        breakdown = score(Bracket.from_dict(req.predicted), Bracket.from_dict(req.official), policy)
        return {"ok": True, "score": breakdown.to_dict()}
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/leaderboard")
async def api_bracket_leaderboard(req: LeaderboardRequest):
    try:
        policy = ScoringPolicy.from_dict(req.policy) if req.policy is not None else None
        entries = {entry_id: Bracket.from_dict(raw) for entry_id, raw in req.entries.items()}
        ranked = rank_brackets(entries, Bracket.from_dict(req.official), policy)
        return {"ok": True, "leaderboard": [row.to_dict() for row in ranked]}
    except BracketError as exc:
        return _bracket_error_response(exc)


@router.post("/api/brackets/validate")
async def api_bracket_validate(req: ValidateBracketRequest):
    problems = check_consistency(req.bracket)
    return {"ok": True, "consistent": not problems, "problems": problems}
