from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi.responses import JSONResponse

from pickem.errors import BracketError
from pickem.models import Bracket
from pickem.progression import is_complete
from pickem.types import FINALS_MVP_STAGE, RoundId, parse_round_id

logger = logging.getLogger(__name__)

STAGE_LOCKED = "STAGE_LOCKED"


def _bracket_error_response(error: BracketError) -> JSONResponse:
    logger.info("bracket request rejected: %s %s", error.code, error.message)
    payload = {
        "ok": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details,
        },
    }
    return JSONResponse(status_code=400, content=payload)


def _normalize_stage(stage: Any) -> str:
    rid = parse_round_id(stage)
    if rid is not None:
        return rid.value
    return str(stage or "").strip().lower()


def locked_response(stage: Any, locked: Iterable[str]) -> Optional[JSONResponse]:
    """423 payload when `stage` is in the caller's lock list, else None.

    The Finals MVP pick is locked together with the Finals.
    """
    wanted = _normalize_stage(stage)
    stages = {_normalize_stage(s) for s in locked or ()}
    if wanted == FINALS_MVP_STAGE and RoundId.FINALS.value in stages:
        stages.add(FINALS_MVP_STAGE)
    if wanted not in stages:
        return None

    logger.warning("refused mutation of locked stage %r", wanted)
    payload = {
        "ok": False,
        "error": {
            "code": STAGE_LOCKED,
            "message": f"{wanted} is locked",
            "details": {"stage": wanted, "locked": sorted(stages)},
        },
    }
    return JSONResponse(status_code=423, content=payload)


def bracket_payload(bracket: Bracket) -> Dict[str, Any]:
    return {
        "ok": True,
        "bracket": bracket.to_dict(),
        "complete": is_complete(bracket),
    }
