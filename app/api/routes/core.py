from __future__ import annotations

from fastapi import APIRouter

from pickem.types import ROUND_ORDER, SERIES_LENGTHS

router = APIRouter()


@router.get("/api/health")
async def api_health():
    """Liveness probe; also lists the round ids clients may send."""
    return {
        "ok": True,
        "rounds": [rid.value for rid in ROUND_ORDER],
        "round_names": {rid.value: rid.display_name for rid in ROUND_ORDER},
        "series_lengths": list(SERIES_LENGTHS),
    }
