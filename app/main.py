from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router

logger = logging.getLogger(__name__)

LOG_LEVEL = (os.environ.get("PICKEM_LOG_LEVEL") or "INFO").strip().upper()
for _name in ("pickem", "app"):
    logging.getLogger(_name).setLevel(LOG_LEVEL)


def _cors_origins() -> list:
    raw = os.environ.get("PICKEM_CORS_ORIGINS") or "*"
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


app = FastAPI(title="Playoff Pick'em")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
