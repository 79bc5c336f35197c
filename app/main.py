from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
import state
from game_repo import GameRepo
from app.api.router import api_router

logger = logging.getLogger(__name__)

app = FastAPI(title="squad_up game lifecycle server")

_STATE_CHANGING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


@app.on_event("startup")
def _startup_init_db() -> None:
    # 1) DB path from env (required, no default)
    # 2) schema DDL + migrations (idempotent)
    # 3) integrity validate once
    db_path = config.db_path_from_env()
    state.set_db_path(db_path)

    with GameRepo(db_path) as repo:
        repo.init_db()
        repo.validate_integrity()
    logger.info("SERVER_STARTUP db=%s", db_path)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _auth_guard_middleware(request: Request, call_next):
    """Optional auth guard.

    If SQUAD_ADMIN_TOKEN is configured, require it on state-changing API calls.
    """
    required_token = config.admin_token_from_env()
    if not required_token:
        return await call_next(request)

    path = request.url.path or ""
    method = (request.method or "GET").upper()
    if method not in _STATE_CHANGING_METHODS or not path.startswith("/api/"):
        return await call_next(request)

    provided = (request.headers.get("X-Admin-Token") or "").strip()
    if provided != required_token:
        return JSONResponse(status_code=401, content={"detail": "Unauthorized: invalid X-Admin-Token"})

    return await call_next(request)


app.include_router(api_router)
