from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

import state
from game_repo import GameRepo
from jobs import config as j_cfg
from jobs import repo as j_repo
from app.services.error_facade import _http_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/jobs")
async def api_list_jobs(
    jobType: Optional[str] = None,
    gameId: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 200,
):
    """Read-only view of the job queue (the worker runs out of process)."""
    if status is not None and status not in j_cfg.JOB_STATUSES:
        raise HTTPException(
            status_code=400,
            detail={"code": "BAD_REQUEST", "message": f"Unknown status: {status}", "details": {"allowed": list(j_cfg.JOB_STATUSES)}},
        )
    lim = max(1, min(int(limit or 200), 1000))
    try:
        with GameRepo(state.get_db_path()) as repo:
            cur = repo.cursor()
            try:
                jobs = j_repo.list_jobs(cur, job_type=jobType, game_id=gameId, status=status, limit=lim)
            finally:
                cur.close()
        return {"jobs": [j.to_api() for j in jobs]}
    except Exception as e:
        raise _http_error(e, op="list jobs") from e
