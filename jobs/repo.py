from __future__ import annotations

"""DB access layer for the job queue.

Pure DB I/O over the ``jobs`` table. Callers run these inside
``GameRepo.transaction()`` so that, e.g., a card write and its job insert
commit together, and claim_next_job's select+update is atomic.

Timestamps are ISO-8601 UTC strings (YYYY-MM-DDTHH:MM:SSZ).
"""

import datetime as _dt
import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from game_repo import json_dumps, json_loads

from . import config as j_cfg
from .types import Job, JobSpec

_ISO_FMT = "%Y-%m-%dT%H:%M:%SZ"

_JOB_COLUMNS = """
    job_id, job_type, payload_json, status, retry_count, max_retries, last_error,
    run_at, started_at, completed_at, created_at, updated_at
"""


def shift_iso(ts: str, seconds: float) -> str:
    base = _dt.datetime.strptime(str(ts), _ISO_FMT)
    return (base + _dt.timedelta(seconds=float(seconds))).strftime(_ISO_FMT)


def _row_to_job(row: sqlite3.Row) -> Job:
    payload = json_loads(row["payload_json"], default={})
    return Job(
        job_id=str(row["job_id"]),
        job_type=str(row["job_type"]),
        payload=payload if isinstance(payload, dict) else {},
        status=str(row["status"]),
        retry_count=int(row["retry_count"] or 0),
        max_retries=int(row["max_retries"] or j_cfg.DEFAULT_MAX_RETRIES),
        last_error=row["last_error"],
        run_at=row["run_at"],
        started_at=row["started_at"],
        completed_at=row["completed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def enqueue_job(
    cur: sqlite3.Cursor,
    job_spec: JobSpec,
    *,
    now: str,
    max_retries: int = j_cfg.DEFAULT_MAX_RETRIES,
) -> Job:
    if job_spec.job_type not in j_cfg.JOB_TYPES:
        raise ValueError(f"Unknown job_type: {job_spec.job_type}. Allowed: {list(j_cfg.JOB_TYPES)}")
    if not job_spec.game_id:
        raise ValueError("job payload requires gameId")

    job_id = uuid.uuid4().hex
    cur.execute(
        """
        INSERT INTO jobs(
            job_id, job_type, payload_json, game_id, status, retry_count, max_retries,
            run_at, created_at, updated_at
        )
        VALUES (?, ?, ?, ?, ?, 0, ?, ?, ?, ?);
        """,
        (
            job_id,
            job_spec.job_type,
            json_dumps(job_spec.payload),
            job_spec.game_id,
            j_cfg.STATUS_PENDING,
            int(max_retries),
            str(now),
            str(now),
            str(now),
        ),
    )
    job = get_job(cur, job_id)
    assert job is not None
    return job


def get_job(cur: sqlite3.Cursor, job_id: str) -> Optional[Job]:
    row = cur.execute(f"SELECT {_JOB_COLUMNS} FROM jobs WHERE job_id=? LIMIT 1;", (str(job_id),)).fetchone()
    return _row_to_job(row) if row else None


def list_jobs(
    cur: sqlite3.Cursor,
    *,
    job_type: Optional[str] = None,
    game_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 200,
) -> List[Job]:
    q = f"SELECT {_JOB_COLUMNS} FROM jobs WHERE 1=1"
    params: list[Any] = []
    if job_type:
        q += " AND job_type=?"
        params.append(str(job_type))
    if game_id:
        q += " AND game_id=?"
        params.append(str(game_id))
    if status:
        q += " AND status=?"
        params.append(str(status))
    q += " ORDER BY created_at ASC, rowid ASC LIMIT ?;"
    params.append(max(1, int(limit)))
    return [_row_to_job(r) for r in cur.execute(q, params).fetchall()]


# ---------------------------------------------------------------------------
# Worker contract
# ---------------------------------------------------------------------------


def claim_next_job(cur: sqlite3.Cursor, *, now: str) -> Optional[Job]:
    """Move the oldest runnable pending job to ``processing`` and return it.

    Must run inside an IMMEDIATE transaction (GameRepo.transaction()).
    """
    row = cur.execute(
        """
        SELECT job_id FROM jobs
        WHERE status=? AND run_at<=?
        ORDER BY run_at ASC, created_at ASC, rowid ASC
        LIMIT 1;
        """,
        (j_cfg.STATUS_PENDING, str(now)),
    ).fetchone()
    if not row:
        return None
    cur.execute(
        "UPDATE jobs SET status=?, started_at=?, updated_at=? WHERE job_id=? AND status=?;",
        (j_cfg.STATUS_PROCESSING, str(now), str(now), row["job_id"], j_cfg.STATUS_PENDING),
    )
    if cur.rowcount != 1:
        return None
    return get_job(cur, row["job_id"])


def mark_job_done(cur: sqlite3.Cursor, job_id: str, *, now: str) -> Job:
    cur.execute(
        "UPDATE jobs SET status=?, completed_at=?, last_error=NULL, updated_at=? WHERE job_id=?;",
        (j_cfg.STATUS_DONE, str(now), str(now), str(job_id)),
    )
    job = get_job(cur, job_id)
    if job is None:
        raise KeyError(f"job not found: {job_id}")
    return job


def mark_job_failed(
    cur: sqlite3.Cursor,
    job_id: str,
    *,
    error: str,
    now: str,
    backoff_seconds: int = j_cfg.DEFAULT_BACKOFF_SECONDS,
) -> Job:
    """Record a failure; reschedule with exponential backoff or give up.

    retry_count >= max_retries -> ``failed`` (completed_at set)
    otherwise -> ``pending`` with run_at = now + backoff * 2 ** (retry_count - 1)
    """
    job = get_job(cur, job_id)
    if job is None:
        raise KeyError(f"job not found: {job_id}")

    retry_count = job.retry_count + 1
    fields: Dict[str, Any] = {
        "retry_count": retry_count,
        "last_error": str(error)[:2000],
        "updated_at": str(now),
    }
    if retry_count >= job.max_retries:
        fields.update(status=j_cfg.STATUS_FAILED, completed_at=str(now))
    else:
        delay = float(backoff_seconds) * (2 ** (retry_count - 1))
        fields.update(status=j_cfg.STATUS_PENDING, run_at=shift_iso(now, delay), started_at=None)

    assignments = ", ".join(f"{k}=?" for k in fields)
    cur.execute(f"UPDATE jobs SET {assignments} WHERE job_id=?;", (*fields.values(), str(job_id)))
    updated = get_job(cur, job_id)
    assert updated is not None
    return updated
