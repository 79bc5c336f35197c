from __future__ import annotations

"""Single-step job processing for an external worker process.

The worker owns the polling loop and the handlers (e.g. the minutes
recalculation); this module only applies the claim -> run -> mark contract
against the shared store.
"""

import logging
from typing import Callable, Mapping, Optional

from game_repo import GameRepo, utc_now_iso

from . import config as j_cfg
from . import repo as j_repo
from .types import Job

logger = logging.getLogger(__name__)

JobHandler = Callable[[Job], None]


def process_next_job(
    repo: GameRepo,
    handlers: Mapping[str, JobHandler],
    *,
    now: Optional[str] = None,
    backoff_seconds: int = j_cfg.DEFAULT_BACKOFF_SECONDS,
) -> Optional[Job]:
    """Claim one runnable job, run its handler, and record the outcome.

    Returns the job in its final state for this step, or None when nothing is
    runnable. Handler exceptions are recorded on the job (retry/backoff) and
    not re-raised.
    """
    ts = now or utc_now_iso()
    with repo.transaction() as cur:
        job = j_repo.claim_next_job(cur, now=ts)
    if job is None:
        return None

    handler = handlers.get(job.job_type)
    if handler is None:
        logger.warning("JOB_UNKNOWN_TYPE job=%s type=%s", job.job_id, job.job_type)
        with repo.transaction() as cur:
            return j_repo.mark_job_failed(
                cur, job.job_id, error=f"Unknown job type: {job.job_type}", now=ts, backoff_seconds=backoff_seconds
            )

    if not job.payload.get("gameId"):
        with repo.transaction() as cur:
            return j_repo.mark_job_failed(
                cur, job.job_id, error="Missing gameId in job payload", now=ts, backoff_seconds=backoff_seconds
            )

    try:
        handler(job)
    except Exception as exc:
        logger.warning("JOB_FAILED job=%s type=%s game=%s", job.job_id, job.job_type, job.payload.get("gameId"), exc_info=True)
        with repo.transaction() as cur:
            failed = j_repo.mark_job_failed(cur, job.job_id, error=str(exc), now=ts, backoff_seconds=backoff_seconds)
        if failed.status == j_cfg.STATUS_FAILED:
            logger.error("JOB_RETRIES_EXHAUSTED job=%s retries=%s", failed.job_id, failed.max_retries)
        return failed

    with repo.transaction() as cur:
        done = j_repo.mark_job_done(cur, job.job_id, now=ts)
    logger.info("JOB_DONE job=%s type=%s game=%s", done.job_id, done.job_type, done.payload.get("gameId"))
    return done
