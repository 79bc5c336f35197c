from __future__ import annotations

"""Tunables for the durable job queue.

Job records are written by this service and consumed by an external worker
polling the same database.
"""

JOB_RECALC_MINUTES = "recalc-minutes"
JOB_RECALC_GOALS_ASSISTS = "recalc-goals-assists"
JOB_RECALC_ANALYTICS = "recalc-analytics"

JOB_TYPES: tuple[str, ...] = (JOB_RECALC_MINUTES, JOB_RECALC_GOALS_ASSISTS, JOB_RECALC_ANALYTICS)

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_DONE = "done"
STATUS_FAILED = "failed"

JOB_STATUSES: tuple[str, ...] = (STATUS_PENDING, STATUS_PROCESSING, STATUS_DONE, STATUS_FAILED)

# Retry policy applied by mark_job_failed():
#   delay = BACKOFF_SECONDS * 2 ** (retry_count - 1)
DEFAULT_MAX_RETRIES: int = 5
DEFAULT_BACKOFF_SECONDS: int = 60
