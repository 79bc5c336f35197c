"""Durable job queue (data contract).

Jobs are enqueued by the game lifecycle and match event flows and consumed by
an external worker that polls the same SQLite database.

Public API (v1)
---------------
- enqueue_job / get_job / list_jobs
- claim_next_job / mark_job_done / mark_job_failed (worker contract)
- process_next_job: one claim -> handler -> mark step
"""

from .repo import claim_next_job, enqueue_job, get_job, list_jobs, mark_job_done, mark_job_failed
from .types import Job, JobSpec, recalc_minutes
from .worker import process_next_job

__all__ = [
    "Job",
    "JobSpec",
    "claim_next_job",
    "enqueue_job",
    "get_job",
    "list_jobs",
    "mark_job_done",
    "mark_job_failed",
    "process_next_job",
    "recalc_minutes",
]
