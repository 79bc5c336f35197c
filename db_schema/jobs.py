# db_schema/jobs.py
"""SQLite schema: durable job queue.

Jobs are consumed by an external worker process reading the same database.

Notes
-----
* payload_json carries at least {"gameId": ...}; there is no FK to games so
  jobs survive game deletion (the worker decides what a missing game means).
* Timestamps are ISO-8601 UTC strings; run_at ordering relies on that format.
"""

from __future__ import annotations


def ddl(*, now: str, schema_version: str) -> str:  # noqa: ARG001
    """Return DDL SQL for the jobs table (as a single executescript string)."""

    return f"""
                CREATE TABLE IF NOT EXISTS jobs (
                    job_id TEXT PRIMARY KEY,
                    job_type TEXT NOT NULL,
                    payload_json TEXT NOT NULL,
                    game_id TEXT,
                    status TEXT NOT NULL DEFAULT 'pending'
                        CHECK (status IN ('pending', 'processing', 'done', 'failed')),
                    retry_count INTEGER NOT NULL DEFAULT 0 CHECK (retry_count >= 0),
                    max_retries INTEGER NOT NULL DEFAULT 5 CHECK (max_retries >= 1),
                    last_error TEXT,
                    run_at TEXT NOT NULL,
                    started_at TEXT,
                    completed_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_jobs_status_run_at ON jobs(status, run_at);
                CREATE INDEX IF NOT EXISTS idx_jobs_type_status ON jobs(job_type, status);
                CREATE INDEX IF NOT EXISTS idx_jobs_game_id ON jobs(game_id);
"""
