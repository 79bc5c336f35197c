from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import config as j_cfg


@dataclass(frozen=True, slots=True)
class JobSpec:
    """A job to enqueue: type tag + payload (payload carries at least gameId)."""

    job_type: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def game_id(self) -> Optional[str]:
        gid = self.payload.get("gameId")
        return str(gid) if gid is not None else None


def recalc_minutes(game_id: str) -> JobSpec:
    return JobSpec(job_type=j_cfg.JOB_RECALC_MINUTES, payload={"gameId": str(game_id)})


@dataclass(frozen=True, slots=True)
class Job:
    job_id: str
    job_type: str
    payload: Dict[str, Any]
    status: str
    retry_count: int = 0
    max_retries: int = j_cfg.DEFAULT_MAX_RETRIES
    last_error: Optional[str] = None
    run_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_api(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "jobType": self.job_type,
            "payload": copy.deepcopy(self.payload),
            "status": self.status,
            "retryCount": self.retry_count,
            "maxRetries": self.max_retries,
            "lastError": self.last_error,
            "runAt": self.run_at,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
