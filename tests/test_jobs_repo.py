"""Job queue contract: enqueue, claim, complete, fail with backoff, worker step."""

import pytest

from jobs import repo as j_repo
from jobs.types import JobSpec, recalc_minutes
from jobs.worker import process_next_job

T0 = "2026-01-01T00:00:00Z"


def enqueue(repo, game_id="g1", now=T0, **kwargs):
    with repo.transaction() as cur:
        return j_repo.enqueue_job(cur, recalc_minutes(game_id), now=now, **kwargs)


def claim(repo, now=T0):
    with repo.transaction() as cur:
        return j_repo.claim_next_job(cur, now=now)


def fail(repo, job_id, now=T0, error="boom"):
    with repo.transaction() as cur:
        return j_repo.mark_job_failed(cur, job_id, error=error, now=now)


class TestEnqueue:
    def test_pending_record(self, repo):
        job = enqueue(repo)
        assert job.status == "pending"
        assert job.payload == {"gameId": "g1"}
        assert job.retry_count == 0
        assert job.max_retries == 5
        assert job.run_at == T0
        assert job.to_api()["jobType"] == "recalc-minutes"

    def test_rejects_unknown_type_and_missing_game(self, repo):
        with repo.transaction() as cur:
            with pytest.raises(ValueError):
                j_repo.enqueue_job(cur, JobSpec("reindex", {"gameId": "g1"}), now=T0)
            with pytest.raises(ValueError):
                j_repo.enqueue_job(cur, JobSpec("recalc-minutes", {}), now=T0)

    def test_list_filters(self, repo):
        enqueue(repo, "g1")
        enqueue(repo, "g2")
        with repo.transaction() as cur:
            assert [j.payload["gameId"] for j in j_repo.list_jobs(cur)] == ["g1", "g2"]
            assert len(j_repo.list_jobs(cur, game_id="g2")) == 1
            assert len(j_repo.list_jobs(cur, job_type="recalc-analytics")) == 0
            assert len(j_repo.list_jobs(cur, status="pending")) == 2


class TestClaim:
    def test_oldest_runnable_first(self, repo):
        first = enqueue(repo, "g1", now="2026-01-01T00:00:00Z")
        enqueue(repo, "g2", now="2026-01-01T00:00:05Z")
        job = claim(repo, now="2026-01-01T00:00:10Z")
        assert job.job_id == first.job_id
        assert job.status == "processing"
        assert job.started_at == "2026-01-01T00:00:10Z"

    def test_future_jobs_not_claimed(self, repo):
        enqueue(repo, now="2026-01-01T00:10:00Z")
        assert claim(repo, now=T0) is None

    def test_claimed_job_not_claimed_twice(self, repo):
        enqueue(repo)
        assert claim(repo) is not None
        assert claim(repo) is None


class TestFailAndComplete:
    def test_done(self, repo):
        job = enqueue(repo)
        claim(repo)
        with repo.transaction() as cur:
            done = j_repo.mark_job_done(cur, job.job_id, now="2026-01-01T00:00:02Z")
        assert done.status == "done"
        assert done.completed_at == "2026-01-01T00:00:02Z"

    def test_exponential_backoff(self, repo):
        job = enqueue(repo)
        claim(repo)
        first = fail(repo, job.job_id)
        assert first.status == "pending"
        assert first.retry_count == 1
        assert first.run_at == "2026-01-01T00:01:00Z"
        assert first.last_error == "boom"

        claim(repo, now=first.run_at)
        second = fail(repo, job.job_id, now=first.run_at)
        assert second.retry_count == 2
        assert second.run_at == "2026-01-01T00:03:00Z"

    def test_failed_after_max_retries(self, repo):
        job = enqueue(repo, max_retries=3)
        for _ in range(2):
            assert fail(repo, job.job_id).status == "pending"
        last = fail(repo, job.job_id, now="2026-01-01T01:00:00Z")
        assert last.status == "failed"
        assert last.retry_count == 3
        assert last.completed_at == "2026-01-01T01:00:00Z"

    def test_unknown_job(self, repo):
        with repo.transaction() as cur:
            with pytest.raises(KeyError):
                j_repo.mark_job_failed(cur, "nope", error="x", now=T0)


class TestWorker:
    def test_runs_handler_and_marks_done(self, repo):
        seen = []
        enqueue(repo, "g7")
        job = process_next_job(repo, {"recalc-minutes": lambda j: seen.append(j.payload["gameId"])}, now=T0)
        assert seen == ["g7"]
        assert job.status == "done"

    def test_handler_error_reschedules(self, repo):
        def broken(job):
            raise RuntimeError("minutes table locked")

        enqueue(repo)
        job = process_next_job(repo, {"recalc-minutes": broken}, now=T0)
        assert job.status == "pending"
        assert job.retry_count == 1
        assert job.last_error == "minutes table locked"

    def test_unknown_type_marked_failed(self, repo):
        enqueue(repo)
        job = process_next_job(repo, {}, now=T0)
        assert job.retry_count == 1
        assert "Unknown job type" in job.last_error

    def test_nothing_to_do(self, repo):
        assert process_next_job(repo, {}, now=T0) is None
