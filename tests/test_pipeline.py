"""Unit tests for the refresh pipeline."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from rolewatch.adapters import AdapterHTTPError, FetchResult
from rolewatch.domain.models import CompanyCacheEntry, TrackedJob, UserProfile
from rolewatch.persistence.store import COMPANY_CACHE_KEY, TRACKED_JOBS_KEY
from rolewatch.pipeline import RefreshPipeline
from rolewatch.state.models import WatchState


def _factory(results):
    """Adapter factory returning per-company FetchResults (or raising errors)."""

    def _build(company, advanced_config):
        adapter = Mock()
        outcome = results[company.id]
        if isinstance(outcome, Exception):
            adapter.fetch_postings.side_effect = outcome
        else:
            adapter.fetch_postings.return_value = outcome
        return adapter

    return Mock(side_effect=_build)


@pytest.fixture
def state(greenhouse_company, lever_company, custom_company):
    return WatchState(
        profile=UserProfile(
            role_queries=["Software Engineer Intern"],
            companies=[greenhouse_company, lever_company, custom_company],
        )
    )


class TestRunOnce:
    """Tests for RefreshPipeline.run_once()."""

    def test_refreshes_fetchable_companies(self, state, make_posting, now):
        factory = _factory(
            {
                "acme": FetchResult(company_name="Acme Robotics", postings=[make_posting(id="1")]),
                "lever:plaid": FetchResult(postings=[make_posting(id="a"), make_posting(id="b")]),
            }
        )
        result = RefreshPipeline(adapter_factory=factory).run_once(state, now)

        assert factory.call_count == 2
        assert result.skipped_companies == ["custom:openai.com"]
        assert result.total_fetched == 3
        assert not result.had_errors

        cache = result.state.company_cache
        assert set(cache) == {"acme", "lever:plaid"}
        assert cache["acme"].company_name == "Acme Robotics"
        assert cache["lever:plaid"].company_name == "Plaid"
        assert all(entry.fetched_at == now for entry in cache.values())
        assert state.company_cache == {}

    def test_failure_is_isolated(self, state, make_posting, now):
        factory = _factory(
            {
                "acme": AdapterHTTPError("HTTP 404: Not Found", status_code=404, url="https://x"),
                "lever:plaid": FetchResult(postings=[make_posting(id="a")]),
            }
        )
        result = RefreshPipeline(adapter_factory=factory).run_once(state, now)

        failed = result.state.company_cache["acme"]
        assert failed.jobs == []
        assert failed.error == "HTTP 404: Not Found"
        assert result.state.company_cache["lever:plaid"].error is None
        assert result.total_errors == 1
        assert result.had_errors

        stats = {s.company_id: s for s in result.company_stats}
        assert stats["acme"].had_errors
        assert stats["acme"].error_message == "HTTP 404: Not Found"

    def test_unexpected_exception_is_recorded(self, state, now):
        factory = _factory({"acme": RuntimeError("boom"), "lever:plaid": FetchResult()})
        result = RefreshPipeline(adapter_factory=factory).run_once(state, now)

        assert result.state.company_cache["acme"].error == "boom"

    def test_failure_leaves_tracked_jobs(self, state, now):
        tracked = TrackedJob(job_id="1", company_id="acme", last_checked_at=now, last_seen_at=now)
        state = state.model_copy(update={"tracked_jobs": [tracked]})
        factory = _factory({"acme": AdapterHTTPError("down", status_code=503, url="x"), "lever:plaid": FetchResult()})

        result = RefreshPipeline(adapter_factory=factory).run_once(state, now + timedelta(hours=1))

        assert result.state.tracked_jobs == [tracked]

    def test_reconciles_tracked_jobs(self, state, make_posting, now):
        closed = TrackedJob(job_id="gone", company_id="acme", title="Old", last_checked_at=now, last_seen_at=now)
        moved = TrackedJob(
            job_id="1",
            company_id="acme",
            title="Software Engineer Intern",
            url="https://boards.greenhouse.io/acme/jobs/1",
            location="Remote",
            last_checked_at=now,
            last_seen_at=now,
        )
        state = state.model_copy(update={"tracked_jobs": [closed, moved]})
        factory = _factory(
            {"acme": FetchResult(postings=[make_posting(id="1", location="Austin, TX")]), "lever:plaid": FetchResult()}
        )

        later = now + timedelta(hours=1)
        result = RefreshPipeline(adapter_factory=factory).run_once(state, later)

        statuses = {t.job_id: t.status for t in result.state.tracked_jobs}
        assert statuses == {"gone": "closed", "1": "changed"}
        stats = {s.company_id: s for s in result.company_stats}
        assert stats["acme"].tracked_closed == 1
        assert stats["acme"].tracked_changed == 1

    def test_uses_previous_entry_for_history(self, state, make_posting, make_job, now):
        previous = CompanyCacheEntry(
            company_id="acme", company_name="Acme", jobs=[make_job(id="1")], fetched_at=now - timedelta(hours=1)
        )
        state = state.model_copy(update={"company_cache": {"acme": previous}})
        factory = _factory({"acme": FetchResult(postings=[make_posting(id="1")]), "lever:plaid": FetchResult()})

        result = RefreshPipeline(adapter_factory=factory).run_once(state, now)
        job = result.state.company_cache["acme"].jobs[0]

        assert job.first_seen_at == previous.jobs[0].first_seen_at
        assert job.last_changed_at is None

    def test_delta(self, state, now):
        factory = _factory({"acme": FetchResult(), "lever:plaid": FetchResult()})
        result = RefreshPipeline(adapter_factory=factory).run_once(state, now)

        assert set(result.delta()) == {COMPANY_CACHE_KEY, TRACKED_JOBS_KEY}

    def test_no_profile(self, now):
        factory = Mock()
        result = RefreshPipeline(adapter_factory=factory).run_once(WatchState(), now)

        factory.assert_not_called()
        assert result.company_stats == []
        assert result.state.company_cache == {}

    def test_overlapping_run_is_skipped(self, state, now):
        factory = Mock()
        pipeline = RefreshPipeline(adapter_factory=factory)
        pipeline._lock.acquire()
        try:
            result = pipeline.run_once(state, now)
        finally:
            pipeline._lock.release()

        assert result.skipped
        assert result.state is None
        assert result.delta() == {}
        factory.assert_not_called()

    def test_lock_released_after_run(self, state, now):
        factory = _factory({"acme": FetchResult(), "lever:plaid": FetchResult()})
        pipeline = RefreshPipeline(adapter_factory=factory)

        pipeline.run_once(state, now)

        assert not pipeline._lock.locked()


class TestRefreshCompany:
    """Tests for RefreshPipeline.refresh_company()."""

    def test_stats(self, greenhouse_company, make_posting, now):
        factory = _factory({"acme": FetchResult(postings=[make_posting(id="1"), make_posting(id="2")])})
        refresh = RefreshPipeline(adapter_factory=factory).refresh_company(greenhouse_company, None, [], now)

        assert refresh.stats.fetched_count == 2
        assert refresh.stats.new_count == 2
        assert refresh.entry.company_name == "Acme"
        assert refresh.tracked_jobs == []
