"""Unit tests for the watch controller."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from rolewatch.adapters import FetchResult
from rolewatch.config.models import LimitsConfig, ProfileSeed
from rolewatch.domain.models import CompanyCacheEntry, UserProfile
from rolewatch.persistence.store import COMPANY_CACHE_KEY, PROFILE_KEY, TRACKED_JOBS_KEY, StateStore
from rolewatch.pipeline import RefreshPipeline
from rolewatch.state import ActionRejectedError
from rolewatch.state.controller import WatchController


def _pipeline(results):
    def _build(company, advanced_config):
        adapter = Mock()
        outcome = results.get(company.id, FetchResult())
        if isinstance(outcome, Exception):
            adapter.fetch_postings.side_effect = outcome
        else:
            adapter.fetch_postings.return_value = outcome
        return adapter

    return RefreshPipeline(adapter_factory=_build)


@pytest.fixture
def store(temp_database):
    return StateStore()


@pytest.fixture
def seeded_store(store, greenhouse_company):
    store.save(
        {PROFILE_KEY: UserProfile(role_queries=["Software Engineer Intern"], companies=[greenhouse_company])}
    )
    return store


class TestLoad:
    """Tests for WatchController.load()."""

    def test_empty_store(self, store):
        controller = WatchController(store)
        state = controller.load()

        assert state.profile is None
        assert controller.role_queries == []

    def test_seed_used_when_no_profile(self, store, lever_company):
        seed = ProfileSeed(role_queries=["New Grad"], companies=[lever_company])
        controller = WatchController(store, seed=seed)

        controller.load()

        assert controller.role_queries == ["New Grad"]
        assert store.load([PROFILE_KEY])[PROFILE_KEY]["role_queries"] == ["New Grad"]

    def test_stored_profile_wins_over_seed(self, seeded_store):
        controller = WatchController(seeded_store, seed=ProfileSeed(role_queries=["New Grad"]))
        controller.load()

        assert controller.role_queries == ["Software Engineer Intern"]

    def test_legacy_profile_migrated_and_saved(self, store):
        store.save({PROFILE_KEY: {"roles": ["swe"], "companies": []}})

        controller = WatchController(store)
        controller.load()

        assert controller.role_queries == ["Software Engineer"]
        stored = store.load([PROFILE_KEY])[PROFILE_KEY]
        assert stored["role_queries"] == ["Software Engineer"]
        assert "roles" not in stored


class TestActions:
    """Tests for controller actions and their persistence."""

    def test_set_role_queries_persists(self, seeded_store):
        controller = WatchController(seeded_store)
        controller.load()

        controller.set_role_queries(["ML Intern"])

        assert controller.role_queries == ["ML Intern"]
        assert seeded_store.load([PROFILE_KEY])[PROFILE_KEY]["role_queries"] == ["ML Intern"]

    def test_rejected_action_leaves_state_and_store(self, seeded_store):
        controller = WatchController(seeded_store, limits=LimitsConfig(max_queries=1))
        controller.load()

        with pytest.raises(ActionRejectedError) as exc_info:
            controller.set_role_queries(["A", "B"])

        assert exc_info.value.reason == "limit_reached"
        assert controller.role_queries == ["Software Engineer Intern"]
        assert seeded_store.load([PROFILE_KEY])[PROFILE_KEY]["role_queries"] == ["Software Engineer Intern"]

    def test_noop_does_not_save(self, now, make_job, greenhouse_company):
        store = Mock()
        store.load.return_value = {}
        controller = WatchController(store)
        controller.load()
        controller._state = controller.state.model_copy(
            update={
                "profile": UserProfile(companies=[greenhouse_company]),
                "company_cache": {
                    "acme": CompanyCacheEntry(company_id="acme", company_name="Acme", jobs=[make_job(id="1")], fetched_at=now)
                },
            }
        )

        controller.add_tracked_job("acme", "1", now=now)
        store.save.reset_mock()
        result = controller.add_tracked_job("acme", "1", now=now)

        assert not result.changed
        store.save.assert_not_called()

    def test_add_and_remove_company(self, seeded_store):
        controller = WatchController(seeded_store)
        controller.load()

        controller.add_tracked_company("stripe")
        assert [c.id for c in controller.companies] == ["acme", "stripe"]

        controller.remove_tracked_company("stripe")
        stored = seeded_store.load([PROFILE_KEY])[PROFILE_KEY]
        assert [c["id"] for c in stored["companies"]] == ["acme"]

    def test_add_company_verified(self, seeded_store, make_posting):
        pipeline = _pipeline({"globex": FetchResult(company_name="Globex Corporation", postings=[make_posting(id="7")])})
        controller = WatchController(seeded_store, pipeline=pipeline)
        controller.load()

        controller.add_tracked_company("globex", verify=True)

        company = controller.companies[-1]
        assert company.id == "globex"
        assert company.name == "Globex Corporation"
        assert [j.id for j in controller.company_cache["globex"].jobs] == ["7"]

        stored = seeded_store.load()
        assert stored[PROFILE_KEY]["companies"][-1]["name"] == "Globex Corporation"
        assert "globex" in stored[COMPANY_CACHE_KEY]

    def test_add_company_verify_failure(self, seeded_store):
        from rolewatch.adapters import AdapterHTTPError

        pipeline = _pipeline({"globex": AdapterHTTPError("HTTP 404: Not Found", status_code=404, url="x")})
        controller = WatchController(seeded_store, pipeline=pipeline)
        controller.load()

        with pytest.raises(ActionRejectedError) as exc_info:
            controller.add_tracked_company("globex", verify=True)

        assert exc_info.value.reason == "fetch_failed"
        assert [c.id for c in controller.companies] == ["acme"]
        assert COMPANY_CACHE_KEY not in seeded_store.load()

    def test_add_link_only_company_skips_fetch(self, seeded_store):
        pipeline = Mock()
        controller = WatchController(seeded_store, pipeline=pipeline)
        controller.load()

        controller.add_tracked_company("Google", verify=True)

        pipeline.refresh_company.assert_not_called()
        assert controller.companies[-1].id == "custom:google.com"


class TestRefresh:
    """Tests for WatchController.refresh() and derived views."""

    def test_refresh_saves_and_counts(self, seeded_store, make_posting, now):
        postings = [
            make_posting(id="1", posted_at=now - timedelta(days=1)),
            make_posting(id="2", title="Senior Software Engineer", posted_at=now),
            make_posting(id="3", posted_at=now - timedelta(days=30)),
        ]
        controller = WatchController(seeded_store, pipeline=_pipeline({"acme": FetchResult(postings=postings)}))
        controller.load()

        result = controller.refresh(now)

        assert not result.had_errors
        assert [m.job_id for m in controller.relevant_matches("acme")] == ["1", "3"]
        assert controller.notification_count(now).total == 1
        assert controller.match_summary().total == 2

        stored = seeded_store.load()
        assert len(stored[COMPANY_CACHE_KEY]["acme"]["jobs"]) == 3
        assert stored[TRACKED_JOBS_KEY] == []

    def test_tracked_job_lifecycle(self, seeded_store, make_posting, now):
        results = {"acme": FetchResult(postings=[make_posting(id="1")])}
        controller = WatchController(seeded_store, pipeline=_pipeline(results))
        controller.load()
        controller.refresh(now)
        controller.add_tracked_job("acme", "1", now=now)

        results["acme"] = FetchResult(postings=[])
        controller.refresh(now + timedelta(hours=1))

        assert controller.tracked_jobs[0].status == "closed"
        assert seeded_store.load()[TRACKED_JOBS_KEY][0]["status"] == "closed"

    def test_actions_during_refresh_are_kept(self, seeded_store, make_posting, now):
        results = {"acme": FetchResult(postings=[make_posting(id="1")])}
        controller = WatchController(seeded_store, pipeline=_pipeline(results))
        controller.load()

        def fetch_while_editing(company):
            controller.set_role_queries(["Data Science Intern"])
            controller.remove_tracked_company("acme")
            return FetchResult(postings=[make_posting(id="2")])

        adapter = Mock()
        adapter.fetch_postings.side_effect = fetch_while_editing
        controller.pipeline.adapter_factory = Mock(return_value=adapter)

        controller.refresh(now)

        assert controller.role_queries == ["Data Science Intern"]
        assert controller.companies == []
        assert controller.company_cache == {}
        stored = seeded_store.load()
        assert stored[PROFILE_KEY]["role_queries"] == ["Data Science Intern"]
        assert stored[COMPANY_CACHE_KEY] == {}

    def test_skipped_refresh_saves_nothing(self, now):
        store = Mock()
        store.load.return_value = {}
        pipeline = RefreshPipeline(adapter_factory=Mock())
        controller = WatchController(store, pipeline=pipeline)
        controller.load()

        pipeline._lock.acquire()
        try:
            result = controller.refresh(now)
        finally:
            pipeline._lock.release()

        assert result.skipped
        store.save.assert_not_called()

    def test_relevant_matches_unknown_company(self, store):
        controller = WatchController(store)
        assert controller.relevant_matches("nobody") == []
