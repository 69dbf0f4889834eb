"""Unit tests for the persistence layer."""

import pytest
from sqlalchemy import inspect

from rolewatch.domain.models import TrackedJob
from rolewatch.persistence import (
    COMPANY_CACHE_KEY,
    PROFILE_KEY,
    TRACKED_JOBS_KEY,
    DatabaseConnectionError,
    DataIntegrityError,
    StateEntryRepository,
    StateStore,
    close_database,
    get_engine,
    get_session,
    init_database,
    to_document,
)
from rolewatch.persistence.database import _redact_url
from rolewatch.persistence.schema import StateEntryModel


class TestDatabase:
    """Tests for database initialization and sessions."""

    def test_creates_schema(self, temp_database):
        assert "state_entries" in inspect(get_engine()).get_table_names()

    def test_file_database_creates_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "state.db"
        try:
            init_database(f"sqlite:///{db_path}")
            assert db_path.parent.exists()
        finally:
            close_database()

    def test_rejects_empty_url(self):
        with pytest.raises(DatabaseConnectionError):
            init_database("")

    def test_session_before_init(self):
        close_database()
        with pytest.raises(DatabaseConnectionError, match="not initialized"):
            with get_session():
                pass

    def test_session_rolls_back_on_error(self, temp_database):
        with pytest.raises(RuntimeError):
            with get_session() as session:
                StateEntryRepository(session).upsert("k", "1")
                raise RuntimeError("boom")

        with get_session() as session:
            assert session.get(StateEntryModel, "k") is None

    def test_redact_url(self):
        assert _redact_url("postgresql://user:secret@db:5432/app") == "postgresql://user:***@db:5432/app"
        assert _redact_url("sqlite:///./data/x.db") == "sqlite:///./data/x.db"


class TestStateEntryRepository:
    """Tests for the key/value repository."""

    def test_upsert_insert_and_replace(self, temp_database):
        with get_session() as session:
            repo = StateEntryRepository(session)
            repo.upsert("k", '"first"')
            repo.upsert("k", '"second"')

        with get_session() as session:
            assert StateEntryRepository(session).get_many(["k"]) == {"k": '"second"'}

    def test_get_many_skips_missing(self, temp_database):
        with get_session() as session:
            StateEntryRepository(session).upsert("a", "1")

        with get_session() as session:
            repo = StateEntryRepository(session)
            assert repo.get_many(["a", "b"]) == {"a": "1"}
            assert repo.get_many([]) == {}

    def test_updated_at_is_iso(self, temp_database, now):
        with get_session() as session:
            StateEntryRepository(session).upsert("a", "1", updated_at=now)

        with get_session() as session:
            assert session.get(StateEntryModel, "a").updated_at == "2025-11-04T12:00:00Z"


class TestStateStore:
    """Tests for StateStore load/save."""

    def test_empty_store(self, temp_database):
        assert StateStore().load() == {}

    def test_save_and_load(self, temp_database):
        store = StateStore()
        store.save({PROFILE_KEY: {"role_queries": ["SWE Intern"]}, TRACKED_JOBS_KEY: []})

        assert store.load() == {PROFILE_KEY: {"role_queries": ["SWE Intern"]}, TRACKED_JOBS_KEY: []}

    def test_partial_save_leaves_other_keys(self, temp_database):
        store = StateStore()
        store.save({PROFILE_KEY: {"role_queries": ["A"]}, COMPANY_CACHE_KEY: {}})
        store.save({COMPANY_CACHE_KEY: {"acme": {"company_id": "acme"}}})

        loaded = store.load()
        assert loaded[PROFILE_KEY] == {"role_queries": ["A"]}
        assert loaded[COMPANY_CACHE_KEY] == {"acme": {"company_id": "acme"}}

    def test_load_subset(self, temp_database):
        store = StateStore()
        store.save({PROFILE_KEY: {}, TRACKED_JOBS_KEY: []})

        assert store.load([TRACKED_JOBS_KEY]) == {TRACKED_JOBS_KEY: []}

    def test_empty_save_is_noop(self, temp_database):
        store = StateStore()
        store.save({})
        assert store.load() == {}

    def test_models_are_serialized(self, temp_database, now):
        tracked = TrackedJob(job_id="1", company_id="acme", last_checked_at=now, last_seen_at=now)
        store = StateStore()
        store.save({TRACKED_JOBS_KEY: [tracked]})

        stored = store.load([TRACKED_JOBS_KEY])[TRACKED_JOBS_KEY][0]
        assert stored["status"] == "open"
        assert stored["last_seen_at"].startswith("2025-11-04T12:00:00")
        assert TrackedJob.model_validate(stored) == tracked

    def test_corrupt_value(self, temp_database):
        with get_session() as session:
            StateEntryRepository(session).upsert(PROFILE_KEY, "{not json")

        with pytest.raises(DataIntegrityError, match="not valid JSON"):
            StateStore().load()

    def test_to_document_nested(self, now):
        tracked = TrackedJob(job_id="1", company_id="acme", last_checked_at=now, last_seen_at=now)
        document = to_document({"jobs": (tracked,), "count": 1})

        assert document["count"] == 1
        assert document["jobs"][0]["job_id"] == "1"
