"""Unit tests for domain models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from rolewatch.domain.models import (
    CompanyCacheEntry,
    IngestedJob,
    Provider,
    RawPosting,
    TrackedCompany,
    TrackedJob,
    TrackedJobStatus,
    UserProfile,
)


class TestRawPosting:
    """Tests for RawPosting defaults and coercion."""

    def test_defaults(self):
        posting = RawPosting()

        assert posting.id is None
        assert posting.title == ""
        assert posting.url == ""
        assert posting.location == ""
        assert posting.posted_at is None

    def test_numeric_id_coerced(self):
        assert RawPosting(id=4012345).id == "4012345"

    def test_blank_id_is_absent(self):
        assert RawPosting(id="  ").id is None

    def test_text_fields_stripped_and_none_defaulted(self):
        posting = RawPosting(title="  SWE Intern ", location=None)

        assert posting.title == "SWE Intern"
        assert posting.location == ""

    def test_dates_parsed_to_utc(self):
        posting = RawPosting(posted_at="2025-11-04T07:00:00-05:00", provider_updated_at=1730721600)

        assert posting.posted_at == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
        assert posting.provider_updated_at == datetime(2024, 11, 4, 12, 0, tzinfo=timezone.utc)

    def test_unparseable_date_becomes_none(self):
        assert RawPosting(posted_at="soon").posted_at is None


class TestIngestedJob:
    """Tests for IngestedJob."""

    def test_naive_timestamps_become_utc(self):
        job = IngestedJob(
            id="1",
            first_seen_at=datetime(2025, 11, 4, 12, 0),
            last_fetched_at=datetime(2025, 11, 4, 12, 0),
            content_hash="1",
        )
        assert job.first_seen_at.tzinfo == timezone.utc

    def test_json_round_trip(self, make_job):
        job = make_job(last_changed_at=datetime(2025, 11, 3, tzinfo=timezone.utc))
        assert IngestedJob.model_validate(job.model_dump(mode="json")) == job


class TestCompanyCacheEntry:
    """Tests for CompanyCacheEntry."""

    def test_find_job(self, make_job, now):
        entry = CompanyCacheEntry(
            company_id="acme", company_name="Acme", jobs=[make_job(id="1"), make_job(id="2")], fetched_at=now
        )

        assert entry.find_job("2").id == "2"
        assert entry.find_job("3") is None

    def test_error_entry(self, now):
        entry = CompanyCacheEntry(company_id="acme", company_name="Acme", fetched_at=now, error="HTTP 404")
        assert entry.jobs == []
        assert entry.error == "HTTP 404"


class TestTrackedCompany:
    """Tests for TrackedCompany."""

    def test_provider_default_is_plain_string(self):
        company = TrackedCompany(id="acme", name="Acme", board_slug="acme")

        assert company.provider == "greenhouse"
        assert company.model_dump(mode="json")["provider"] == "greenhouse"

    def test_slug_normalized(self):
        assert TrackedCompany(id="acme", name="Acme", board_slug="  ACME ").board_slug == "acme"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            TrackedCompany(id="acme", name="   ")

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError):
            TrackedCompany(id="acme", name="Acme", provider="workday")

    def test_is_fetchable(self, greenhouse_company, lever_company, custom_company):
        assert greenhouse_company.is_fetchable
        assert lever_company.is_fetchable
        assert not custom_company.is_fetchable
        assert not TrackedCompany(id="x", name="X", provider=Provider.GREENHOUSE).is_fetchable


class TestUserProfile:
    """Tests for UserProfile."""

    def test_find_company(self, greenhouse_company):
        profile = UserProfile(role_queries=["SWE Intern"], companies=[greenhouse_company])

        assert profile.find_company("acme") is greenhouse_company
        assert profile.find_company("globex") is None
        assert profile.created_at.tzinfo is not None


class TestTrackedJob:
    """Tests for TrackedJob."""

    def test_status_default(self, now):
        job = TrackedJob(job_id="1", company_id="acme", last_checked_at=now, last_seen_at=now)

        assert job.status == TrackedJobStatus.OPEN
        assert job.model_dump()["status"] == "open"

    def test_invalid_status(self, now):
        with pytest.raises(ValidationError):
            TrackedJob(job_id="1", company_id="acme", status="archived", last_checked_at=now, last_seen_at=now)
