"""Shared fixtures for the rolewatch test suite."""

from datetime import datetime, timedelta, timezone

import pytest

from rolewatch.domain.models import IngestedJob, RawPosting, TrackedCompany
from rolewatch.persistence.database import close_database, init_database
from rolewatch.utils.hashing import compute_content_hash

NOW = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed refresh timestamp."""
    return NOW


@pytest.fixture
def make_posting():
    """Factory for RawPostings with sensible defaults."""

    def _make(id="1001", title="Software Engineer Intern", location="Remote", url=None, **kwargs):
        return RawPosting(
            id=id,
            title=title,
            location=location,
            url=url if url is not None else f"https://boards.greenhouse.io/acme/jobs/{id}",
            **kwargs,
        )

    return _make


@pytest.fixture
def make_job():
    """Factory for IngestedJobs; posted ``days_old`` days before NOW."""

    def _make(id="1001", title="Software Engineer Intern", location="Remote", days_old=1, url=None, **kwargs):
        url = url if url is not None else f"https://boards.greenhouse.io/acme/jobs/{id}"
        fields = {
            "id": id,
            "title": title,
            "url": url,
            "location": location,
            "posted_at": NOW - timedelta(days=days_old) if days_old is not None else None,
            "first_seen_at": NOW - timedelta(days=10),
            "last_fetched_at": NOW,
            "content_hash": compute_content_hash(title, location, url),
        }
        fields.update(kwargs)
        return IngestedJob(**fields)

    return _make


@pytest.fixture
def greenhouse_company():
    return TrackedCompany(id="acme", name="Acme", provider="greenhouse", board_slug="acme", domain="acme.com")


@pytest.fixture
def lever_company():
    return TrackedCompany(id="lever:plaid", name="Plaid", provider="lever", board_slug="plaid")


@pytest.fixture
def custom_company():
    return TrackedCompany(
        id="custom:openai.com",
        name="OpenAI",
        provider="custom",
        domain="openai.com",
        careers_url="https://openai.com/careers/",
    )


@pytest.fixture
def temp_database():
    """In-memory database for the duration of one test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()
