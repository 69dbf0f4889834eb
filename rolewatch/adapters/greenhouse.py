"""Greenhouse job board adapter."""

from typing import Optional

from rolewatch.domain.models import RawPosting, TrackedCompany
from rolewatch.logging import get_logger

from .base import BaseAdapter, FetchResult
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class GreenhouseAdapter(BaseAdapter):
    """Adapter for public Greenhouse job boards.

    API Details:
        Endpoint: https://boards-api.greenhouse.io/v1/boards/{slug}/jobs
        Method: GET
        Authentication: None (public)
        Response: JSON object with a 'jobs' array
    """

    ADAPTER_NAME = "greenhouse"
    API_BASE_URL = "https://boards-api.greenhouse.io/v1/boards"

    def fetch_postings(self, company: TrackedCompany) -> FetchResult:
        slug = self._require_slug(company)
        url = f"{self.API_BASE_URL}/{slug}/jobs"

        logger.info(
            "Fetching postings from Greenhouse",
            extra={"event": "adapter.fetch.started", "adapter": self.ADAPTER_NAME, "company_id": company.id, "url": url},
        )

        response = self._make_request(url)
        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(response).__name__}"
            )

        jobs_data = response.get("jobs") or []
        if not isinstance(jobs_data, list):
            raise AdapterResponseError(
                f"Expected 'jobs' field to be array, got {type(jobs_data).__name__}"
            )

        postings = [
            self._transform_job(job)
            for job in self._truncate(jobs_data, company.id)
            if isinstance(job, dict)
        ]

        logger.info(
            "Fetched postings from Greenhouse",
            extra={"event": "adapter.fetch.completed", "adapter": self.ADAPTER_NAME, "company_id": company.id, "count": len(postings)},
        )
        return FetchResult(company_name=self._company_name(response), postings=postings)

    @staticmethod
    def _company_name(response: dict) -> Optional[str]:
        company = response.get("company")
        if isinstance(company, dict) and company.get("name"):
            return str(company["name"])
        return None

    @staticmethod
    def _transform_job(job: dict) -> RawPosting:
        """Map a Greenhouse job object onto RawPosting.

        Field mapping:
            id -> id
            title -> title
            absolute_url -> url (also the local id)
            location.name -> location
            first_published, else created_at -> posted_at
            updated_at -> provider_updated_at
        """
        location = job.get("location")
        return RawPosting(
            id=job.get("id"),
            local_id=job.get("absolute_url"),
            title=job.get("title"),
            url=job.get("absolute_url"),
            location=location.get("name") if isinstance(location, dict) else location,
            posted_at=job.get("first_published") or job.get("created_at"),
            provider_updated_at=job.get("updated_at"),
        )
