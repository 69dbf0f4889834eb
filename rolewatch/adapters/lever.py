"""Lever job board adapter."""

from rolewatch.domain.models import RawPosting, TrackedCompany
from rolewatch.logging import get_logger

from .base import BaseAdapter, FetchResult
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class LeverAdapter(BaseAdapter):
    """Adapter for public Lever postings.

    API Details:
        Endpoint: https://api.lever.co/v0/postings/{slug}?mode=json
        Method: GET
        Authentication: None (public)
        Response: JSON array of posting objects (not wrapped in object)
    """

    ADAPTER_NAME = "lever"
    API_BASE_URL = "https://api.lever.co/v0/postings"

    def fetch_postings(self, company: TrackedCompany) -> FetchResult:
        slug = self._require_slug(company)
        url = f"{self.API_BASE_URL}/{slug}"

        logger.info(
            "Fetching postings from Lever",
            extra={"event": "adapter.fetch.started", "adapter": self.ADAPTER_NAME, "company_id": company.id, "url": url},
        )

        response = self._make_request(url, params={"mode": "json"})

        # Lever returns a bare array; accept a wrapped object as well
        if isinstance(response, list):
            jobs_data = response
        elif isinstance(response, dict):
            jobs_data = response.get("postings") or []
        else:
            raise AdapterResponseError(
                f"Expected JSON array or object, got {type(response).__name__}"
            )

        postings = [
            self._transform_job(job)
            for job in self._truncate(jobs_data, company.id)
            if isinstance(job, dict)
        ]

        logger.info(
            "Fetched postings from Lever",
            extra={"event": "adapter.fetch.completed", "adapter": self.ADAPTER_NAME, "company_id": company.id, "count": len(postings)},
        )
        # Lever does not report a company name
        return FetchResult(company_name=None, postings=postings)

    @staticmethod
    def _transform_job(job: dict) -> RawPosting:
        """Map a Lever posting onto RawPosting.

        Field mapping:
            id -> id
            text -> title
            hostedUrl -> url (also the local id)
            categories.location -> location
            createdAt (epoch ms) -> posted_at
            updatedAt (epoch ms) -> provider_updated_at
        """
        categories = job.get("categories")
        location = categories.get("location") if isinstance(categories, dict) else None
        return RawPosting(
            id=job.get("id"),
            local_id=job.get("hostedUrl"),
            title=job.get("text"),
            url=job.get("hostedUrl"),
            location=location,
            posted_at=job.get("createdAt"),
            provider_updated_at=job.get("updatedAt"),
        )
