"""Base adapter class with shared HTTP handling for all job board adapters."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from rolewatch.domain.models import RawPosting, TrackedCompany
from rolewatch.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")


@dataclass
class FetchResult:
    """Postings fetched for one company.

    Attributes:
        company_name: Display name reported by the provider, if any
        postings: Canonical postings in provider order
    """

    company_name: Optional[str] = None
    postings: List[RawPosting] = field(default_factory=list)


class BaseAdapter(ABC):
    """Base class for all job board adapters.

    Subclasses implement ``fetch_postings``; HTTP, error mapping and
    truncation live here.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        max_jobs: Maximum postings kept per company (0 = unlimited)
    """

    ADAPTER_NAME = "base"

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "rolewatch/0.1",
        max_jobs: int = 0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize adapter with configuration.

        Args:
            timeout: HTTP request timeout in seconds (5-300)
            user_agent: User-Agent header for requests
            max_jobs: Maximum postings per company (0 = unlimited)
            session: Optional pre-built session, mainly for tests

        Raises:
            AdapterConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_jobs = max_jobs

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @abstractmethod
    def fetch_postings(self, company: TrackedCompany) -> FetchResult:
        """Fetch the current postings of one company's board.

        Args:
            company: Tracked company with a board slug

        Returns:
            FetchResult with the provider's company name and postings

        Raises:
            AdapterError: On any failure (HTTP, timeout, malformed response)
        """
        pass

    def _require_slug(self, company: TrackedCompany) -> str:
        if not company.board_slug:
            raise AdapterConfigurationError(
                f"Company '{company.id}' has no board slug to fetch"
            )
        return company.board_slug

    def _make_request(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """GET a JSON document.

        Args:
            url: URL to request
            params: Query parameters

        Returns:
            Parsed JSON response (object or array)

        Raises:
            AdapterHTTPError: On 4xx/5xx status or connection failure
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On invalid JSON
        """
        try:
            logger.debug(
                f"HTTP GET request to {url}",
                extra={"event": "adapter.fetch.request", "url": url, "timeout": self.timeout},
            )

            response = self._session.get(url, params=params, timeout=self.timeout)

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500
                logger.log(
                    logging.WARNING if is_retryable else logging.ERROR,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "adapter.fetch.retryable_error" if is_retryable else "adapter.fetch.error",
                        "status_code": response.status_code,
                        "url": url,
                    },
                )
                raise AdapterHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                return response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={"event": "adapter.fetch.error", "error_type": "JSONDecodeError", "url": url},
                )
                raise AdapterResponseError(
                    f"Failed to parse JSON response from {url}: {e}"
                ) from e

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "adapter.fetch.retryable_error", "error_type": "Timeout", "url": url},
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "adapter.fetch.error", "error_type": type(e).__name__, "url": url},
            )
            raise AdapterHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

    def _truncate(self, items: list, company_id: str) -> list:
        """Truncate provider items to max_jobs if configured."""
        if self.max_jobs > 0 and len(items) > self.max_jobs:
            logger.warning(
                "Truncating postings to max_jobs limit",
                extra={
                    "event": "adapter.fetch.truncated",
                    "adapter": self.ADAPTER_NAME,
                    "company_id": company_id,
                    "total": len(items),
                    "max": self.max_jobs,
                },
            )
            return items[: self.max_jobs]
        return items
