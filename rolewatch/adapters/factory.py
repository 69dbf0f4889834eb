"""Factory function for instantiating board adapters."""

from typing import Optional

import requests

from rolewatch.config.models import AdvancedConfig
from rolewatch.domain.models import Provider, TrackedCompany
from rolewatch.logging import get_logger

from .base import BaseAdapter
from .exceptions import AdapterConfigurationError
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter

logger = get_logger(__name__, component="adapter")

ADAPTER_MAP = {
    Provider.GREENHOUSE.value: GreenhouseAdapter,
    Provider.LEVER.value: LeverAdapter,
}


def get_adapter(
    company: TrackedCompany,
    advanced_config: Optional[AdvancedConfig] = None,
    session: Optional[requests.Session] = None,
) -> BaseAdapter:
    """Instantiate the adapter for a company's provider.

    Args:
        company: Tracked company (provider decides the adapter)
        advanced_config: Timeout, user agent and truncation settings
        session: Optional shared requests session

    Returns:
        Adapter instance ready to fetch postings

    Raises:
        AdapterConfigurationError: If the provider has no adapter (link-only
            companies) or the configuration is invalid
    """
    advanced_config = advanced_config or AdvancedConfig()
    provider = str(getattr(company.provider, "value", company.provider)).lower()
    adapter_class = ADAPTER_MAP.get(provider)

    if not adapter_class:
        supported = ", ".join(sorted(ADAPTER_MAP))
        raise AdapterConfigurationError(
            f"No adapter for provider '{provider}'. Supported providers: {supported}"
        )

    logger.debug(
        "Creating adapter instance",
        extra={"provider": provider, "company_id": company.id, "adapter_class": adapter_class.__name__},
    )

    try:
        return adapter_class(
            timeout=advanced_config.http_request_timeout,
            user_agent=advanced_config.user_agent,
            max_jobs=advanced_config.max_jobs_per_company,
            session=session,
        )
    except AdapterConfigurationError:
        raise
    except Exception as e:
        raise AdapterConfigurationError(f"Failed to create {provider} adapter: {e}") from e
