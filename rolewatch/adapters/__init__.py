"""Job board adapters: the fetch side of a refresh.

Use the factory to build an adapter for a tracked company:
    from rolewatch.adapters import get_adapter
    adapter = get_adapter(company, advanced_config)
    result = adapter.fetch_postings(company)

Board identifier parsing and the curated directory live in ``boards`` and
``directory``.
"""

from .base import BaseAdapter, FetchResult
from .boards import slug_from_board_input, titleize_slug
from .directory import (
    COMPANY_DIRECTORY,
    ROLE_TEMPLATES,
    find_directory_company,
    suggest_companies,
    suggest_role_queries,
)
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import get_adapter
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter

__all__ = [
    "BaseAdapter",
    "FetchResult",
    "get_adapter",
    "GreenhouseAdapter",
    "LeverAdapter",
    "slug_from_board_input",
    "titleize_slug",
    "COMPANY_DIRECTORY",
    "ROLE_TEMPLATES",
    "find_directory_company",
    "suggest_companies",
    "suggest_role_queries",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
