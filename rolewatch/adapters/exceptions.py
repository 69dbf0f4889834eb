"""Exceptions raised by job board adapters.

Every adapter failure is a fetch failure for one company: the refresh loop
catches ``AdapterError`` and records the message on that company's cache
entry instead of aborting the run.
"""


class AdapterError(Exception):
    """Base exception for all adapter errors."""

    pass


class AdapterHTTPError(AdapterError):
    """HTTP request failed, either with a 4xx/5xx status or at the connection level.

    A ``status_code`` of 0 means no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AdapterTimeoutError(AdapterError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Response could not be parsed (invalid JSON, unexpected shape)."""

    pass


class AdapterConfigurationError(AdapterError):
    """Adapter cannot be built for a company.

    Raised for unsupported providers, link-only companies without a board
    slug, or invalid timeout/user-agent settings.
    """

    pass
