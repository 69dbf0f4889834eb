"""Exceptions for user actions on the watch state."""

from typing import Optional


class ActionRejectedError(Exception):
    """A user action failed validation; state and store are unchanged.

    Raised for too many queries/companies/tracked jobs, an empty query set,
    an unparseable board identifier, or an unknown company or job.

    Attributes:
        action: Name of the rejected action
        reason: Short machine-readable reason (e.g. "limit_reached")
    """

    def __init__(self, message: str, action: str = "", reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.action = action
        self.reason = reason
