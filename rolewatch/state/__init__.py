"""Watch state: explicit state object and pure actions.

The controller that owns state and store lives in ``rolewatch.state.controller``
(it depends on the refresh pipeline, which itself depends on this package).
"""

from .exceptions import ActionRejectedError
from .models import ActionResult, WatchState
from .profile import migrate_profile
from .actions import (
    add_tracked_company,
    add_tracked_job,
    remove_tracked_company,
    remove_tracked_job,
    resolve_company,
    set_role_queries,
)

__all__ = [
    "ActionRejectedError",
    "ActionResult",
    "WatchState",
    "migrate_profile",
    "add_tracked_company",
    "add_tracked_job",
    "remove_tracked_company",
    "remove_tracked_job",
    "resolve_company",
    "set_role_queries",
]
