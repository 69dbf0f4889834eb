"""Status tracking for jobs the user pinned."""

from .reconciler import ReconcileResult, reconcile_tracked_jobs

__all__ = ["reconcile_tracked_jobs", "ReconcileResult"]
