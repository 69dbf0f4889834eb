"""Refresh pipeline over all tracked companies."""

from .models import CompanyRefresh, CompanyRunStats, RefreshRunResult
from .runner import RefreshPipeline

__all__ = ["RefreshPipeline", "RefreshRunResult", "CompanyRunStats", "CompanyRefresh"]
