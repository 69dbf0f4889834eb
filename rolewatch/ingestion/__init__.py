"""Job ingestion: merge fetched postings with previously stored history."""

from .service import IngestionResult, JobIngestor, ingest_jobs

__all__ = ["ingest_jobs", "JobIngestor", "IngestionResult"]
