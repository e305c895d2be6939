"""Audio upload ingestion."""

from .ingest import AudioIngestor, IngestLimits

__all__ = ["AudioIngestor", "IngestLimits"]
