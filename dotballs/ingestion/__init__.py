"""
Ingestion pipeline for processing matches from URLs.

Provides the scheduled pipeline that:
1. Skips matches already recorded today (IST)
2. Fetches both innings feeds of a match
3. Aggregates dot balls and trees per team and player
4. Validates the aggregate
5. Stores it in the database
"""
from ..results import IngestionResult, StageResult
from .pipeline import ingest_from_urls, process_match_url, run_scheduled
from .url_processor import load_urls_from_file, normalize_match_url, validate_url

__all__ = [
    "ingest_from_urls",
    "process_match_url",
    "run_scheduled",
    "IngestionResult",
    "StageResult",
    "load_urls_from_file",
    "normalize_match_url",
    "validate_url",
]
