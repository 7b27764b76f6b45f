"""Library catalog: Goodreads CSV import, conflict matching and metadata lookup."""

from .goodreads_csv import GoodreadsCsvParser, map_shelf_to_state, parse_goodreads_csv
from .goodreads_link import build_goodreads_search_url
from .import_merge import apply_decisions, detect_conflicts, find_undecided_conflicts, normalize_for_match
from .metadata import MetadataSearchClient
from .models import (
    READING_STATE_LABELS,
    CatalogImportRow,
    CsvParseFailure,
    CsvParseResult,
    CsvParseSuccess,
    ImportDecision,
    ImportPreviewRow,
    LibraryEntry,
    MergeResult,
    MetadataResult,
    ReadingState,
)

__all__ = [
    "READING_STATE_LABELS",
    "CatalogImportRow",
    "CsvParseFailure",
    "CsvParseResult",
    "CsvParseSuccess",
    "GoodreadsCsvParser",
    "ImportDecision",
    "ImportPreviewRow",
    "LibraryEntry",
    "MergeResult",
    "MetadataResult",
    "MetadataSearchClient",
    "ReadingState",
    "apply_decisions",
    "build_goodreads_search_url",
    "detect_conflicts",
    "find_undecided_conflicts",
    "map_shelf_to_state",
    "normalize_for_match",
    "parse_goodreads_csv",
]
