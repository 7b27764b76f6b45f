import logging

import requests

from ..exceptions import MetadataSearchError
from .models import MetadataResult

# Initialize logger for this module
logger = logging.getLogger(__name__)


class MetadataSearchClient:
    """Client for looking up book metadata on Google Books and Open Library."""

    GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"
    OPEN_LIBRARY_URL = "https://openlibrary.org/search.json"
    OPEN_LIBRARY_COVER_URL = "https://covers.openlibrary.org/b/id/{cover_id}-M.jpg"

    # HTTP status codes
    HTTP_OK = 200

    DEFAULT_TIMEOUT = 5.0
    DEFAULT_MAX_RESULTS = 10

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_results: int = DEFAULT_MAX_RESULTS):
        """Initialize the metadata search client.

        Args:
            timeout: Seconds to wait for each provider before giving up
            max_results: Maximum number of results requested from a provider
        """
        logger.debug("Initializing MetadataSearchClient (timeout=%s, max_results=%d).", timeout, max_results)
        self.timeout = timeout
        self.max_results = max_results

    def search(self, query: str) -> list[MetadataResult]:
        """Search for book metadata.

        Google Books is tried first. Open Library is used when Google fails
        or returns no usable results. When both fail an empty list is
        returned rather than an error.

        Args:
            query: Free-text search, usually a title and author

        Returns:
            List of MetadataResult objects, possibly empty
        """
        trimmed = query.strip()
        if not trimmed:
            logger.debug("Empty metadata query; skipping search.")
            return []

        try:
            results = self.search_google_books(trimmed)
            if results:
                return results
            logger.info("Google Books returned no results for '%s'; trying Open Library.", trimmed)
        except MetadataSearchError:
            logger.warning("Google Books search failed for '%s'; trying Open Library.", trimmed, exc_info=True)

        try:
            return self.search_open_library(trimmed)
        except MetadataSearchError:
            logger.error("Open Library search failed for '%s'.", trimmed, exc_info=True)
            return []

    def search_google_books(self, query: str) -> list[MetadataResult]:
        """Search the Google Books volumes API.

        Raises:
            MetadataSearchError: If the request fails or returns a non-OK status
        """
        data = self._get_json(self.GOOGLE_BOOKS_URL, {"q": query, "maxResults": self.max_results}, "Google Books")

        results = []
        for item in data.get("items") or []:
            info = item.get("volumeInfo") or {}
            if not info.get("title"):
                continue
            authors = info.get("authors") or []
            results.append(
                MetadataResult(
                    title=info["title"],
                    author=authors[0] if authors else None,
                    cover_url=(info.get("imageLinks") or {}).get("thumbnail"),
                    source_id=item["id"],
                    source_label="google_books",
                )
            )
        logger.debug("Google Books returned %d usable results.", len(results))
        return results

    def search_open_library(self, query: str) -> list[MetadataResult]:
        """Search the Open Library search API.

        Raises:
            MetadataSearchError: If the request fails or returns a non-OK status
        """
        data = self._get_json(self.OPEN_LIBRARY_URL, {"q": query, "limit": self.max_results}, "Open Library")

        results = []
        for doc in data.get("docs") or []:
            if not doc.get("title"):
                continue
            authors = doc.get("author_name") or []
            cover_id = doc.get("cover_i")
            results.append(
                MetadataResult(
                    title=doc["title"],
                    author=authors[0] if authors else None,
                    cover_url=self.OPEN_LIBRARY_COVER_URL.format(cover_id=cover_id) if cover_id else None,
                    source_id=doc["key"],
                    source_label="open_library",
                )
            )
        logger.debug("Open Library returned %d usable results.", len(results))
        return results

    def _get_json(self, url: str, params: dict, provider: str) -> dict:
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise MetadataSearchError(f"{provider} search failed: {e}") from e

        if response.status_code != self.HTTP_OK:
            logger.debug("%s responded with HTTP %d: %s", provider, response.status_code, response.text[:200])
            raise MetadataSearchError(f"{provider} search failed with HTTP {response.status_code}.")

        try:
            return response.json()
        except ValueError as e:
            raise MetadataSearchError(f"{provider} returned invalid JSON.") from e
