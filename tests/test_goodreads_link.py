"""Tests for Goodreads search link building."""

from urllib.parse import parse_qs, urlparse

from shelftrack.library import build_goodreads_search_url


def test_build_url_with_title_and_author():
    """Test that title and author are joined into one encoded query."""
    url = build_goodreads_search_url("Dune", "Frank Herbert")

    assert url == "https://www.goodreads.com/search?q=Dune+Frank+Herbert"


def test_build_url_without_author():
    """Test that a missing or blank author leaves only the title in the query."""
    assert build_goodreads_search_url("Dune") == "https://www.goodreads.com/search?q=Dune"
    assert build_goodreads_search_url("Dune", "   ") == "https://www.goodreads.com/search?q=Dune"


def test_build_url_encodes_special_characters():
    """Test that reserved characters in the title survive a decode."""
    title = 'She said "hello" & left?'

    url = build_goodreads_search_url(title, "Jane Doe")

    parsed = urlparse(url)
    assert parsed.netloc == "www.goodreads.com"
    assert parsed.path == "/search"
    assert parse_qs(parsed.query) == {"q": [f"{title} Jane Doe"]}
