from urllib.parse import urlencode

GOODREADS_SEARCH_BASE = "https://www.goodreads.com/search"


def build_goodreads_search_url(title: str, author: str | None = None) -> str:
    """Build a Goodreads search URL for a title and optional author."""
    parts = [title.strip()]
    if author and author.strip():
        parts.append(author.strip())

    return f"{GOODREADS_SEARCH_BASE}?{urlencode({'q': ' '.join(parts)})}"
