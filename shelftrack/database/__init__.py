"""Database module for shelftrack."""

from shelftrack.database.dao import LibraryDAO
from shelftrack.database.models import Book, SessionRow

__all__ = ["Book", "LibraryDAO", "SessionRow"]
