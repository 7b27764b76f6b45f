"""Database access layer for shelftrack using sqlite-utils."""

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sqlite_utils import Database
from sqlite_utils.db import NotFoundError as RowNotFoundError

from ..exceptions import NotFoundError, ValidationError
from ..library.models import LibraryEntry, ReadingState
from .models import Book, SessionRow

logger = logging.getLogger(__name__)

BOOKS_TABLE = "books"
SESSIONS_TABLE = "reading_sessions"

# Fields of a book that callers may change through update_book
UPDATABLE_BOOK_FIELDS = {
    "title",
    "author",
    "state",
    "goodreads_search_url",
    "progress_percent",
    "current_chapter_index",
    "total_chapters",
    "streak_days",
    "last_read_at",
}

DUPLICATE_BOOK_MESSAGE = "This book already exists in your library."
REREAD_MESSAGE = "Cannot move a completed book back to purely 'to read'. Use 'reading' if you are re-reading."


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LibraryDAO:
    """Data Access Object for the book library and reading sessions."""

    def __init__(self, db_path: str | Path | None = None):
        """Initialize DAO with database path.

        Args:
            db_path: Path to the SQLite database file. If None, uses ~/.shelftrack/library.db.
        """
        if db_path is None:
            data_dir = Path.home() / ".shelftrack"
            data_dir.mkdir(exist_ok=True)
            db_path = data_dir / "library.db"

        self.db_path = str(db_path)
        self.db = Database(self.db_path)
        self._create_tables_if_not_exist()

    def _create_tables_if_not_exist(self) -> None:
        """Create database tables and indexes if they don't exist."""
        logger.debug("Initializing database at %s", self.db_path)
        table_names = self.db.table_names()

        if BOOKS_TABLE not in table_names:
            logger.info("Creating %s table", BOOKS_TABLE)
            self.db.create_table(
                BOOKS_TABLE,
                {
                    "id": str,
                    "title": str,
                    "author": str,
                    "state": str,
                    "goodreads_search_url": str,
                    "progress_percent": int,
                    "current_chapter_index": int,
                    "total_chapters": int,
                    "streak_days": int,
                    "last_read_at": str,
                    "created_at": str,
                    "updated_at": str,
                },
                pk="id",
                not_null={"title", "state"},
                defaults={"progress_percent": 0, "current_chapter_index": 0, "total_chapters": 0, "streak_days": 0},
            )
            self.db[BOOKS_TABLE].create_index(["title", "author"], unique=True)
            self.db[BOOKS_TABLE].create_index(["state"])

        if SESSIONS_TABLE not in table_names:
            logger.info("Creating %s table", SESSIONS_TABLE)
            self.db.create_table(
                SESSIONS_TABLE,
                {
                    "id": int,
                    "book_id": str,
                    "session_date": str,
                    "pages_read": int,
                    "words_read": int,
                    "progress_start": int,
                    "progress_end": int,
                    "chapter_index": int,
                    "duration_seconds": int,
                },
                pk="id",
                not_null={"book_id", "session_date"},
            )
            self.db[SESSIONS_TABLE].create_index(["session_date"])
            self.db[SESSIONS_TABLE].create_index(["book_id"])

    # Books

    def add_book(
        self,
        title: str,
        author: str | None = None,
        state: ReadingState = ReadingState.TO_READ,
        goodreads_search_url: str | None = None,
    ) -> Book:
        """Insert a new book and return it.

        Raises:
            ValidationError: If a book with the same title and author exists
        """
        now = _now()
        record = {
            "id": uuid.uuid4().hex,
            "title": title,
            "author": author,
            "state": ReadingState(state).value,
            "goodreads_search_url": goodreads_search_url,
            "progress_percent": 0,
            "current_chapter_index": 0,
            "total_chapters": 0,
            "streak_days": 0,
            "last_read_at": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            self.db[BOOKS_TABLE].insert(record)
        except sqlite3.IntegrityError as e:
            raise ValidationError(DUPLICATE_BOOK_MESSAGE) from e
        logger.debug("Added book %s: '%s'", record["id"], title)
        return Book(**record)

    def update_book(self, book_id: str, check_transition: bool = True, **changes: Any) -> Book:
        """Update fields of an existing book.

        A completed book cannot go back to ``to_read``; re-reading is
        ``reading``. Imports replacing catalog fields pass
        ``check_transition=False`` to take the export's shelf as is.

        Raises:
            NotFoundError: If no book has the given id
            ValidationError: If the state change is not allowed or the new
                title and author belong to another book
            ValueError: If a field cannot be updated
        """
        unknown = set(changes) - UPDATABLE_BOOK_FIELDS
        if unknown:
            raise ValueError(f"Cannot update book fields: {', '.join(sorted(unknown))}")

        if "state" in changes:
            changes["state"] = ReadingState(changes["state"]).value
            if check_transition:
                current = self.get_book(book_id)
                if current.state is ReadingState.COMPLETED and changes["state"] == ReadingState.TO_READ.value:
                    raise ValidationError(REREAD_MESSAGE)
        if isinstance(changes.get("last_read_at"), datetime):
            changes["last_read_at"] = changes["last_read_at"].isoformat()
        changes["updated_at"] = _now()

        try:
            self.db[BOOKS_TABLE].update(book_id, changes)
        except RowNotFoundError as e:
            raise NotFoundError(f"Book not found: {book_id}") from e
        except sqlite3.IntegrityError as e:
            raise ValidationError(DUPLICATE_BOOK_MESSAGE) from e
        return self.get_book(book_id)

    def get_book(self, book_id: str) -> Book:
        """Get a book by id.

        Raises:
            NotFoundError: If no book has the given id
        """
        try:
            return Book(**self.db[BOOKS_TABLE].get(book_id))
        except RowNotFoundError as e:
            raise NotFoundError(f"Book not found: {book_id}") from e

    def get_books(self, state: ReadingState | None = None) -> list[Book]:
        """List books, optionally filtered by reading state, ordered by title."""
        if state is None:
            rows = self.db[BOOKS_TABLE].rows_where(order_by="title collate nocase")
        else:
            rows = self.db[BOOKS_TABLE].rows_where(
                "state = ?", [ReadingState(state).value], order_by="title collate nocase"
            )
        return [Book(**row) for row in rows]

    def get_library_entries(self) -> list[LibraryEntry]:
        """List all books in insertion order, reduced to their matching fields."""
        rows = self.db[BOOKS_TABLE].rows_where(order_by="created_at, rowid")
        return [Book(**row).to_library_entry() for row in rows]

    def count_books(self, state: ReadingState | None = None) -> int:
        """Count books, optionally only those in the given state."""
        if state is None:
            return self.db[BOOKS_TABLE].count
        return self.db[BOOKS_TABLE].count_where("state = ?", [ReadingState(state).value])

    def delete_book(self, book_id: str) -> None:
        """Delete a book together with its reading sessions.

        Raises:
            NotFoundError: If no book has the given id
        """
        self.get_book(book_id)
        self.db[SESSIONS_TABLE].delete_where("book_id = ?", [book_id])
        self.db[BOOKS_TABLE].delete(book_id)
        logger.debug("Deleted book %s and its sessions", book_id)

    # Reading sessions

    def record_session(self, session: SessionRow) -> int:
        """Insert a reading session and return its id."""
        record = session.model_dump(exclude={"id"})
        return self.db[SESSIONS_TABLE].insert(record).last_pk

    def get_sessions(self, book_id: str | None = None, limit: int | None = None) -> list[SessionRow]:
        """Get reading sessions newest first, optionally for a single book."""
        order_by = "session_date desc, id desc"
        if book_id is None:
            rows = self.db[SESSIONS_TABLE].rows_where(order_by=order_by, limit=limit)
        else:
            rows = self.db[SESSIONS_TABLE].rows_where("book_id = ?", [book_id], order_by=order_by, limit=limit)
        return [SessionRow(**row) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        self.db.close()
