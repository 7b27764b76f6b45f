"""Data models for the shelftrack library database."""

from datetime import datetime

from pydantic import BaseModel, Field

from ..library.models import LibraryEntry, ReadingState


class Book(BaseModel):
    """A row of the ``books`` table."""

    id: str
    title: str
    author: str | None = None
    state: ReadingState = ReadingState.TO_READ
    goodreads_search_url: str | None = None
    progress_percent: int = Field(default=0, ge=0, le=100)
    current_chapter_index: int = 0
    total_chapters: int = 0
    streak_days: int = 0
    last_read_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_library_entry(self) -> LibraryEntry:
        """Reduce the row to the fields used for import matching."""
        return LibraryEntry(id=self.id, title=self.title, author=self.author, state=self.state)


class SessionRow(BaseModel):
    """A row of the ``reading_sessions`` table."""

    id: int | None = None
    book_id: str
    session_date: str
    pages_read: int = 0
    words_read: int = 0
    progress_start: int = 0
    progress_end: int = 0
    chapter_index: int | None = None
    duration_seconds: int | None = None
