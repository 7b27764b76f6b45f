"""Core data models for shelftrack application."""

from pydantic import BaseModel, Field

from .library.models import ImportPreviewRow
from .progress.models import DailyReadingAggregate, DebtResult, StreakResult


class ImportPreview(BaseModel):
    """Result of previewing a Goodreads import against the library."""

    previews: list[ImportPreviewRow] = Field(default_factory=list, description="One entry per importable row")
    warnings: list[str] = Field(default_factory=list, description="Row-level warnings from parsing")

    @property
    def conflicts(self) -> list[ImportPreviewRow]:
        """Preview rows that match an existing book."""
        return [preview for preview in self.previews if preview.has_conflict]


class ImportSummary(BaseModel):
    """Statistics for a confirmed import."""

    created: int = Field(default=0, description="Number of new books added")
    replaced: int = Field(default=0, description="Number of existing books overwritten")
    skipped: int = Field(default=0, description="Number of conflicting rows left alone")
    failed: int = Field(default=0, description="Number of rows the library rejected")
    warnings: list[str] = Field(default_factory=list, description="Row-level warnings from parsing")


class SessionOutcome(BaseModel):
    """Result of recording a reading session."""

    skipped: bool = Field(default=False, description="True when no forward progress was made")
    reason: str | None = Field(default=None, description="Why the session was skipped")
    pages: int = 0
    words: int = 0
    book_streak: int = 0


class DashboardStats(BaseModel):
    """Reading statistics assembled for the dashboard."""

    streak: StreakResult
    debt: DebtResult
    today_pages: int = 0
    today_qualifies: bool = False
    weekly_activity: list[DailyReadingAggregate] = Field(default_factory=list, description="Seven days, today last")
    total_pages_all_time: int = 0
    total_books_completed: int = 0
