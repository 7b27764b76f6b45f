"""Data models for reading progress analytics."""

from datetime import date as calendar_date

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# A day counts toward a streak only with at least this many pages
MIN_PAGES_PER_DAY = 5

# Missed days owed are capped here
MAX_DEBT_DAYS = 15


def _check_calendar_date(value: str) -> str:
    calendar_date.fromisoformat(value)
    return value


class ReadingSession(BaseModel):
    """A single recorded reading session, as stored by the library."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(description="Identifier of the book that was read")
    session_date: str = Field(pattern=ISO_DATE_PATTERN, description="UTC date of the session (YYYY-MM-DD)")
    pages_read: int = Field(default=0, ge=0)
    words_read: int = Field(default=0, ge=0)
    duration_seconds: int = Field(default=0, ge=0)

    @field_validator("session_date")
    @classmethod
    def check_session_date(cls, value):
        """Reject dates that do not exist, such as 2024-02-30."""
        return _check_calendar_date(value)


class DailyReadingAggregate(BaseModel):
    """Reading activity summed over one UTC calendar day."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(pattern=ISO_DATE_PATTERN, description="UTC date (YYYY-MM-DD)")
    total_pages: int = Field(default=0, ge=0)
    total_words: int = Field(default=0, ge=0)
    total_duration_seconds: int = Field(default=0, ge=0)
    distinct_items_read: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("date")
    @classmethod
    def check_date(cls, value):
        return _check_calendar_date(value)

    @computed_field
    @property
    def qualifies(self) -> bool:
        """Whether enough pages were read for the day to count toward a streak."""
        return self.total_pages >= MIN_PAGES_PER_DAY


class StreakResult(BaseModel):
    """Current and all-time best reading streaks."""

    model_config = ConfigDict(frozen=True)

    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_qualifying_date: str | None = None


class DebtResult(BaseModel):
    """Missed qualifying days and how much of them today's reading repays."""

    model_config = ConfigDict(frozen=True)

    debt: int = Field(default=0, ge=0, le=MAX_DEBT_DAYS)
    debt_repaid_today: int = Field(default=0, ge=0)
    can_repay_more: bool = False
