"""Reading progress: page estimates, streaks and reading debt."""

from .aggregates import build_daily_aggregates, weekly_activity
from .calculations import (
    DEFAULT_BOOK_WORDS,
    MAX_DEBT_DAYS,
    WORDS_PER_PAGE,
    calc_book_streak,
    calculate_reading_debt,
    calculate_streak,
    estimate_words_from_progress,
    format_pages,
    format_relative_date,
    is_qualifying_day,
    to_iso_date,
    utc_today,
    words_to_pages,
)
from .models import MIN_PAGES_PER_DAY, DailyReadingAggregate, DebtResult, ReadingSession, StreakResult

__all__ = [
    "DEFAULT_BOOK_WORDS",
    "MAX_DEBT_DAYS",
    "MIN_PAGES_PER_DAY",
    "WORDS_PER_PAGE",
    "DailyReadingAggregate",
    "DebtResult",
    "ReadingSession",
    "StreakResult",
    "build_daily_aggregates",
    "calc_book_streak",
    "calculate_reading_debt",
    "calculate_streak",
    "estimate_words_from_progress",
    "format_pages",
    "format_relative_date",
    "is_qualifying_day",
    "to_iso_date",
    "utc_today",
    "weekly_activity",
    "words_to_pages",
]
