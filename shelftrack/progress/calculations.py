"""Reading progress calculations.

Rules:
    250 words make one page.
    A qualifying reading day needs at least 5 pages.
    Reading debt is the number of days since the last qualifying day,
    not counting today, capped at 15.
    Pages read today beyond the 5-page minimum repay debt one for one.

Every function here is pure. Functions that depend on the current date take
an optional ``today`` argument and fall back to the current UTC date.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone

from .models import MAX_DEBT_DAYS, MIN_PAGES_PER_DAY, DailyReadingAggregate, DebtResult, ReadingSession, StreakResult

logger = logging.getLogger(__name__)

WORDS_PER_PAGE = 250
DEFAULT_BOOK_WORDS = 80_000  # average novel word count

ONE_DAY = timedelta(days=1)


def utc_today() -> date:
    """Return the current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def to_iso_date(value: date | datetime) -> str:
    """Format a date as ``YYYY-MM-DD``; aware datetimes are converted to UTC first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        value = value.date()
    return value.isoformat()


def _parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


# Page / word helpers


def words_to_pages(words: int) -> int:
    """How many full pages a word count represents."""
    return words // WORDS_PER_PAGE


def estimate_words_from_progress(progress_delta: float, estimated_total_words: int = DEFAULT_BOOK_WORDS) -> int:
    """Estimate words read from a change in reading position.

    Args:
        progress_delta: Percentage points advanced; clamped to [0, 100]
        estimated_total_words: Length of the book in words

    Returns:
        Estimated words read, rounded half up
    """
    clamped = max(0.0, min(100.0, progress_delta))
    return math.floor(clamped / 100 * estimated_total_words + 0.5)


def is_qualifying_day(total_pages: int) -> bool:
    """A day qualifies for streak counting only with at least MIN_PAGES_PER_DAY pages."""
    return total_pages >= MIN_PAGES_PER_DAY


# Streak calculation


def calculate_streak(daily_stats: Sequence[DailyReadingAggregate], today: date | None = None) -> StreakResult:
    """Calculate the current and longest reading streaks.

    The current streak is only live when it starts today or yesterday, which
    leaves the user the rest of today to read. Walking back from there, any
    missing date or non-qualifying day ends it. The longest streak is found
    by scanning the full history in date order.

    Args:
        daily_stats: Daily aggregates sorted newest first, one per date
        today: Reference date; defaults to the current UTC date

    Returns:
        StreakResult
    """
    if not daily_stats:
        return StreakResult()

    today = today or utc_today()
    yesterday = today - ONE_DAY

    current_streak = 0
    expected: date | None = None
    for day in daily_stats:
        day_date = _parse_date(day.date)
        if current_streak == 0:
            if day_date not in (today, yesterday) or not day.qualifies:
                break
        elif day_date != expected - ONE_DAY or not day.qualifies:
            break
        expected = day_date
        current_streak += 1

    longest_streak = 0
    run = 0
    previous: date | None = None
    for day in sorted(daily_stats, key=lambda d: _parse_date(d.date)):
        if not day.qualifies:
            longest_streak = max(longest_streak, run)
            run = 0
            previous = None
            continue
        day_date = _parse_date(day.date)
        if previous is None or day_date == previous + ONE_DAY:
            run += 1
        else:
            longest_streak = max(longest_streak, run)
            run = 1
        previous = day_date
    longest_streak = max(longest_streak, run)

    last_qualifying = next((day for day in daily_stats if day.qualifies), None)
    logger.debug("Streak: current=%d longest=%d", current_streak, longest_streak)
    return StreakResult(
        current_streak=current_streak,
        longest_streak=longest_streak,
        last_qualifying_date=last_qualifying.date if last_qualifying else None,
    )


# Reading debt calculation


def calculate_reading_debt(
    daily_stats: Sequence[DailyReadingAggregate], current_streak: int, today: date | None = None
) -> DebtResult:
    """Calculate reading debt and today's repayment progress.

    Args:
        daily_stats: Daily aggregates sorted newest first (as for calculate_streak)
        current_streak: ``current_streak`` from :func:`calculate_streak`
        today: Reference date; defaults to the current UTC date

    Returns:
        DebtResult
    """
    if current_streak > 0:
        return DebtResult()

    last_qualifying = next((day for day in daily_stats if day.qualifies), None)
    if last_qualifying is None:
        # Never had a qualifying day, so there is nothing to owe yet
        return DebtResult()

    today = today or utc_today()
    days_since = (today - _parse_date(last_qualifying.date)).days

    # Today is the repayment opportunity, not a missed day
    missed_days = max(0, days_since - 1)
    debt = min(MAX_DEBT_DAYS, missed_days)

    today_iso = today.isoformat()
    today_entry = next((day for day in daily_stats if day.date == today_iso), None)
    today_pages = today_entry.total_pages if today_entry else 0

    extra_pages = max(0, today_pages - MIN_PAGES_PER_DAY)
    debt_repaid_today = min(extra_pages, debt)

    logger.debug("Debt: days_since=%d debt=%d repaid_today=%d", days_since, debt, debt_repaid_today)
    return DebtResult(
        debt=debt,
        debt_repaid_today=debt_repaid_today,
        can_repay_more=debt - debt_repaid_today > 0,
    )


# Per-book streak


def calc_book_streak(sessions: Iterable[ReadingSession], today: date | None = None) -> int:
    """Calculate the streak for a single book from its raw sessions.

    Pages are summed per date. The streak is anchored at today when today
    qualifies, otherwise at yesterday when yesterday qualifies, and counts
    consecutive qualifying days backwards from the anchor.
    """
    pages_by_date: dict[date, int] = defaultdict(int)
    for session in sessions:
        pages_by_date[_parse_date(session.session_date)] += session.pages_read

    today = today or utc_today()
    if is_qualifying_day(pages_by_date.get(today, 0)):
        cursor = today
    elif is_qualifying_day(pages_by_date.get(today - ONE_DAY, 0)):
        cursor = today - ONE_DAY
    else:
        return 0

    streak = 0
    while is_qualifying_day(pages_by_date.get(cursor, 0)):
        streak += 1
        cursor -= ONE_DAY
    return streak


# Formatting helpers


def format_pages(pages: int) -> str:
    """Pluralised page count: '1 page' or '3 pages'."""
    return f"{pages} {'page' if pages == 1 else 'pages'}"


def format_relative_date(value: str | date | None, today: date | None = None) -> str:
    """Human-friendly relative date: 'Today', 'Yesterday' or e.g. 'Jan 5'.

    Timestamps are accepted and reduced to their date part.
    """
    if not value:
        return "Never"
    if isinstance(value, str):
        day = _parse_date(value)
    elif isinstance(value, datetime):
        day = value.date()
    else:
        day = value
    today = today or utc_today()
    if day == today:
        return "Today"
    if day == today - ONE_DAY:
        return "Yesterday"
    return f"{day.strftime('%b')} {day.day}"
