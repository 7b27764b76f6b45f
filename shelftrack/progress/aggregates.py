"""Grouping of raw reading sessions into daily aggregates."""

import logging
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from .calculations import utc_today
from .models import DailyReadingAggregate, ReadingSession

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


def build_daily_aggregates(sessions: Iterable[ReadingSession]) -> list[DailyReadingAggregate]:
    """Sum sessions per UTC date.

    Args:
        sessions: Reading sessions in any order

    Returns:
        One aggregate per date that has sessions, newest first
    """
    totals: dict[str, dict] = {}
    for session in sessions:
        day = totals.setdefault(session.session_date, {"pages": 0, "words": 0, "seconds": 0, "items": set()})
        day["pages"] += session.pages_read
        day["words"] += session.words_read
        day["seconds"] += session.duration_seconds
        day["items"].add(session.item_id)

    aggregates = [
        DailyReadingAggregate(
            date=session_date,
            total_pages=day["pages"],
            total_words=day["words"],
            total_duration_seconds=day["seconds"],
            distinct_items_read=frozenset(day["items"]),
        )
        for session_date, day in sorted(totals.items(), reverse=True)
    ]
    logger.debug("Built %d daily aggregates.", len(aggregates))
    return aggregates


def weekly_activity(
    daily_stats: Sequence[DailyReadingAggregate], today: date | None = None
) -> list[DailyReadingAggregate]:
    """Return the last seven days of activity, oldest first and ending today.

    Days without any reading are filled in with empty aggregates.
    """
    today = today or utc_today()
    by_date = {day.date: day for day in daily_stats}

    week = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day_iso = (today - timedelta(days=offset)).isoformat()
        week.append(by_date.get(day_iso) or DailyReadingAggregate(date=day_iso))
    return week
