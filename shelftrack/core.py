"""Core functionality for shelftrack application."""

import logging
import math
import sqlite3
from collections.abc import Mapping
from datetime import date, datetime, timezone
from pathlib import Path

from .database import LibraryDAO, SessionRow
from .exceptions import CsvImportError, MissingDecisionsError, ValidationError
from .library import (
    CsvParseFailure,
    CsvParseSuccess,
    ImportDecision,
    ReadingState,
    apply_decisions,
    build_goodreads_search_url,
    detect_conflicts,
    find_undecided_conflicts,
    parse_goodreads_csv,
)
from .models import DashboardStats, ImportPreview, ImportSummary, SessionOutcome
from .progress import (
    DEFAULT_BOOK_WORDS,
    ReadingSession,
    build_daily_aggregates,
    calc_book_streak,
    calculate_reading_debt,
    calculate_streak,
    estimate_words_from_progress,
    is_qualifying_day,
    utc_today,
    weekly_activity,
    words_to_pages,
)

logger = logging.getLogger(__name__)

# Enough history to determine any per-book streak
BOOK_STREAK_LOOKBACK = 60


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class ShelfTracker:
    """Main application class for shelftrack."""

    def __init__(self, db_path: str | Path | None = None, estimated_total_words: int = DEFAULT_BOOK_WORDS):
        """Initialize the application.

        Args:
            db_path: Path to the library database; the DAO default is used when None
            estimated_total_words: Book length assumed when a session does not give one
        """
        self.db = LibraryDAO(db_path)
        self.estimated_total_words = estimated_total_words
        logger.info("Using library database at: %s", self.db.db_path)

    @staticmethod
    def read_export_file(path: str | Path) -> str:
        """Read a Goodreads export file as text.

        Raises:
            OSError: If the file can't be read
        """
        export_file = Path(path)
        logger.debug("Reading Goodreads export: %s", export_file)
        try:
            # Keep CRLF inside quoted fields
            with open(export_file, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read export file %s", export_file, exc_info=True)
            raise OSError(f"Could not read export file: {export_file}") from e

    # Goodreads import

    def _parse(self, csv_text: str) -> CsvParseSuccess:
        result = parse_goodreads_csv(csv_text)
        if isinstance(result, CsvParseFailure):
            logger.error("Goodreads export could not be parsed: %s", result.message)
            raise CsvImportError(result.message)

        for warning in result.warnings:
            logger.warning("%s", warning)
        return result

    def preview_import(self, csv_text: str) -> ImportPreview:
        """Parse an export and mark rows that match books already in the library.

        Raises:
            CsvImportError: If the export is structurally invalid
        """
        parsed = self._parse(csv_text)
        previews = detect_conflicts(parsed.rows, self.db.get_library_entries())
        conflict_count = sum(1 for preview in previews if preview.has_conflict)
        logger.info(
            "Import preview: %d rows, %d conflicts, %d warnings.", len(previews), conflict_count, len(parsed.warnings)
        )
        return ImportPreview(previews=previews, warnings=parsed.warnings)

    def confirm_import(
        self, csv_text: str, decisions: Mapping[int, ImportDecision | str], strict: bool = True
    ) -> ImportSummary:
        """Apply an import to the library.

        The export is parsed and matched again so the outcome reflects the
        library as it is now, not as it was when the preview was made.
        Replacing a book overwrites its title, author, state and search
        link; reading progress is kept.

        Args:
            csv_text: The Goodreads export text
            decisions: Decisions for conflicting rows, keyed by row index
            strict: Require a decision for every conflicting row

        Raises:
            CsvImportError: If the export is structurally invalid
            MissingDecisionsError: In strict mode, when a conflict has no decision
        """
        parsed = self._parse(csv_text)
        previews = detect_conflicts(parsed.rows, self.db.get_library_entries())

        if strict:
            undecided = find_undecided_conflicts(previews, decisions)
            if undecided:
                raise MissingDecisionsError(undecided)

        merge = apply_decisions(previews, decisions)
        summary = ImportSummary(skipped=merge.skipped, warnings=parsed.warnings)

        for preview in merge.creates:
            row = preview.row
            try:
                self.db.add_book(
                    title=row.title,
                    author=row.author or None,
                    state=row.state,
                    goodreads_search_url=build_goodreads_search_url(row.title, row.author),
                )
                summary.created += 1
            except ValidationError as e:
                summary.failed += 1
                logger.warning("Row %d not added: '%s'. %s", preview.row_index, row.title, e)
            except sqlite3.DatabaseError:
                summary.failed += 1
                logger.error("Failed to add book from row %d: '%s'", preview.row_index, row.title, exc_info=True)

        for preview in merge.replaces:
            row = preview.row
            try:
                self.db.update_book(
                    preview.existing_entry_id,
                    check_transition=False,
                    title=row.title,
                    author=row.author or None,
                    state=row.state,
                    goodreads_search_url=build_goodreads_search_url(row.title, row.author),
                )
                summary.replaced += 1
            except (ValidationError, sqlite3.DatabaseError):
                summary.failed += 1
                logger.error(
                    "Failed to replace book %s from row %d", preview.existing_entry_id, preview.row_index, exc_info=True
                )

        logger.info(
            "Import finished. Created: %d, Replaced: %d, Skipped: %d, Failed: %d",
            summary.created,
            summary.replaced,
            summary.skipped,
            summary.failed,
        )
        return summary

    # Reading sessions

    def record_session(
        self,
        book_id: str,
        progress_start: float,
        progress_end: float,
        chapter_index: int | None = None,
        total_chapters: int | None = None,
        duration_seconds: int | None = None,
        estimated_total_words: int | None = None,
        today: date | None = None,
    ) -> SessionOutcome:
        """Record a finished reading session for a book.

        Sessions without forward progress are not stored. Otherwise the
        session is saved and the book's progress, last read time and
        per-book streak are updated.

        Raises:
            ValidationError: If an argument is out of range
            NotFoundError: If the book does not exist
        """
        self._validate_session(
            progress_start, progress_end, chapter_index, total_chapters, duration_seconds, estimated_total_words
        )
        self.db.get_book(book_id)

        delta = progress_end - progress_start
        if delta <= 0:
            logger.info("No forward progress for book %s; session not recorded.", book_id)
            return SessionOutcome(skipped=True, reason="no_progress")

        total_words = estimated_total_words if estimated_total_words is not None else self.estimated_total_words
        words = estimate_words_from_progress(delta, total_words)
        pages = words_to_pages(words)
        session_date = (today or utc_today()).isoformat()

        self.db.record_session(
            SessionRow(
                book_id=book_id,
                session_date=session_date,
                pages_read=pages,
                words_read=words,
                progress_start=_round_half_up(progress_start),
                progress_end=_round_half_up(progress_end),
                chapter_index=chapter_index,
                duration_seconds=duration_seconds,
            )
        )

        recent = self.db.get_sessions(book_id=book_id, limit=BOOK_STREAK_LOOKBACK)
        book_streak = calc_book_streak((self._to_reading_session(row) for row in recent), today=today)

        changes = {
            "progress_percent": min(100, _round_half_up(progress_end)),
            "last_read_at": datetime.now(timezone.utc),
            "streak_days": book_streak,
        }
        if chapter_index is not None:
            changes["current_chapter_index"] = chapter_index
        if total_chapters:
            changes["total_chapters"] = total_chapters
        self.db.update_book(book_id, **changes)

        logger.info("Recorded session for book %s: %d pages (%d words), streak %d.", book_id, pages, words, book_streak)
        return SessionOutcome(pages=pages, words=words, book_streak=book_streak)

    @staticmethod
    def _validate_session(
        progress_start: float,
        progress_end: float,
        chapter_index: int | None,
        total_chapters: int | None,
        duration_seconds: int | None,
        estimated_total_words: int | None,
    ) -> None:
        for name, value in (("progress_start", progress_start), ("progress_end", progress_end)):
            if not 0 <= value <= 100:
                raise ValidationError(f"{name} must be between 0 and 100, got {value}")
        for name, value in (
            ("chapter_index", chapter_index),
            ("total_chapters", total_chapters),
            ("duration_seconds", duration_seconds),
            ("estimated_total_words", estimated_total_words),
        ):
            if value is not None and value < 0:
                raise ValidationError(f"{name} must not be negative, got {value}")

    @staticmethod
    def _to_reading_session(row: SessionRow) -> ReadingSession:
        return ReadingSession(
            item_id=row.book_id,
            session_date=row.session_date,
            pages_read=row.pages_read,
            words_read=row.words_read,
            duration_seconds=row.duration_seconds or 0,
        )

    # Dashboard

    def dashboard_stats(self, today: date | None = None) -> DashboardStats:
        """Assemble streak, debt and weekly activity from all recorded sessions."""
        today = today or utc_today()
        sessions = [self._to_reading_session(row) for row in self.db.get_sessions()]
        daily = build_daily_aggregates(sessions)

        streak = calculate_streak(daily, today=today)
        debt = calculate_reading_debt(daily, streak.current_streak, today=today)

        today_entry = next((day for day in daily if day.date == today.isoformat()), None)
        today_pages = today_entry.total_pages if today_entry else 0

        return DashboardStats(
            streak=streak,
            debt=debt,
            today_pages=today_pages,
            today_qualifies=is_qualifying_day(today_pages),
            weekly_activity=weekly_activity(daily, today=today),
            total_pages_all_time=sum(day.total_pages for day in daily),
            total_books_completed=self.db.count_books(ReadingState.COMPLETED),
        )

    def close_db(self) -> None:
        """Close the database connection explicitly if needed."""
        if self.db:
            self.db.close()
