"""Tests for the ShelfTracker application class."""

from datetime import date, timedelta
from pathlib import Path

import pytest

from shelftrack.core import ShelfTracker
from shelftrack.exceptions import CsvImportError, MissingDecisionsError, NotFoundError, ValidationError
from shelftrack.library import ImportDecision, ReadingState

FIXTURES = Path(__file__).parent / "fixtures"
TODAY = date(2024, 3, 15)
YESTERDAY = TODAY - timedelta(days=1)
SAMPLE_ROW_COUNT = 5
# 10% of the default 80,000-word book
TEN_PERCENT_WORDS = 8000
TEN_PERCENT_PAGES = 32


@pytest.fixture
def tracker(tmp_path):
    """Fixture providing a tracker with an empty library."""
    app = ShelfTracker(db_path=tmp_path / "library.db")
    yield app
    app.close_db()


@pytest.fixture
def sample_csv_text():
    """Fixture providing the sample Goodreads export."""
    return (FIXTURES / "goodreads_sample.csv").read_bytes().decode("utf-8")


@pytest.fixture
def book(tracker):
    """Fixture providing a book that is being read."""
    return tracker.db.add_book("Dune", "Frank Herbert", ReadingState.READING)


# --- reading exports ---


def test_read_export_file_keeps_line_endings():
    """Test that the export is read verbatim, including CRLF line endings."""
    path = FIXTURES / "goodreads_sample.csv"

    assert ShelfTracker.read_export_file(path) == path.read_bytes().decode("utf-8")


def test_read_export_file_missing(tmp_path):
    """Test that a missing export raises OSError."""
    with pytest.raises(OSError, match="Could not read export file"):
        ShelfTracker.read_export_file(tmp_path / "missing.csv")


# --- import ---


def test_preview_import_into_empty_library(tracker, sample_csv_text):
    """Test that nothing conflicts with an empty library."""
    preview = tracker.preview_import(sample_csv_text)

    assert len(preview.previews) == SAMPLE_ROW_COUNT
    assert preview.conflicts == []
    assert len(preview.warnings) == 2


def test_preview_import_bad_header(tracker):
    """Test that a structurally invalid export raises CsvImportError."""
    text = (FIXTURES / "goodreads_bad_header.csv").read_text(encoding="utf-8")

    with pytest.raises(CsvImportError, match="Missing required columns"):
        tracker.preview_import(text)


def test_confirm_import_creates_books(tracker, sample_csv_text):
    """Test that a first import creates every row as a new book."""
    summary = tracker.confirm_import(sample_csv_text, {})

    assert summary.created == SAMPLE_ROW_COUNT
    assert summary.replaced == 0
    assert summary.skipped == 0
    assert summary.failed == 0
    assert len(summary.warnings) == 2

    books = {book.title: book for book in tracker.db.get_books()}
    assert books["Dune"].state is ReadingState.READING
    assert books["Dune"].goodreads_search_url == "https://www.goodreads.com/search?q=Dune+Frank+Herbert"
    assert books["The Hobbit"].state is ReadingState.COMPLETED


def test_confirm_import_twice_requires_decisions(tracker, sample_csv_text):
    """Test that re-importing the same export conflicts on every row."""
    tracker.confirm_import(sample_csv_text, {})

    with pytest.raises(MissingDecisionsError) as exc_info:
        tracker.confirm_import(sample_csv_text, {})

    assert exc_info.value.row_indexes == list(range(SAMPLE_ROW_COUNT))
    assert str(exc_info.value) == "5 conflicting book(s) require a decision."
    assert tracker.db.count_books() == SAMPLE_ROW_COUNT


def test_confirm_import_lenient_skips_undecided(tracker, sample_csv_text):
    """Test that without strict mode undecided conflicts are skipped."""
    tracker.confirm_import(sample_csv_text, {})

    summary = tracker.confirm_import(sample_csv_text, {}, strict=False)

    assert summary.created == 0
    assert summary.skipped == SAMPLE_ROW_COUNT
    assert tracker.db.count_books() == SAMPLE_ROW_COUNT


def test_confirm_import_replace_keeps_progress(tracker, book):
    """Test that replacing a book overwrites catalog fields and keeps reading progress."""
    tracker.db.update_book(book.id, progress_percent=40)
    text = "Title,Author,Exclusive Shelf\nDUNE,frank herbert,read\nEmma,Jane Austen,to-read\n"

    preview = tracker.preview_import(text)
    assert [conflict.existing_entry_id for conflict in preview.conflicts] == [book.id]

    summary = tracker.confirm_import(text, {0: ImportDecision.REPLACE_EXISTING})

    assert summary.created == 1
    assert summary.replaced == 1
    updated = tracker.db.get_book(book.id)
    assert updated.title == "DUNE"
    assert updated.author == "frank herbert"
    assert updated.state is ReadingState.COMPLETED
    assert updated.progress_percent == 40


def test_confirm_import_keep_existing(tracker, book):
    """Test that keep_existing leaves the library entry alone."""
    text = "Title,Author,Exclusive Shelf\nDune,Frank Herbert,to-read\n"

    summary = tracker.confirm_import(text, {0: "keep_existing"})

    assert summary.skipped == 1
    assert tracker.db.get_book(book.id).state is ReadingState.READING


def test_confirm_import_empty_author_saved_as_none(tracker):
    """Test that rows without an author create books without one."""
    tracker.confirm_import("Title,Author,Exclusive Shelf\nBeowulf,,read\n", {})

    stored = tracker.db.get_books()[0]
    assert stored.author is None
    assert stored.goodreads_search_url == "https://www.goodreads.com/search?q=Beowulf"


def test_confirm_import_counts_duplicate_rows_as_failed(tracker):
    """Test that a book listed twice in one export is only created once."""
    text = "Title,Author,Exclusive Shelf\nDune,Frank Herbert,read\nDune,Frank Herbert,to-read\n"

    summary = tracker.confirm_import(text, {})

    assert summary.created == 1
    assert summary.failed == 1
    assert tracker.db.count_books() == 1
    assert tracker.db.get_books()[0].state is ReadingState.COMPLETED


def test_confirm_import_replace_may_reset_completed_book(tracker):
    """Test that a replace takes the exported shelf even for a completed book."""
    book = tracker.db.add_book("Dune", "Frank Herbert", ReadingState.COMPLETED)
    text = "Title,Author,Exclusive Shelf\nDune,Frank Herbert,to-read\n"

    summary = tracker.confirm_import(text, {0: ImportDecision.REPLACE_EXISTING})

    assert summary.replaced == 1
    assert tracker.db.get_book(book.id).state is ReadingState.TO_READ


# --- reading sessions ---


def test_record_session(tracker, book):
    """Test that a session stores its estimate and updates the book."""
    outcome = tracker.record_session(book.id, 0, 10, chapter_index=3, total_chapters=20, today=TODAY)

    assert outcome.skipped is False
    assert outcome.words == TEN_PERCENT_WORDS
    assert outcome.pages == TEN_PERCENT_PAGES
    assert outcome.book_streak == 1

    sessions = tracker.db.get_sessions(book_id=book.id)
    assert len(sessions) == 1
    assert sessions[0].session_date == TODAY.isoformat()
    assert sessions[0].progress_end == 10

    updated = tracker.db.get_book(book.id)
    assert updated.progress_percent == 10
    assert updated.current_chapter_index == 3
    assert updated.total_chapters == 20
    assert updated.streak_days == 1
    assert updated.last_read_at is not None


def test_record_session_uses_book_length(tracker, book):
    """Test that a per-session word estimate overrides the default book length."""
    outcome = tracker.record_session(book.id, 20, 30, estimated_total_words=25_000, today=TODAY)

    assert outcome.words == 2500
    assert outcome.pages == 10


def test_record_session_without_progress_is_skipped(tracker, book):
    """Test that a session that does not move forward is not stored."""
    outcome = tracker.record_session(book.id, 30, 25, today=TODAY)

    assert outcome.skipped is True
    assert outcome.reason == "no_progress"
    assert tracker.db.get_sessions() == []
    assert tracker.db.get_book(book.id).progress_percent == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"progress_start": -1, "progress_end": 10},
        {"progress_start": 0, "progress_end": 101},
        {"progress_start": 0, "progress_end": 10, "duration_seconds": -5},
        {"progress_start": 0, "progress_end": 10, "chapter_index": -1},
    ],
)
def test_record_session_validates_arguments(tracker, book, kwargs):
    """Test that out-of-range arguments raise ValidationError."""
    with pytest.raises(ValidationError):
        tracker.record_session(book.id, today=TODAY, **kwargs)


def test_record_session_unknown_book(tracker):
    """Test that sessions for unknown books raise NotFoundError."""
    with pytest.raises(NotFoundError):
        tracker.record_session("missing", 0, 10, today=TODAY)


def test_book_streak_grows_across_days(tracker, book):
    """Test that reading on consecutive days extends the book streak."""
    tracker.record_session(book.id, 0, 10, today=YESTERDAY)
    outcome = tracker.record_session(book.id, 10, 20, today=TODAY)

    assert outcome.book_streak == 2
    assert tracker.db.get_book(book.id).streak_days == 2


# --- dashboard ---


def test_dashboard_stats_empty(tracker):
    """Test the dashboard of a library with no reading."""
    stats = tracker.dashboard_stats(today=TODAY)

    assert stats.streak.current_streak == 0
    assert stats.debt.debt == 0
    assert stats.today_pages == 0
    assert stats.today_qualifies is False
    assert len(stats.weekly_activity) == 7
    assert stats.total_pages_all_time == 0


def test_dashboard_stats(tracker, book):
    """Test the dashboard after two days of reading."""
    tracker.db.add_book("Emma", "Jane Austen", ReadingState.COMPLETED)
    tracker.record_session(book.id, 0, 10, today=YESTERDAY)
    tracker.record_session(book.id, 10, 20, today=TODAY)

    stats = tracker.dashboard_stats(today=TODAY)

    assert stats.streak.current_streak == 2
    assert stats.streak.longest_streak == 2
    assert stats.debt.debt == 0
    assert stats.today_pages == TEN_PERCENT_PAGES
    assert stats.today_qualifies is True
    assert stats.weekly_activity[-1].date == TODAY.isoformat()
    assert stats.weekly_activity[-1].total_pages == TEN_PERCENT_PAGES
    assert stats.total_pages_all_time == 2 * TEN_PERCENT_PAGES
    assert stats.total_books_completed == 1


def test_dashboard_stats_reading_debt(tracker, book):
    """Test that debt builds up after missed days."""
    tracker.record_session(book.id, 0, 10, today=TODAY - timedelta(days=5))

    stats = tracker.dashboard_stats(today=TODAY)

    assert stats.streak.current_streak == 0
    assert stats.debt.debt == 4
    assert stats.debt.can_repay_more is True
