"""Output formatting utilities for CLI commands."""

import csv
import io
import json

from ...database.models import Book
from ...library.models import MetadataResult
from ...models import DashboardStats, ImportPreview, ImportSummary
from ...progress import format_pages, format_relative_date

# Constants for UI display formatting
TABLE_WIDTH = 90
MAX_TITLE_LENGTH = 40
TITLE_TRUNCATE_LENGTH = 37
MAX_AUTHOR_LENGTH = 25
AUTHOR_TRUNCATE_LENGTH = 22
TRUNCATION_SUFFIX = "..."


def _truncate(text: str | None, max_length: int, truncate_length: int) -> str:
    text = text or ""
    if len(text) > max_length:
        return text[:truncate_length] + TRUNCATION_SUFFIX
    return text


def format_import_preview(preview: ImportPreview) -> str:
    """Format an import preview as a table with conflicts marked."""
    output = ["\n--- Import Preview ---"]
    output.append(f"{'Row':<5} {'Title':<40} {'Author':<25} {'State':<10} {'Conflict':<8}")
    output.append("-" * TABLE_WIDTH)

    for p in preview.previews:
        title = _truncate(p.row.title, MAX_TITLE_LENGTH, TITLE_TRUNCATE_LENGTH)
        author = _truncate(p.row.author, MAX_AUTHOR_LENGTH, AUTHOR_TRUNCATE_LENGTH)
        conflict = "yes" if p.has_conflict else ""
        output.append(f"{p.row_index:<5} {title:<40} {author:<25} {p.row.state.label:<10} {conflict:<8}")

    output.append("-" * TABLE_WIDTH)
    output.append(f"Rows: {len(preview.previews)}, Conflicts: {len(preview.conflicts)}")

    if preview.warnings:
        output.append("\nWarnings:")
        output.extend(f"  {warning}" for warning in preview.warnings)

    return "\n".join(output)


def format_import_preview_json(preview: ImportPreview) -> str:
    """Format an import preview as JSON."""
    return preview.model_dump_json(indent=2)


def format_import_summary(summary: ImportSummary) -> str:
    """Format the import summary for display."""
    output = ["\n--- Import Summary ---"]
    output.append(f"Books Created: {summary.created}")
    output.append(f"Books Replaced: {summary.replaced}")
    output.append(f"Conflicts Skipped: {summary.skipped}")
    if summary.failed:
        output.append(f"Rows Failed: {summary.failed}")
    if summary.warnings:
        output.append(f"Warnings: {len(summary.warnings)}")
    return "\n".join(output)


def format_books_text(books: list[Book]) -> str:
    """Format books list as text."""
    output = ["\n--- Books in Library ---"]
    output.append(f"{'ID':<32} {'Title':<40} {'Author':<25} {'State':<10} {'Progress':<8}")
    output.append("-" * (TABLE_WIDTH + 32))

    for book in books:
        title = _truncate(book.title, MAX_TITLE_LENGTH, TITLE_TRUNCATE_LENGTH)
        author = _truncate(book.author, MAX_AUTHOR_LENGTH, AUTHOR_TRUNCATE_LENGTH)
        progress = f"{book.progress_percent}%"
        output.append(f"{book.id:<32} {title:<40} {author:<25} {book.state.label:<10} {progress:<8}")

    output.append("-" * (TABLE_WIDTH + 32))
    output.append(f"Total: {len(books)} books")
    return "\n".join(output)


def format_books_json(books: list[Book]) -> str:
    """Format books as JSON."""
    return json.dumps([book.model_dump(mode="json") for book in books], indent=2)


def format_books_csv(books: list[Book]) -> str:
    """Format books as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["ID", "Title", "Author", "State", "Progress", "Last Read", "Goodreads"])
    for book in books:
        writer.writerow(
            [
                book.id,
                book.title,
                book.author or "",
                book.state.value,
                book.progress_percent,
                book.last_read_at.isoformat() if book.last_read_at else "",
                book.goodreads_search_url or "",
            ]
        )
    return output.getvalue()


def format_dashboard_text(stats: DashboardStats) -> str:
    """Format reading statistics for display."""
    streak = stats.streak
    debt = stats.debt

    output = ["\n--- Reading Stats ---"]
    output.append(f"Current Streak: {streak.current_streak} days")
    output.append(f"Longest Streak: {streak.longest_streak} days")
    output.append(f"Last Qualifying Day: {format_relative_date(streak.last_qualifying_date)}")

    if stats.today_qualifies:
        output.append(f"Today qualifies: {format_pages(stats.today_pages)} read")
    else:
        output.append(f"Today: {format_pages(stats.today_pages)} read")

    if debt.debt:
        output.append(f"Reading Debt: {debt.debt} days (repaid today: {debt.debt_repaid_today})")
        if debt.can_repay_more:
            output.append(f"Read extra pages today to repay {debt.debt - debt.debt_repaid_today} more.")

    output.append("\nLast 7 days:")
    for day in stats.weekly_activity:
        marker = "#" if day.qualifies else "."
        output.append(f"  {day.date} {marker} {format_pages(day.total_pages)}")

    output.append(f"\nTotal Pages Read: {stats.total_pages_all_time}")
    output.append(f"Books Completed: {stats.total_books_completed}")
    return "\n".join(output)


def format_search_results(results: list[MetadataResult]) -> str:
    """Format metadata search results as text."""
    if not results:
        return "No results found."

    output = [f"\n--- {len(results)} results ---"]
    for result in results:
        author = result.author or "Unknown Author"
        output.append(f"{result.title} by {author} [{result.source_label}: {result.source_id}]")
        if result.cover_url:
            output.append(f"  Cover: {result.cover_url}")
    return "\n".join(output)
