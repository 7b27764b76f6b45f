"""Conflict detection and decision routing for catalog imports."""

import logging
import re
from collections.abc import Iterable, Mapping

from .models import CatalogImportRow, ImportDecision, ImportPreviewRow, LibraryEntry, MergeResult

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "|||"
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_for_match(value: str) -> str:
    """Normalize text for conflict matching: trim, lowercase, collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", value.strip().lower())


def _composite_key(title: str, author: str | None) -> str:
    return f"{normalize_for_match(title)}{KEY_SEPARATOR}{normalize_for_match(author or '')}"


def detect_conflicts(rows: Iterable[CatalogImportRow], entries: Iterable[LibraryEntry]) -> list[ImportPreviewRow]:
    """Match import rows against existing library entries.

    A row conflicts when its normalized title and author match an entry. A
    row without an author falls back to a title-only match, where the first
    entry seen for a title is the one reported. A row that names an author
    never matches on title alone.

    Args:
        rows: Parsed import rows, in import order
        entries: Entries already in the library

    Returns:
        One preview row per import row, in the same order
    """
    by_title_author: dict[str, LibraryEntry] = {}
    by_title: dict[str, LibraryEntry] = {}

    for entry in entries:
        by_title_author[_composite_key(entry.title, entry.author)] = entry
        by_title.setdefault(normalize_for_match(entry.title), entry)

    previews: list[ImportPreviewRow] = []
    for row_index, row in enumerate(rows):
        match = by_title_author.get(_composite_key(row.title, row.author))
        if match is None and not normalize_for_match(row.author):
            match = by_title.get(normalize_for_match(row.title))

        previews.append(
            ImportPreviewRow(
                row_index=row_index,
                row=row,
                has_conflict=match is not None,
                existing_entry_id=match.id if match is not None else None,
            )
        )

    logger.debug(
        "Detected %d conflicts among %d import rows.",
        sum(1 for preview in previews if preview.has_conflict),
        len(previews),
    )
    return previews


def apply_decisions(
    previews: Iterable[ImportPreviewRow], decisions: Mapping[int, ImportDecision | str]
) -> MergeResult:
    """Split preview rows into create and replace batches.

    Rows without a conflict are always created. Conflicting rows are replaced
    only on an explicit ``replace_existing`` decision; every other decision,
    and a missing one, counts the row as skipped.

    Args:
        previews: Rows returned by :func:`detect_conflicts`
        decisions: Decisions keyed by ``row_index``; only conflicts need one

    Returns:
        MergeResult with creates, replaces and the skipped count
    """
    creates: list[ImportPreviewRow] = []
    replaces: list[ImportPreviewRow] = []
    skipped = 0

    for preview in previews:
        if not preview.has_conflict:
            creates.append(preview)
            continue

        decision = decisions.get(preview.row_index)
        if decision is not None and ImportDecision(decision) is ImportDecision.REPLACE_EXISTING:
            replaces.append(preview)
        else:
            skipped += 1

    return MergeResult(creates=creates, replaces=replaces, skipped=skipped)


def find_undecided_conflicts(
    previews: Iterable[ImportPreviewRow], decisions: Mapping[int, ImportDecision | str]
) -> list[int]:
    """Return the row indexes of conflicting rows that have no decision."""
    return [preview.row_index for preview in previews if preview.has_conflict and preview.row_index not in decisions]
