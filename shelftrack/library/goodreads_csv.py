import logging

from .csv_tokenizer import parse_csv_row, split_csv_lines, strip_bom
from .models import CatalogImportRow, CsvParseFailure, CsvParseResult, CsvParseSuccess, ReadingState

logger = logging.getLogger(__name__)

SHELF_MAP: dict[str, ReadingState] = {
    "to-read": ReadingState.TO_READ,
    "currently-reading": ReadingState.READING,
    "read": ReadingState.COMPLETED,
}

TITLE_COLUMN = "Title"
AUTHOR_COLUMN = "Author"
SHELF_COLUMN = "Exclusive Shelf"
BOOK_ID_COLUMN = "Book Id"
REQUIRED_COLUMNS = (TITLE_COLUMN, AUTHOR_COLUMN, SHELF_COLUMN)

MIN_LINES = 2  # header plus at least one data line


def map_shelf_to_state(shelf: str) -> tuple[ReadingState, str | None]:
    """Map a Goodreads exclusive shelf label to a reading state.

    Unknown labels (including an empty one) fall back to ``to_read`` and
    come back with a warning explaining the fallback.

    Args:
        shelf: Shelf label as it appears in the export

    Returns:
        Tuple of the mapped state and an optional warning
    """
    mapped = SHELF_MAP.get(shelf.strip().lower())
    if mapped is not None:
        return mapped, None
    return ReadingState.TO_READ, f'Unknown shelf "{shelf}" mapped to "To Read"'


class GoodreadsCsvParser:
    """Parser for Goodreads 'Export Library' CSV files."""

    def parse(self, text: str) -> CsvParseResult:
        """Parse export text into catalog rows and row-level warnings.

        Structural problems (no data, missing required columns) are returned
        as a :class:`CsvParseFailure`; problems with individual rows never
        fail the import and are reported as warnings instead.

        Args:
            text: Full CSV text, optionally starting with a BOM

        Returns:
            CsvParseSuccess with rows and warnings, or CsvParseFailure
        """
        lines = split_csv_lines(strip_bom(text))

        if len(lines) < MIN_LINES:
            logger.debug("CSV has %d logical lines; nothing to import.", len(lines))
            return CsvParseFailure(message="CSV file is empty or has no data rows.")

        header_line = lines[0]
        if not header_line:
            return CsvParseFailure(message="CSV file is empty.")

        header_indexes = self._index_headers(parse_csv_row(header_line))
        missing = [column for column in REQUIRED_COLUMNS if column not in header_indexes]
        if missing:
            logger.debug("CSV header is missing columns: %s", missing)
            return CsvParseFailure(message=f"Missing required columns: {', '.join(missing)}")

        rows: list[CatalogImportRow] = []
        warnings: list[str] = []

        for i, line in enumerate(lines[1:], start=1):
            row_number = i + 1
            if not line.strip():
                continue

            fields = parse_csv_row(line)
            title = self._field(fields, header_indexes[TITLE_COLUMN])
            if not title:
                warnings.append(f"Row {row_number}: Skipped — missing title")
                continue

            shelf = self._field(fields, header_indexes[SHELF_COLUMN])
            state, warning = map_shelf_to_state(shelf)
            if warning:
                warnings.append(f"Row {row_number}: {warning}")

            book_id_index = header_indexes.get(BOOK_ID_COLUMN)
            external_id = self._field(fields, book_id_index) if book_id_index is not None else ""

            rows.append(
                CatalogImportRow(
                    title=title,
                    author=self._field(fields, header_indexes[AUTHOR_COLUMN]),
                    shelf=shelf,
                    external_id=external_id or None,
                    state=state,
                    warning=warning,
                )
            )

        logger.debug("Parsed %d rows from CSV with %d warnings.", len(rows), len(warnings))
        return CsvParseSuccess(rows=rows, warnings=warnings)

    @staticmethod
    def _index_headers(headers: list[str]) -> dict[str, int]:
        # Later duplicates overwrite earlier ones
        return {header.strip(): index for index, header in enumerate(headers) if header}

    @staticmethod
    def _field(fields: list[str], index: int) -> str:
        return fields[index].strip() if index < len(fields) else ""


def parse_goodreads_csv(text: str) -> CsvParseResult:
    """Parse a Goodreads export string. See :meth:`GoodreadsCsvParser.parse`."""
    return GoodreadsCsvParser().parse(text)
