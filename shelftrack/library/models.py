"""Data models for the library catalog and Goodreads import."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReadingState(str, Enum):
    """Reading state of a library entry."""

    TO_READ = "to_read"
    READING = "reading"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        """Human readable label for the state."""
        return READING_STATE_LABELS[self]


READING_STATE_LABELS: dict[ReadingState, str] = {
    ReadingState.TO_READ: "To Read",
    ReadingState.READING: "Reading",
    ReadingState.COMPLETED: "Completed",
}


class ImportDecision(str, Enum):
    """What to do with an imported row that matches an existing entry."""

    KEEP_EXISTING = "keep_existing"
    REPLACE_EXISTING = "replace_existing"
    SKIP_IMPORT = "skip_import"


class CatalogImportRow(BaseModel):
    """A single book row parsed from a Goodreads library export."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, description="Trimmed book title")
    author: str = Field(default="", description="Trimmed author, empty when the export has none")
    shelf: str = Field(default="", description="Exclusive shelf label as found in the export")
    external_id: str | None = Field(default=None, description="Goodreads 'Book Id' value")
    state: ReadingState = Field(default=ReadingState.TO_READ, description="Reading state derived from the shelf")
    warning: str | None = Field(default=None, description="Why the state fell back to a default")


class LibraryEntry(BaseModel):
    """A book already present in the user's library."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    author: str | None = None
    state: ReadingState = ReadingState.TO_READ


class ImportPreviewRow(BaseModel):
    """An import row annotated with its conflict status."""

    model_config = ConfigDict(frozen=True)

    row_index: int = Field(ge=0, description="Zero-based position in the parsed rows")
    row: CatalogImportRow
    has_conflict: bool = False
    existing_entry_id: str | None = None

    @model_validator(mode="after")
    def check_conflict_consistency(self):
        """A conflict always points at an existing entry, and only then."""
        if self.has_conflict != (self.existing_entry_id is not None):
            raise ValueError("has_conflict must be true exactly when existing_entry_id is set")
        return self


class MergeResult(BaseModel):
    """Preview rows split into actionable batches."""

    model_config = ConfigDict(frozen=True)

    creates: list[ImportPreviewRow] = Field(default_factory=list)
    replaces: list[ImportPreviewRow] = Field(default_factory=list)
    skipped: int = 0


class CsvParseSuccess(BaseModel):
    """Rows and row-level warnings from a structurally valid export."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    rows: list[CatalogImportRow] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CsvParseFailure(BaseModel):
    """A structural problem that prevents the export from being read."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    message: str


CsvParseResult = CsvParseSuccess | CsvParseFailure


class MetadataResult(BaseModel):
    """A book found through an online metadata provider."""

    model_config = ConfigDict(frozen=True)

    title: str
    author: str | None = None
    cover_url: str | None = None
    source_id: str
    source_label: Literal["google_books", "open_library"]
