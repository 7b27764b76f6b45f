"""Exceptions for the shelftrack application."""


class ShelftrackError(Exception):
    """Base class for all application errors."""

    pass


class ValidationError(ShelftrackError):
    """Error raised when validation fails."""

    pass


class MissingDecisionsError(ValidationError):
    """Error raised when conflicting import rows have no decision."""

    def __init__(self, row_indexes: list[int]):
        self.row_indexes = row_indexes
        super().__init__(f"{len(row_indexes)} conflicting book(s) require a decision.")


class ProcessingError(ShelftrackError):
    """Error raised when processing fails."""

    pass


class CsvImportError(ProcessingError):
    """Error raised when a catalog export cannot be parsed at all."""

    pass


class NotFoundError(ShelftrackError):
    """Error raised when a requested library entry does not exist."""

    pass


class MetadataSearchError(ShelftrackError):
    """Error raised when a metadata provider request fails."""

    pass
