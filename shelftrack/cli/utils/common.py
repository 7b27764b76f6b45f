"""Common utility functions for CLI commands."""

import logging

from ...config import get_config_value, get_database_path
from ...core import ShelfTracker
from ...exceptions import ValidationError
from ...library.models import ImportDecision
from ...progress import DEFAULT_BOOK_WORDS

logger = logging.getLogger(__name__)


def get_db_path_cli(args) -> str:
    """Get the library database path from args or configuration."""
    if getattr(args, "db_path", None):
        logger.debug("Using database path from command line argument.")
        return args.db_path
    return get_database_path()


def create_tracker(args) -> ShelfTracker:
    """Create the application object for a CLI command."""
    return ShelfTracker(
        db_path=get_db_path_cli(args),
        estimated_total_words=get_config_value("estimated_total_words", DEFAULT_BOOK_WORDS),
    )


def parse_decisions(values: list[str]) -> dict[int, ImportDecision]:
    """Parse ``ROW=DECISION`` arguments into a decision map.

    Raises:
        ValidationError: If an argument is malformed or names an unknown decision
    """
    decisions: dict[int, ImportDecision] = {}
    for value in values:
        row, sep, decision = value.partition("=")
        if not sep:
            raise ValidationError(f"Decision must look like ROW=DECISION, got '{value}'")
        try:
            row_index = int(row.strip())
        except ValueError as e:
            raise ValidationError(f"Invalid row index in decision '{value}'") from e
        if row_index < 0:
            raise ValidationError(f"Row index must not be negative in decision '{value}'")
        try:
            decisions[row_index] = ImportDecision(decision.strip().lower())
        except ValueError as e:
            choices = ", ".join(d.value for d in ImportDecision)
            raise ValidationError(f"Unknown decision '{decision}' (choose from {choices})") from e
    return decisions
