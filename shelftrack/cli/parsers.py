"""Command-line argument parsers for shelftrack."""

import argparse

from .. import __version__
from ..library.models import ImportDecision, ReadingState

STATE_CHOICES = [state.value for state in ReadingState]
DECISION_CHOICES = [decision.value for decision in ImportDecision]


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Track your reading: import a Goodreads library, log sessions and follow your streak.",
        prog="shelftrack",
    )

    _setup_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    _setup_import_command(subparsers)
    _setup_books_command(subparsers)
    _setup_session_command(subparsers)
    _setup_stats_command(subparsers)
    _setup_search_command(subparsers)
    _setup_config_command(subparsers)
    _setup_version_command(subparsers)

    return parser


def _setup_global_options(parser):
    """Set up global options for the CLI."""
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show program's version number and exit."
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from configuration, INFO unless changed).",
    )
    parser.add_argument(
        "--log-file", type=str, default=None, help="Log output to a specified file in addition to the console."
    )
    parser.add_argument(
        "--db-path", type=str, default=None, help="Path to the library database (default: from configuration)."
    )


def _setup_import_command(subparsers):
    """Set up the import command and its options."""
    from .commands.import_books import handle_import

    parser_import = subparsers.add_parser("import", help="Import a Goodreads library export (CSV)")
    parser_import.add_argument("file", type=str, help="Path to the Goodreads 'Export Library' CSV file")
    parser_import.add_argument(
        "--decision",
        "-d",
        action="append",
        default=[],
        metavar="ROW=DECISION",
        help=f"Decision for a conflicting row, e.g. 3=replace_existing ({', '.join(DECISION_CHOICES)}). Repeatable.",
    )
    parser_import.add_argument(
        "--apply", "-a", action="store_true", help="Apply the import; without it only a preview is shown."
    )
    parser_import.add_argument(
        "--skip-undecided",
        action="store_true",
        help="Skip conflicting rows without a decision instead of refusing to import.",
    )
    parser_import.add_argument(
        "--format", type=str, choices=["text", "json"], default="text", help="Output format (default: text)"
    )
    parser_import.set_defaults(func=handle_import)


def _setup_books_command(subparsers):
    """Set up the books command and its subcommands."""
    from .commands.books import handle_books

    parser_books = subparsers.add_parser("books", help="Manage books in the library")
    books_subparsers = parser_books.add_subparsers(dest="books_command", help="Book management commands")

    parser_books_list = books_subparsers.add_parser("list", help="List books in the library")
    parser_books_list.add_argument("--state", type=str, choices=STATE_CHOICES, help="Only show books in this state")
    parser_books_list.add_argument(
        "--format", type=str, choices=["text", "json", "csv"], default="text", help="Output format (default: text)"
    )

    parser_books_add = books_subparsers.add_parser("add", help="Add a book to the library")
    parser_books_add.add_argument("title", type=str, help="Book title")
    parser_books_add.add_argument("--author", type=str, help="Book author")
    parser_books_add.add_argument(
        "--state", type=str, choices=STATE_CHOICES, default=ReadingState.TO_READ.value, help="Reading state"
    )

    parser_books_state = books_subparsers.add_parser("state", help="Change the reading state of a book")
    parser_books_state.add_argument("id", type=str, help="Book ID")
    parser_books_state.add_argument("state", type=str, choices=STATE_CHOICES, help="New reading state")

    parser_books_delete = books_subparsers.add_parser("delete", help="Delete a book and its reading sessions")
    parser_books_delete.add_argument("id", type=str, help="Book ID")
    parser_books_delete.add_argument("--force", "-f", action="store_true", help="Skip confirmation prompt")

    parser_books.set_defaults(func=handle_books)


def _setup_session_command(subparsers):
    """Set up the session command."""
    from .commands.session import handle_session

    parser_session = subparsers.add_parser("session", help="Record a reading session")
    parser_session.add_argument("book_id", type=str, help="ID of the book that was read")
    parser_session.add_argument("start", type=float, help="Reading position at the start (0-100 percent)")
    parser_session.add_argument("end", type=float, help="Reading position at the end (0-100 percent)")
    parser_session.add_argument("--duration", type=int, help="Time spent reading, in seconds")
    parser_session.add_argument("--chapter", type=int, help="Current chapter (0-based)")
    parser_session.add_argument("--total-chapters", type=int, help="Number of chapters in the book")
    parser_session.add_argument("--words", type=int, help="Estimated number of words in the book")
    parser_session.set_defaults(func=handle_session)


def _setup_stats_command(subparsers):
    """Set up the stats command."""
    from .commands.stats import handle_stats

    parser_stats = subparsers.add_parser("stats", help="Show reading streak, debt and weekly activity")
    parser_stats.add_argument(
        "--format", type=str, choices=["text", "json"], default="text", help="Output format (default: text)"
    )
    parser_stats.set_defaults(func=handle_stats)


def _setup_search_command(subparsers):
    """Set up the metadata search command."""
    from .commands.search import handle_search

    parser_search = subparsers.add_parser("search", help="Search Google Books / Open Library for book metadata")
    parser_search.add_argument("query", type=str, help="Title and/or author to search for")
    parser_search.add_argument(
        "--format", type=str, choices=["text", "json"], default="text", help="Output format (default: text)"
    )
    parser_search.set_defaults(func=handle_search)


def _setup_config_command(subparsers):
    """Set up the config command and its subcommands."""
    from .commands.config import handle_configure

    parser_config = subparsers.add_parser("config", help="Configure the application")
    config_subparsers = parser_config.add_subparsers(dest="config_command", help="Configuration commands")

    config_subparsers.add_parser("show", help="Show current configuration")

    parser_config_set = config_subparsers.add_parser("set", help="Set a configuration value")
    parser_config_set.add_argument("key", type=str, help="Configuration key to set")
    parser_config_set.add_argument("value", type=str, help="Value to set")

    config_subparsers.add_parser("paths", help="Show configuration and data paths")

    parser_config.set_defaults(func=handle_configure)


def _setup_version_command(subparsers):
    """Set up the version command."""
    from .commands.version import handle_version

    parser_version = subparsers.add_parser("version", help="Show version information")
    parser_version.set_defaults(func=handle_version)
