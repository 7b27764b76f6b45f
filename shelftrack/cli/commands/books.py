"""Books command handler for the shelftrack CLI."""

import logging
import sys

from ...exceptions import NotFoundError, ValidationError
from ...library import ReadingState, build_goodreads_search_url
from ..utils.common import create_tracker
from ..utils.formatters import format_books_csv, format_books_json, format_books_text

logger = logging.getLogger(__name__)


def handle_books(args):
    """Handle the 'books' command and its subcommands."""
    logger.info("Starting 'books' command.")
    app = create_tracker(args)

    try:
        command = getattr(args, "books_command", None) or "list"
        if command == "list":
            _handle_books_list(app, args)
        elif command == "add":
            _handle_books_add(app, args)
        elif command == "state":
            _handle_books_state(app, args)
        elif command == "delete":
            _handle_books_delete(app, args)
        else:
            print("Unknown subcommand. Use 'shelftrack books --help' for usage information.")
    except (NotFoundError, ValidationError) as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        app.close_db()


def _handle_books_list(app, args):
    """List books, optionally filtered by state."""
    state = getattr(args, "state", None)
    books = app.db.get_books(ReadingState(state) if state else None)

    output_format = getattr(args, "format", None) or "text"
    if output_format == "json":
        print(format_books_json(books))
    elif output_format == "csv":
        print(format_books_csv(books), end="")
    elif not books:
        print("No books in the library.")
    else:
        print(format_books_text(books))


def _handle_books_add(app, args):
    """Add a single book."""
    book = app.db.add_book(
        title=args.title.strip(),
        author=args.author.strip() if args.author else None,
        state=ReadingState(args.state),
        goodreads_search_url=build_goodreads_search_url(args.title, args.author),
    )
    print(f"Added '{book.title}' with ID {book.id}.")


def _handle_books_state(app, args):
    """Change the reading state of a book."""
    book = app.db.update_book(args.id, state=ReadingState(args.state))
    print(f"'{book.title}' is now {book.state.label}.")


def _handle_books_delete(app, args):
    """Delete a book and its sessions."""
    book = app.db.get_book(args.id)
    if not args.force:
        answer = input(f"Delete '{book.title}' and all of its reading sessions? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Deletion cancelled.")
            return
    app.db.delete_book(book.id)
    print(f"Deleted '{book.title}'.")
