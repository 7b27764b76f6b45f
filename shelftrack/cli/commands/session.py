"""Session command handler for the shelftrack CLI."""

import logging
import sys

from ...exceptions import NotFoundError, ValidationError
from ..utils.common import create_tracker

logger = logging.getLogger(__name__)


def handle_session(args):
    """Handle the 'session' command to record a reading session."""
    logger.info("Starting 'session' command.")
    app = create_tracker(args)

    try:
        outcome = app.record_session(
            book_id=args.book_id,
            progress_start=args.start,
            progress_end=args.end,
            chapter_index=args.chapter,
            total_chapters=args.total_chapters,
            duration_seconds=args.duration,
            estimated_total_words=args.words,
        )
    except (NotFoundError, ValidationError) as e:
        logger.error("Could not record session: %s", e)
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        app.close_db()

    if outcome.skipped:
        print("No forward progress; session not recorded.")
        return

    print(f"Recorded {outcome.pages} pages (~{outcome.words} words). Book streak: {outcome.book_streak} days.")
