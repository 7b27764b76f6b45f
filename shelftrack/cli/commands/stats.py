"""Stats command handler for the shelftrack CLI."""

import logging

from ..utils.common import create_tracker
from ..utils.formatters import format_dashboard_text

logger = logging.getLogger(__name__)


def handle_stats(args):
    """Handle the 'stats' command to show streaks, debt and weekly activity."""
    logger.info("Starting 'stats' command.")
    app = create_tracker(args)
    try:
        stats = app.dashboard_stats()
    finally:
        app.close_db()

    if getattr(args, "format", None) == "json":
        print(stats.model_dump_json(indent=2))
    else:
        print(format_dashboard_text(stats))
