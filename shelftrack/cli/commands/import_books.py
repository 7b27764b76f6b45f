"""Import command handler for the shelftrack CLI."""

import logging
import sys
from pathlib import Path

from ...exceptions import CsvImportError, MissingDecisionsError, ValidationError
from ..utils.common import create_tracker, parse_decisions
from ..utils.formatters import format_import_preview, format_import_preview_json, format_import_summary

logger = logging.getLogger(__name__)


def handle_import(args):
    """Handle the 'import' command."""
    logger.info("Starting 'import' command.")

    export_file = Path(args.file)
    if not export_file.exists():
        logger.critical("Export file not found: %s", export_file)
        sys.exit(1)

    try:
        decisions = parse_decisions(args.decision)
    except ValidationError as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        sys.exit(1)

    app = create_tracker(args)
    try:
        csv_text = app.read_export_file(export_file)
        preview = app.preview_import(csv_text)

        if args.format == "json":
            print(format_import_preview_json(preview))
        else:
            print(format_import_preview(preview))

        if not args.apply:
            if preview.conflicts:
                print("\nResolve conflicts with --decision ROW=keep_existing|replace_existing|skip_import.")
            print("Preview only. Run again with --apply to import.")
            return

        summary = app.confirm_import(csv_text, decisions, strict=not args.skip_undecided)
        print(format_import_summary(summary))

    except MissingDecisionsError as e:
        logger.error("%s Rows: %s", e, e.row_indexes)
        print(f"Error: {e} Rows without a decision: {', '.join(str(i) for i in e.row_indexes)}")
        print("Pass --decision for each of them, or use --skip-undecided.")
        sys.exit(1)
    except CsvImportError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error("Error reading export file: %s", e, exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        app.close_db()
