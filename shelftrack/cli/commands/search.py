"""Search command handler for the shelftrack CLI."""

import json
import logging

from ...config import get_config_value
from ...library import MetadataSearchClient
from ..utils.formatters import format_search_results

logger = logging.getLogger(__name__)


def handle_search(args):
    """Handle the 'search' command to look up book metadata online."""
    logger.info("Starting 'search' command.")
    client = MetadataSearchClient(
        timeout=float(get_config_value("metadata_timeout", MetadataSearchClient.DEFAULT_TIMEOUT)),
        max_results=int(get_config_value("metadata_max_results", MetadataSearchClient.DEFAULT_MAX_RESULTS)),
    )
    results = client.search(args.query)

    if getattr(args, "format", None) == "json":
        print(json.dumps([result.model_dump() for result in results], indent=2))
    else:
        print(format_search_results(results))
