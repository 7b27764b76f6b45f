"""Configuration command handler for the shelftrack CLI."""

import logging
import sys

from ...config import (
    get_config_dir,
    get_config_file_path,
    get_data_dir,
    get_database_path,
    list_config,
    set_config_value,
)
from ...exceptions import ValidationError

logger = logging.getLogger(__name__)


def handle_configure(args):
    """Handle the 'config' command and its subcommands."""
    command = getattr(args, "config_command", None) or "show"

    if command == "show":
        handle_config_show(args)
    elif command == "set":
        handle_config_set(args)
    elif command == "paths":
        handle_config_paths(args)
    else:
        logger.error("Unknown config subcommand: %s", command)
        sys.exit(1)


def handle_config_show(_):
    """Show current configuration."""
    logger.info("Showing current configuration")
    print("\n--- Current Configuration ---")
    for key, value in list_config().items():
        print(f"{key}: {value}")


def handle_config_set(args):
    """Set a configuration value."""
    try:
        saved = set_config_value(args.key, args.value)
    except ValidationError as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        sys.exit(1)

    if not saved:
        print(f"Failed to save configuration value '{args.key}'.")
        sys.exit(1)

    logger.info("Configuration value '%s' set.", args.key)
    print(f"Configuration value '{args.key}' set to '{args.value}'.")


def handle_config_paths(_):
    """Show configuration and data paths."""
    print(f"Configuration directory: {get_config_dir()}")
    print(f"Configuration file: {get_config_file_path()}")
    print(f"Data directory: {get_data_dir()}")
    print(f"Library database: {get_database_path()}")
