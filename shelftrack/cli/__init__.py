"""Command-line interface for shelftrack."""

from .main import main

__all__ = ["main"]
