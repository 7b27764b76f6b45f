"""shelftrack: a personal reading tracker with Goodreads import and reading-habit analytics."""

__version__ = "0.1.0"
