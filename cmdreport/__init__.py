"""Cached command reports for WP-CLI maintenance tasks."""

__version__ = "0.1.0"
