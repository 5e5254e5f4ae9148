"""Output formatting utilities."""

from park_core.formatters.console import (
    format_currency,
    format_number,
    format_report_for_console,
    format_ride_stats,
    format_worker_stats,
    sanitize_for_console,
)

__all__ = [
    "format_currency",
    "format_number",
    "format_report_for_console",
    "format_ride_stats",
    "format_worker_stats",
    "sanitize_for_console",
]
