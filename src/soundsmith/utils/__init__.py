"""Formatting and logging helpers."""

from soundsmith.utils.logging import ColoredFormatter
from soundsmith.utils.reply import format_queue_listing, on_off, parse_skip_range, truncate

__all__ = [
    "ColoredFormatter",
    "format_queue_listing",
    "on_off",
    "parse_skip_range",
    "truncate",
]
