"""Clock-style duration formatting shared by the domain and the Discord layer."""

from __future__ import annotations

from functools import cache


@cache
def format_duration(seconds: int | float) -> str:
    """Format seconds as ``H:MM:SS``, or ``M:SS`` when under an hour."""
    total_seconds = max(0, int(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
