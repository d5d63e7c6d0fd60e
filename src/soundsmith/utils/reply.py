"""Utility functions for formatting Discord replies and parsing command input."""

from __future__ import annotations

import re
from functools import cache
from typing import TYPE_CHECKING

from soundsmith.domain.shared.exceptions import ValidationError
from soundsmith.domain.shared.messages import DiscordUIMessages, ErrorMessages

if TYPE_CHECKING:
    from soundsmith.application.services.playback_session import PlaybackSession

_SKIP_RANGE_PATTERN = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+))?\s*$")


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def on_off(value: bool) -> str:
    return "on" if value else "off"


def parse_skip_range(value: str) -> tuple[int, int]:
    """Parse ``"3"`` or ``"2-5"`` into inclusive display positions.

    Raises:
        ValidationError: If the text is not a number or a ``lo-hi`` pair, or
            if ``lo`` is greater than ``hi``.
    """
    match = _SKIP_RANGE_PATTERN.match(value)
    if match is None:
        raise ValidationError(ErrorMessages.INVALID_SKIP_RANGE, field="range")

    lo = int(match.group(1))
    hi = int(match.group(2)) if match.group(2) is not None else lo
    if lo > hi:
        raise ValidationError(ErrorMessages.INVERTED_SKIP_RANGE, field="range")
    return lo, hi


def format_queue_listing(
    session: PlaybackSession,
    *,
    max_items: int = 20,
    max_chars: int = 1800,
) -> str:
    """Render the now-playing line, the numbered queue, and a footer.

    At most ``max_items`` entries are listed and the body stays within
    ``max_chars``; anything cut is summarised as "...and N more...".
    """
    current = session.now_playing
    if current is not None:
        header = DiscordUIMessages.QUEUE_NOW_PLAYING.format(title=truncate(current.display_title))
    else:
        header = DiscordUIMessages.QUEUE_NOTHING_PLAYING

    footer = "\n".join(
        (
            DiscordUIMessages.QUEUE_TOTAL.format(duration=session.total_queued_duration()),
            DiscordUIMessages.QUEUE_FLAGS.format(
                repeat=on_off(session.repeat),
                loop=on_off(session.loop),
                shuffle=on_off(session.shuffle),
            ),
        )
    )

    tracks = session.queue
    if not tracks:
        return "\n".join((header, DiscordUIMessages.QUEUE_EMPTY, footer))

    # Leave room for the header, the footer, and a worst-case "more" marker.
    budget = max_chars - len(header) - len(footer) - len(
        DiscordUIMessages.QUEUE_MORE.format(count=len(tracks))
    ) - 3
    lines: list[str] = []
    for index, track in enumerate(tracks[:max_items], start=1):
        line = f"{index}. {truncate(track.display_title)} (added by {truncate(track.added_by, 32)})"
        if len(line) + 1 > budget:
            break
        budget -= len(line) + 1
        lines.append(line)

    remaining = len(tracks) - len(lines)
    if remaining:
        lines.append(DiscordUIMessages.QUEUE_MORE.format(count=remaining))

    return "\n".join((header, *lines, footer))
