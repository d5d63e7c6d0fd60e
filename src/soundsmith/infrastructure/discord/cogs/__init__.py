"""Discord cogs - command handlers."""

from soundsmith.infrastructure.discord.cogs.event_cog import EventCog
from soundsmith.infrastructure.discord.cogs.playback_cog import PlaybackCog
from soundsmith.infrastructure.discord.cogs.queue_cog import QueueCog

__all__ = [
    "PlaybackCog",
    "QueueCog",
    "EventCog",
]
