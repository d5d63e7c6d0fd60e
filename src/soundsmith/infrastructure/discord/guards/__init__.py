"""Guard functions for Discord cogs."""

from soundsmith.infrastructure.discord.guards.voice_guards import (
    get_member,
    get_session,
    get_voice_channel,
    send_ephemeral,
)

__all__ = [
    "get_member",
    "get_session",
    "get_voice_channel",
    "send_ephemeral",
]
