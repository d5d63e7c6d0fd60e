"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, voice transport and audio sink adapters)
- Audio (yt-dlp resolution, ambient preset catalog)
"""

from soundsmith.infrastructure.discord.adapters.voice_transport import DiscordVoiceTransport
from soundsmith.infrastructure.discord.bot import create_bot

__all__ = [
    "create_bot",
    "DiscordVoiceTransport",
]
