"""Reusable guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog. Each one replies
ephemerally and returns None when the check fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from soundsmith.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ....application.services.playback_session import PlaybackSession
    from ....application.services.session_registry import SessionRegistry


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return None

    return user


async def get_voice_channel(
    interaction: discord.Interaction,
) -> discord.VoiceChannel | discord.StageChannel | None:
    """Return the caller's current voice channel."""
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return None

    return member.voice.channel


async def get_session(
    interaction: discord.Interaction, registry: SessionRegistry
) -> PlaybackSession | None:
    """Return the guild's playback session."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    session = registry.get(interaction.guild.id)
    if session is None:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NOT_PLAYING_IN_SERVER)
        return None

    return session
