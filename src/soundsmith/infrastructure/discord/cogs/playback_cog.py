"""Slash-command cog for core playback: play, playnow, playlist, playlocal, ambient,
pause, resume, stop, leave."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

import discord
from discord import app_commands
from discord.ext import commands

from soundsmith.application.commands.join_voice import JoinVoiceCommand
from soundsmith.application.commands.play_track import PlayMode, PlayTrackCommand, TrackHooks
from soundsmith.domain.shared.exceptions import VoiceJoinError
from soundsmith.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from soundsmith.infrastructure.discord.guards.voice_guards import (
    get_session,
    get_voice_channel,
    send_ephemeral,
)
from soundsmith.utils.reply import truncate

if TYPE_CHECKING:
    from ....application.commands.play_track import HooksFactory
    from ....application.services.playback_session import PlaybackSession
    from ....config.container import Container
    from ....domain.music.entities import MediaInfo

logger = logging.getLogger(__name__)


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._notifications: set[asyncio.Task[None]] = set()

    async def cog_unload(self) -> None:
        for task in list(self._notifications):
            task.cancel()

    # ─────────────────────────────────────────────────────────────────
    # Requester notifications
    # ─────────────────────────────────────────────────────────────────

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._notifications.add(task)
        task.add_done_callback(self._notifications.discard)

    async def _send_notice(self, channel: discord.abc.Messageable, content: str) -> None:
        try:
            await channel.send(content)
        except discord.HTTPException:
            logger.warning(LogTemplates.NOTIFY_FAILED, getattr(channel, "id", None))

    def _hooks_for(self, channel: discord.abc.Messageable | None) -> HooksFactory | None:
        """Build per-track callbacks that post lifecycle notices to ``channel``."""
        if channel is None:
            return None

        def notice(template: str, **values: Any) -> Callable[..., None]:
            def fire(*_: Any) -> None:
                self._spawn(self._send_notice(channel, template.format(**values)))

            return fire

        def factory(media: MediaInfo) -> TrackHooks:
            title = truncate(media.title, 80)

            def on_error(error: Exception) -> None:
                self._spawn(
                    self._send_notice(
                        channel, DiscordUIMessages.NOTIFY_ERROR.format(title=title, error=error)
                    )
                )

            return TrackHooks(
                on_start=notice(DiscordUIMessages.NOTIFY_PLAYING, title=title),
                on_finish=notice(DiscordUIMessages.NOTIFY_FINISHED, title=title),
                on_error=on_error,
            )

        return factory

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    async def _join(self, interaction: discord.Interaction) -> PlaybackSession | None:
        """Join the caller's voice channel (or reuse the session) and return the session."""
        channel = await get_voice_channel(interaction)
        if channel is None or interaction.guild is None:
            return None

        try:
            return await self.container.join_voice_handler.handle(
                JoinVoiceCommand(guild_id=interaction.guild.id, channel_id=channel.id)
            )
        except VoiceJoinError as e:
            if e.timed_out:
                timeout = self.container.settings.voice.connect_timeout_seconds
                message = DiscordUIMessages.ERROR_JOIN_TIMEOUT.format(seconds=timeout)
            else:
                message = DiscordUIMessages.ERROR_JOIN_FAILED
            await send_ephemeral(interaction, message)
            return None

    async def _execute_play(
        self,
        interaction: discord.Interaction,
        query: str,
        mode: PlayMode,
        *,
        at_front: bool = False,
    ) -> None:
        await interaction.response.defer()

        session = await self._join(interaction)
        if session is None or interaction.guild is None:
            return

        user = interaction.user
        command = PlayTrackCommand(
            guild_id=interaction.guild.id,
            user_name=getattr(user, "display_name", user.name),
            query=query,
            mode=mode,
            at_front=at_front,
        )
        result = await self.container.play_track_handler.handle(
            session, command, hooks=self._hooks_for(interaction.channel)
        )
        await interaction.followup.send(result.message, ephemeral=not result.is_success)

    @app_commands.command(name="play", description="Queue a song by URL or search query.")
    @app_commands.describe(query="YouTube URL or search query")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        await self._execute_play(interaction, query, PlayMode.QUEUE)

    @app_commands.command(name="playnow", description="Play a song right away, skipping the current one.")
    @app_commands.describe(query="YouTube URL or search query")
    async def playnow(self, interaction: discord.Interaction, query: str) -> None:
        await self._execute_play(interaction, query, PlayMode.NOW)

    @app_commands.command(name="playlist", description="Queue every track of a playlist.")
    @app_commands.describe(url="Playlist URL", front="Put the playlist ahead of the queue")
    async def playlist(
        self, interaction: discord.Interaction, url: str, front: bool = False
    ) -> None:
        await self._execute_play(interaction, url, PlayMode.PLAYLIST, at_front=front)

    @app_commands.command(name="playlocal", description="Queue a file from the bot's tracks folder.")
    @app_commands.describe(name="File name inside the tracks folder")
    async def playlocal(self, interaction: discord.Interaction, name: str) -> None:
        await self._execute_play(interaction, name, PlayMode.LOCAL)

    @app_commands.command(name="ambient", description="Queue an ambient soundscape.")
    @app_commands.describe(name="Preset name")
    async def ambient(self, interaction: discord.Interaction, name: str) -> None:
        await self._execute_play(interaction, name, PlayMode.AMBIENT)

    @ambient.autocomplete("name")
    async def _ambient_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        current = current.lower()
        return [
            app_commands.Choice(name=preset.title, value=preset.name)
            for preset in self.container.preset_catalog
            if current in preset.name or current in preset.title.lower()
        ][:25]

    # ─────────────────────────────────────────────────────────────────
    # Playback Controls
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="pause", description="Pause the current track.")
    async def pause(self, interaction: discord.Interaction) -> None:
        session = await get_session(interaction, self.container.session_registry)
        if session is None:
            return

        if session.pause():
            await interaction.response.send_message(DiscordUIMessages.ACTION_PAUSED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_TO_PAUSE)

    @app_commands.command(name="resume", description="Resume paused playback.")
    async def resume(self, interaction: discord.Interaction) -> None:
        session = await get_session(interaction, self.container.session_registry)
        if session is None:
            return

        if session.unpause():
            await interaction.response.send_message(DiscordUIMessages.ACTION_UNPAUSED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOT_PAUSED)

    @app_commands.command(name="stop", description="Stop playback and clear the queue.")
    async def stop(self, interaction: discord.Interaction) -> None:
        session = await get_session(interaction, self.container.session_registry)
        if session is None:
            return

        if session.stop_all():
            await interaction.response.send_message(DiscordUIMessages.ACTION_STOPPED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_TO_STOP)

    # ─────────────────────────────────────────────────────────────────
    # Leave
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="leave", description="Disconnect from the voice channel.")
    async def leave(self, interaction: discord.Interaction) -> None:
        if await get_session(interaction, self.container.session_registry) is None:
            return

        assert interaction.guild is not None

        await self.container.session_registry.discard(interaction.guild.id)
        await interaction.response.send_message(DiscordUIMessages.ACTION_LEFT)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
