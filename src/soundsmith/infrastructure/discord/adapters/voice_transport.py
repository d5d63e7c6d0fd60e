"""Discord voice transport: join, leave, and build sinks for voice connections."""

from __future__ import annotations

import asyncio
import logging

import discord

from soundsmith.application.interfaces.voice_transport import VoiceTransport
from soundsmith.config.settings import AudioSettings, VoiceSettings
from soundsmith.domain.shared.exceptions import VoiceJoinError
from soundsmith.domain.shared.messages import ErrorMessages, LogTemplates
from soundsmith.infrastructure.discord.adapters.audio_sink import DiscordAudioSink

logger = logging.getLogger(__name__)


class DiscordVoiceTransport(VoiceTransport):
    def __init__(
        self,
        bot: discord.Client,
        voice_settings: VoiceSettings | None = None,
        audio_settings: AudioSettings | None = None,
    ) -> None:
        self._bot = bot
        self._voice = voice_settings or VoiceSettings()
        self._audio = audio_settings or AudioSettings()

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    async def join(self, guild_id: int, channel_id: int) -> discord.VoiceClient:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            raise VoiceJoinError(channel_id, ErrorMessages.VOICE_GUILD_NOT_FOUND.format(guild_id=guild_id))

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise VoiceJoinError(
                channel_id, ErrorMessages.VOICE_NOT_A_VOICE_CHANNEL.format(channel_id=channel_id)
            )

        timeout = self._voice.connect_timeout_seconds
        existing = self._get_voice_client(guild_id)
        try:
            async with asyncio.timeout(timeout):
                if existing is not None and existing.is_connected():
                    if existing.channel is None or existing.channel.id != channel_id:
                        await existing.move_to(channel)
                    vc = existing
                else:
                    if existing is not None:
                        await existing.disconnect(force=True)
                    vc = await channel.connect(
                        timeout=timeout,
                        reconnect=self._voice.reconnect,
                        self_deaf=self._voice.self_deaf,
                    )
        except TimeoutError as e:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id, timeout)
            await self._teardown(guild_id)
            raise VoiceJoinError(
                channel_id,
                ErrorMessages.VOICE_JOIN_TIMEOUT.format(seconds=timeout),
                timed_out=True,
            ) from e
        except discord.Forbidden as e:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise VoiceJoinError(channel_id, str(e)) from e
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            await self._teardown(guild_id)
            raise VoiceJoinError(channel_id, str(e)) from e

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return vc

    async def _teardown(self, guild_id: int) -> None:
        """Drop a partially established connection."""
        vc = self._get_voice_client(guild_id)
        if vc is None:
            return
        try:
            await vc.disconnect(force=True)
        except Exception:
            logger.exception(LogTemplates.VOICE_CLEANUP_ERROR, guild_id)

    async def destroy(self, guild_id: int) -> None:
        vc = self._get_voice_client(guild_id)
        if vc is None:
            return

        try:
            await vc.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        except Exception:
            logger.exception(LogTemplates.VOICE_CLEANUP_ERROR, guild_id)

    def create_sink(self, guild_id: int, connection: discord.VoiceClient) -> DiscordAudioSink:
        return DiscordAudioSink(
            guild_id,
            connection,
            loop=asyncio.get_running_loop(),
            settings=self._audio,
        )

    def is_connected(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        return vc is not None and vc.is_connected()
