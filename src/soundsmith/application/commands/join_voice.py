"""Command and handler for joining a voice channel and opening a playback session."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from soundsmith.application.services.playback_session import PlaybackSession
from soundsmith.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.voice_transport import VoiceTransport
    from ..services.session_registry import SessionRegistry


class JoinVoiceCommand(BaseModel):
    """Request to make sure the bot is playing in a guild's voice channel."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    channel_id: DiscordSnowflake


class JoinVoiceHandler:
    """Returns the guild's live session, joining the channel first if needed.

    A join failure propagates as ``VoiceJoinError`` and no session is
    registered. A registered session whose connection has gone away is
    destroyed and replaced.
    """

    def __init__(
        self,
        *,
        session_registry: SessionRegistry,
        voice_transport: VoiceTransport,
        audio_resolver: AudioResolver,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = session_registry
        self._transport = voice_transport
        self._resolver = audio_resolver
        self._rng = rng

    async def handle(self, command: JoinVoiceCommand) -> PlaybackSession:
        session = self._registry.get(command.guild_id)
        if session is not None:
            if self._transport.is_connected(command.guild_id):
                return session
            await self._registry.discard(command.guild_id)

        connection = await self._transport.join(command.guild_id, command.channel_id)
        sink = self._transport.create_sink(command.guild_id, connection)

        session = PlaybackSession(
            guild_id=command.guild_id,
            sink=sink,
            resolver=self._resolver,
            transport=self._transport,
            rng=self._rng,
        )
        self._registry.add(session)
        return session
