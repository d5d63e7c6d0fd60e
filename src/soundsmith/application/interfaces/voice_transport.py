"""Port interface for joining and leaving voice channels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .audio_sink import AudioSink


class VoiceTransport(ABC):
    """Interface for Discord voice connection management."""

    @abstractmethod
    async def join(self, guild_id: int, channel_id: int) -> Any:
        """Connect to a voice channel and return the connection handle.

        Suspends until the connection is ready or the configured timeout
        expires; a partially established connection is torn down on expiry.

        Raises:
            VoiceJoinError: On timeout, missing permissions, or a non-voice channel.
        """
        ...

    @abstractmethod
    async def destroy(self, guild_id: int) -> None:
        """Close the guild's voice connection, if any."""
        ...

    @abstractmethod
    def create_sink(self, guild_id: int, connection: Any) -> AudioSink:
        """Build the audio sink that plays through ``connection``."""
        ...

    @abstractmethod
    def is_connected(self, guild_id: int) -> bool:
        ...
