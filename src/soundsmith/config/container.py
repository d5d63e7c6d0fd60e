"""Wiring for the guild session registry, audio and voice adapters and handlers.

Everything is built lazily on first access so that importing the package
never touches yt-dlp, ffmpeg or the gateway. The voice transport is the one
component that cannot exist before ``set_bot`` has been called.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from soundsmith.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.join_voice import JoinVoiceHandler
    from ..application.commands.play_track import PlayTrackHandler
    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.voice_transport import VoiceTransport
    from ..application.services.session_registry import SessionRegistry
    from ..infrastructure.audio.presets import PresetCatalog
    from .settings import Settings


@dataclass
class Container:
    """Lazily built application graph for one bot process.

    Owns the one ``SessionRegistry`` of the process; everything that needs
    the guild sessions gets it from here.
    """

    settings: Settings
    _bot: Bot | None = None

    _session_registry: SessionRegistry | None = None

    # Infrastructure adapters
    _audio_resolver: AudioResolver | None = None
    _voice_transport: VoiceTransport | None = None
    _preset_catalog: PresetCatalog | None = None

    # Command handlers
    _join_voice_handler: JoinVoiceHandler | None = None
    _play_track_handler: PlayTrackHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        self._bot = bot

    @property
    def bot(self) -> Bot:
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Sessions ===

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry()
        return self._session_registry

    # === Infrastructure Adapters ===

    @property
    def audio_resolver(self) -> AudioResolver:
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(self.settings.audio)
        return self._audio_resolver

    @property
    def voice_transport(self) -> VoiceTransport:
        """Get the voice transport; requires the bot to be set."""
        if self._voice_transport is None:
            from ..infrastructure.discord.adapters.voice_transport import (
                DiscordVoiceTransport,
            )

            self._voice_transport = DiscordVoiceTransport(
                self.bot, self.settings.voice, self.settings.audio
            )
        return self._voice_transport

    @property
    def preset_catalog(self) -> PresetCatalog:
        if self._preset_catalog is None:
            from ..infrastructure.audio.presets import PresetCatalog

            self._preset_catalog = PresetCatalog.load(self.settings.audio.presets_file)
        return self._preset_catalog

    # === Command Handlers ===

    @property
    def join_voice_handler(self) -> JoinVoiceHandler:
        if self._join_voice_handler is None:
            from ..application.commands.join_voice import JoinVoiceHandler

            self._join_voice_handler = JoinVoiceHandler(
                session_registry=self.session_registry,
                voice_transport=self.voice_transport,
                audio_resolver=self.audio_resolver,
            )
        return self._join_voice_handler

    @property
    def play_track_handler(self) -> PlayTrackHandler:
        if self._play_track_handler is None:
            from ..application.commands.play_track import PlayTrackHandler

            self._play_track_handler = PlayTrackHandler(
                audio_resolver=self.audio_resolver,
                preset_catalog=self.preset_catalog,
                default_volume=self.settings.audio.default_volume,
            )
        return self._play_track_handler

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Tear down every live session."""
        if self._session_registry is not None:
            await self._session_registry.close_all()


def create_container(settings: Settings) -> Container:
    """Build an empty container; nothing is constructed until first use."""
    return Container(settings)
