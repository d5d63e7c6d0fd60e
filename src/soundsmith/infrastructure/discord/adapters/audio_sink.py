"""AudioSink over a discord.py voice client using FFmpeg."""

from __future__ import annotations

import asyncio
import logging

import discord

from soundsmith.application.interfaces.audio_sink import AudioSink
from soundsmith.config.settings import AudioSettings
from soundsmith.domain.music.value_objects import Gain, ResolvedStream, SinkStatus, StreamType
from soundsmith.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

FADE_IN_SECONDS: float = 0.5

# Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"


class DiscordAudioSink(AudioSink):
    """Plays resolved streams through one guild's ``discord.VoiceClient``.

    discord.py invokes the ``after`` callback on its player thread; the
    resulting ``IDLE`` transition is marshalled back onto the event loop so
    listeners always run there. Each ``play`` call gets a generation number
    and callbacks from an older generation are ignored, so a stale end-of-track
    signal can never finish the track that replaced it.
    """

    def __init__(
        self,
        guild_id: int,
        voice_client: discord.VoiceClient,
        *,
        loop: asyncio.AbstractEventLoop,
        settings: AudioSettings | None = None,
    ) -> None:
        super().__init__(guild_id)
        self._voice_client = voice_client
        self._loop = loop
        self._settings = settings or AudioSettings()
        self._generation = 0

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    def _create_source(self, stream: ResolvedStream, gain: Gain) -> discord.PCMVolumeTransformer:
        options = f'{self._settings.ffmpeg_options} -af "afade=t=in:ss=0:d={FADE_IN_SECONDS}"'
        if stream.stream_type is StreamType.REMOTE:
            # User-Agent must match yt-dlp's Android client to prevent YouTube 403
            before_options = (
                f'{self._settings.ffmpeg_before_options} -headers "User-Agent: {ANDROID_USER_AGENT}"'
            )
            source = discord.FFmpegPCMAudio(
                stream.handle, before_options=before_options, options=options
            )
        else:
            source = discord.FFmpegPCMAudio(stream.handle, options=options)
        return discord.PCMVolumeTransformer(source, volume=gain.linear)

    def play(self, stream: ResolvedStream, gain: Gain) -> None:
        vc = self._voice_client
        if vc.is_playing() or vc.is_paused():
            self._generation += 1
            vc.stop()

        self._generation += 1
        generation = self._generation

        def after_callback(error: Exception | None = None) -> None:
            self._loop.call_soon_threadsafe(self._on_source_finished, generation, error)

        # Status only moves once the voice client accepted the source.
        try:
            vc.play(self._create_source(stream, gain), after=after_callback)
        except Exception:
            if not self.is_idle:
                self._transition(SinkStatus.IDLE)
            raise
        self._transition(SinkStatus.BUFFERING)
        self._transition(SinkStatus.PLAYING)

    def _on_source_finished(self, generation: int, error: Exception | None) -> None:
        if generation != self._generation:
            return
        if error:
            logger.warning(LogTemplates.SINK_PLAYBACK_ERROR, self.guild_id, error)
        self._transition(SinkStatus.IDLE)

    def pause(self) -> bool:
        if not self._voice_client.is_playing():
            return False
        self._voice_client.pause()
        self._transition(SinkStatus.PAUSED)
        return True

    def unpause(self) -> bool:
        if not self._voice_client.is_paused():
            return False
        self._voice_client.resume()
        self._transition(SinkStatus.PLAYING)
        return True

    def stop(self, force: bool = False) -> bool:
        """Stop output immediately; a sink still buffering is only stopped when forced."""
        if self.is_idle:
            return False
        if self.status is SinkStatus.BUFFERING and not force:
            return False

        self._generation += 1
        if self._voice_client.is_playing() or self._voice_client.is_paused():
            self._voice_client.stop()
        self._transition(SinkStatus.IDLE)
        return True
