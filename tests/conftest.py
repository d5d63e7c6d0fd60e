import random
from typing import Any

import pytest

from soundsmith.application.interfaces.audio_resolver import AudioResolver
from soundsmith.application.interfaces.audio_sink import AudioSink
from soundsmith.application.interfaces.voice_transport import VoiceTransport
from soundsmith.domain.music.entities import MediaInfo, TrackDescriptor
from soundsmith.domain.music.value_objects import Gain, ResolvedStream, SinkStatus, StreamType
from soundsmith.domain.shared.exceptions import ResolutionError

GUILD_ID = 987654321


# ============================================================================
# Port Fakes
# ============================================================================


class FakeSink(AudioSink):
    """In-memory sink: ``play`` goes straight to PLAYING, ``finish`` back to IDLE."""

    def __init__(self, guild_id: int = GUILD_ID) -> None:
        super().__init__(guild_id)
        self.played: list[tuple[str, float]] = []
        self.stop_calls: list[bool] = []
        self.fail_next_play: Exception | None = None

    def play(self, stream: ResolvedStream, gain: Gain) -> None:
        if self.fail_next_play is not None:
            error, self.fail_next_play = self.fail_next_play, None
            raise error
        self.played.append((stream.handle, gain.value))
        self._transition(SinkStatus.BUFFERING)
        self._transition(SinkStatus.PLAYING)

    def finish(self) -> None:
        """Simulate the stream reaching its end."""
        self._transition(SinkStatus.IDLE)

    def pause(self) -> bool:
        if self.status is not SinkStatus.PLAYING:
            return False
        self._transition(SinkStatus.PAUSED)
        return True

    def unpause(self) -> bool:
        if self.status is not SinkStatus.PAUSED:
            return False
        self._transition(SinkStatus.PLAYING)
        return True

    def stop(self, force: bool = False) -> bool:
        self.stop_calls.append(force)
        if self.is_idle:
            return False
        self._transition(SinkStatus.IDLE)
        return True


class FakeResolver(AudioResolver):
    """Resolver that maps ``ref`` to ``stream:ref`` and fails for refs in ``failing``."""

    def __init__(self) -> None:
        self.failing: set[str] = set()
        self.resolved: list[str] = []
        self.gate: Any = None
        self.playlists: dict[str, list[MediaInfo]] = {}
        self.local: dict[str, MediaInfo] = {}

    async def probe(self, query: str) -> MediaInfo:
        if query in self.failing:
            raise ResolutionError(query, "not found")
        return MediaInfo(source_ref=query, title=f"Title of {query}", duration_seconds=60)

    async def probe_local(self, name: str) -> MediaInfo:
        if name not in self.local:
            raise ResolutionError(name, "missing")
        return self.local[name]

    async def probe_playlist(self, url: str) -> list[MediaInfo]:
        return list(self.playlists.get(url, []))

    async def resolve(self, source_ref: str) -> ResolvedStream:
        self.resolved.append(source_ref)
        if self.gate is not None:
            await self.gate.wait()
        if source_ref in self.failing:
            raise ResolutionError(source_ref, "unavailable")
        return ResolvedStream(f"stream:{source_ref}", StreamType.REMOTE)

    def is_url(self, query: str) -> bool:
        return query.startswith(("http://", "https://"))

    def is_playlist(self, url: str) -> bool:
        return "list=" in url


class FakeTransport(VoiceTransport):
    def __init__(self) -> None:
        self.connected: set[int] = set()
        self.joins: list[tuple[int, int]] = []
        self.destroyed: list[int] = []
        self.sinks: list[FakeSink] = []
        self.join_error: Exception | None = None

    async def join(self, guild_id: int, channel_id: int) -> Any:
        self.joins.append((guild_id, channel_id))
        if self.join_error is not None:
            raise self.join_error
        self.connected.add(guild_id)
        return object()

    async def destroy(self, guild_id: int) -> None:
        self.destroyed.append(guild_id)
        self.connected.discard(guild_id)

    def create_sink(self, guild_id: int, connection: Any) -> FakeSink:
        sink = FakeSink(guild_id)
        self.sinks.append(sink)
        return sink

    def is_connected(self, guild_id: int) -> bool:
        return guild_id in self.connected


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_sink():
    return FakeSink()


@pytest.fixture
def fake_resolver():
    return FakeResolver()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_track():
    """Factory for descriptors; hooks default to no-ops."""

    def _make(ref: str = "a", *, added_by: str = "tester", duration: int = 60, **hooks: Any):
        return TrackDescriptor.from_media(
            MediaInfo(source_ref=ref, title=f"Track {ref}", duration_seconds=duration),
            added_by,
            **hooks,
        )

    return _make
