"""Command and handler for queueing tracks from a query, playlist, local file, or preset."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from soundsmith.domain.music.entities import MediaInfo, TrackDescriptor
from soundsmith.domain.shared.exceptions import PresetNotFoundError, ResolutionError
from soundsmith.domain.shared.messages import DiscordUIMessages, LogTemplates
from soundsmith.domain.shared.types import DiscordSnowflake, NonEmptyStr, NonNegativeInt

if TYPE_CHECKING:
    from soundsmith.infrastructure.audio.presets import PresetCatalog

    from ..interfaces.audio_resolver import AudioResolver
    from ..services.playback_session import PlaybackSession

logger = logging.getLogger(__name__)


class PlayMode(Enum):
    """Where and how requested tracks enter the queue."""

    QUEUE = "queue"
    NOW = "now"
    PLAYLIST = "playlist"
    LOCAL = "local"
    AMBIENT = "ambient"


class PlayTrackStatus(Enum):
    """Status codes for play track results."""

    QUEUED = "queued"
    PLAYING_NOW = "playing_now"
    QUEUED_MANY = "queued_many"
    TRACK_NOT_FOUND = "track_not_found"
    PLAYLIST_EMPTY = "playlist_empty"
    PRESET_NOT_FOUND = "preset_not_found"


@dataclass(frozen=True)
class TrackHooks:
    """Requester callbacks attached to every descriptor built for one request."""

    on_start: Callable[[], Any] | None = None
    on_finish: Callable[[], Any] | None = None
    on_error: Callable[[Exception], Any] | None = None


HooksFactory = Callable[[MediaInfo], TrackHooks]


class PlayTrackCommand(BaseModel):
    """Request to look up one or more tracks and queue them in a guild's session."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    user_name: NonEmptyStr
    query: NonEmptyStr
    mode: PlayMode = PlayMode.QUEUE
    at_front: bool = False

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class PlayTrackResult(BaseModel):
    """Result of a play track command."""

    model_config = ConfigDict(frozen=True, strict=True, arbitrary_types_allowed=True)

    status: PlayTrackStatus
    message: str
    tracks: list[TrackDescriptor] = Field(default_factory=list)
    queue_position: NonNegativeInt | None = None

    @property
    def is_success(self) -> bool:
        return self.status in {
            PlayTrackStatus.QUEUED,
            PlayTrackStatus.PLAYING_NOW,
            PlayTrackStatus.QUEUED_MANY,
        }

    @property
    def track(self) -> TrackDescriptor | None:
        return self.tracks[0] if self.tracks else None

    @classmethod
    def error(cls, status: PlayTrackStatus, message: str) -> PlayTrackResult:
        return cls(status=status, message=message)


class PlayTrackHandler:
    """Probes the requested source, builds descriptors, and picks the enqueue variant."""

    def __init__(
        self,
        *,
        audio_resolver: AudioResolver,
        preset_catalog: PresetCatalog,
        default_volume: float = 1.0,
    ) -> None:
        self._audio_resolver = audio_resolver
        self._presets = preset_catalog
        self._default_volume = default_volume

    async def handle(
        self,
        session: PlaybackSession,
        command: PlayTrackCommand,
        hooks: HooksFactory | None = None,
    ) -> PlayTrackResult:
        mode = self._effective_mode(command)

        try:
            items, volume = await self._lookup(command.query, mode)
        except PresetNotFoundError:
            return PlayTrackResult.error(
                PlayTrackStatus.PRESET_NOT_FOUND,
                DiscordUIMessages.PRESET_UNKNOWN.format(
                    name=command.query, available=", ".join(self._presets.names)
                ),
            )
        except ResolutionError as e:
            logger.info(LogTemplates.PLAY_LOOKUP_FAILED, command.query, command.guild_id, e)
            return PlayTrackResult.error(
                PlayTrackStatus.TRACK_NOT_FOUND, DiscordUIMessages.ERROR_COULD_NOT_PLAY
            )

        tracks = [self._build(media, command.user_name, volume, hooks) for media in items]
        if not tracks:
            return PlayTrackResult.error(
                PlayTrackStatus.PLAYLIST_EMPTY, DiscordUIMessages.ERROR_PLAYLIST_EMPTY
            )

        if mode is PlayMode.PLAYLIST:
            count = session.enqueue_many(tracks, at_front=command.at_front)
            return PlayTrackResult(
                status=PlayTrackStatus.QUEUED_MANY,
                message=DiscordUIMessages.ACTION_ENQUEUED_MANY.format(count=count),
                tracks=tracks,
            )

        track = tracks[0]
        if mode is PlayMode.NOW:
            session.enqueue_front(track)
            return PlayTrackResult(
                status=PlayTrackStatus.PLAYING_NOW,
                message=DiscordUIMessages.ACTION_PLAYING_NOW.format(title=track.title),
                tracks=tracks,
                queue_position=0,
            )

        position = session.enqueue(track)
        if mode is PlayMode.AMBIENT:
            message = DiscordUIMessages.ACTION_AMBIENT_ENQUEUED.format(name=command.query)
        else:
            message = DiscordUIMessages.ACTION_ENQUEUED.format(title=track.title)
        return PlayTrackResult(
            status=PlayTrackStatus.QUEUED,
            message=message,
            tracks=tracks,
            queue_position=position,
        )

    def _effective_mode(self, command: PlayTrackCommand) -> PlayMode:
        """A plain play request for a playlist URL imports the whole playlist."""
        if (
            command.mode is PlayMode.QUEUE
            and self._audio_resolver.is_url(command.query)
            and self._audio_resolver.is_playlist(command.query)
        ):
            return PlayMode.PLAYLIST
        return command.mode

    async def _lookup(self, query: str, mode: PlayMode) -> tuple[list[MediaInfo], float]:
        match mode:
            case PlayMode.AMBIENT:
                preset = self._presets.get(query)
                return [preset.to_media()], preset.default_gain
            case PlayMode.LOCAL:
                return [await self._audio_resolver.probe_local(query)], self._default_volume
            case PlayMode.PLAYLIST:
                return await self._audio_resolver.probe_playlist(query), self._default_volume
            case _:
                return [await self._audio_resolver.probe(query)], self._default_volume

    @staticmethod
    def _build(
        media: MediaInfo, user_name: str, volume: float, hooks: HooksFactory | None
    ) -> TrackDescriptor:
        track_hooks = hooks(media) if hooks is not None else TrackHooks()
        return TrackDescriptor.from_media(
            media,
            user_name,
            volume_scale=volume,
            on_start=track_hooks.on_start,
            on_finish=track_hooks.on_finish,
            on_error=track_hooks.on_error,
        )
