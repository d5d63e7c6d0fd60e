"""Core domain entities for the music bounded context."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from soundsmith.domain.music.callbacks import OnceCallback
from soundsmith.domain.music.services import ShuffleDomainService
from soundsmith.domain.shared.durations import format_duration
from soundsmith.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    NonEmptyStr,
    TrackTitleStr,
    UnitInterval,
)


class MediaInfo(BaseModel):
    """Metadata returned when probing a query, URL, or local track."""

    model_config = ConfigDict(frozen=True, strict=True)

    source_ref: NonEmptyStr
    title: TrackTitleStr
    duration_seconds: DurationSeconds = 0


class TrackDescriptor(BaseModel):
    """Immutable description of one playable item plus its lifecycle hooks.

    The source reference is only turned into a stream just before playback,
    so queued descriptors stay cheap. Each hook is an ``OnceCallback``: the
    requester hears about start, finish, and failure at most once no matter
    how many redundant transitions the sink reports.
    """

    model_config = ConfigDict(frozen=True, strict=True, arbitrary_types_allowed=True)

    source_ref: NonEmptyStr
    title: TrackTitleStr
    duration_seconds: DurationSeconds = 0
    added_by: NonEmptyStr
    volume_scale: UnitInterval = 1.0

    on_start: OnceCallback = Field(default_factory=OnceCallback, repr=False)
    on_finish: OnceCallback = Field(default_factory=OnceCallback, repr=False)
    on_error: OnceCallback = Field(default_factory=OnceCallback, repr=False)

    @property
    def duration_formatted(self) -> str:
        return format_duration(self.duration_seconds)

    @property
    def display_title(self) -> str:
        """Title with the duration appended when it is known."""
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title

    @classmethod
    def from_media(
        cls,
        media: MediaInfo,
        added_by: str,
        *,
        volume_scale: float = 1.0,
        on_start: Callable[[], Any] | None = None,
        on_finish: Callable[[], Any] | None = None,
        on_error: Callable[[Exception], Any] | None = None,
    ) -> TrackDescriptor:
        """Build a descriptor whose callbacks can each fire at most once."""
        return cls(
            source_ref=media.source_ref,
            title=media.title,
            duration_seconds=media.duration_seconds,
            added_by=added_by,
            volume_scale=volume_scale,
            on_start=OnceCallback(on_start),
            on_finish=OnceCallback(on_finish),
            on_error=OnceCallback(on_error),
        )


class PlaybackQueue(BaseModel):
    """Queue state for a single guild: pending tracks, current track, and flags.

    Holds no I/O. The playback session layers the audio sink and resolver on
    top and decides *when* to call ``take_next``; this class decides *what*
    comes next.
    """

    model_config = ConfigDict(strict=True, arbitrary_types_allowed=True)

    guild_id: DiscordSnowflake
    tracks: list[TrackDescriptor] = Field(default_factory=list)
    current: TrackDescriptor | None = None

    repeat: bool = False
    loop: bool = False
    shuffle: bool = False

    # Set by an explicit skip; consumed by the next take_next() call.
    just_skipped: bool = False

    _rng: random.Random = PrivateAttr(default_factory=random.Random)

    def __init__(self, *, rng: random.Random | None = None, **data: Any) -> None:
        super().__init__(**data)
        if rng is not None:
            self._rng = rng

    @property
    def queue_length(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    def peek(self) -> TrackDescriptor | None:
        return self.tracks[0] if self.tracks else None

    def has_next(self) -> bool:
        """Whether an advance could pick something to play."""
        if self.tracks:
            return True
        return self.current is not None and (self.loop or self.repeat)

    # === Queue edits ===

    def push(self, track: TrackDescriptor) -> int:
        """Append a track and return its zero-based queue position."""
        self.tracks.append(track)
        return len(self.tracks) - 1

    def push_front(self, track: TrackDescriptor) -> None:
        self.tracks.insert(0, track)

    def extend(self, tracks: Iterable[TrackDescriptor], *, at_front: bool = False) -> int:
        """Insert a batch, shuffling it first when the shuffle flag is set."""
        batch = list(tracks)
        if self.shuffle:
            ShuffleDomainService.shuffle(batch, self._rng)

        if at_front:
            self.tracks[0:0] = batch
        else:
            self.tracks.extend(batch)
        return len(batch)

    def drop_leading(self, count: int) -> int:
        """Remove up to ``count`` tracks from the head of the queue."""
        count = max(0, min(count, len(self.tracks)))
        del self.tracks[:count]
        return count

    def remove_display_range(self, lo: int, hi: int) -> int:
        """Remove tracks shown at 1-based positions ``lo`` through ``hi``.

        Bounds are clamped to ``[1, queue_length]``; an inverted or empty
        range removes nothing.
        """
        lo = max(lo, 1)
        hi = min(hi, len(self.tracks))
        if lo > hi:
            return 0

        del self.tracks[lo - 1 : hi]
        return hi - lo + 1

    def clear(self) -> int:
        count = len(self.tracks)
        self.tracks.clear()
        return count

    def mark_skipped(self) -> None:
        self.just_skipped = True

    # === Flags ===

    def set_repeat(self, enabled: bool) -> bool:
        changed = self.repeat != enabled
        self.repeat = enabled
        return changed

    def set_loop(self, enabled: bool) -> bool:
        changed = self.loop != enabled
        self.loop = enabled
        return changed

    def set_shuffle(self, enabled: bool) -> bool:
        """Set the shuffle flag; turning it on always reshuffles and reports a change."""
        if enabled:
            self.shuffle = True
            self.reshuffle()
            return True

        changed = self.shuffle
        self.shuffle = False
        return changed

    def reshuffle(self) -> None:
        ShuffleDomainService.shuffle(self.tracks, self._rng)

    # === Advance selection ===

    def take_next(self) -> TrackDescriptor | None:
        """Choose the next track and update the queue accordingly.

        Without a pending skip, ``repeat`` (or ``loop`` with nothing else
        queued) replays the current track. Otherwise the head is popped and,
        under ``loop``, the outgoing track goes back into the queue. The skip
        marker is consumed either way.
        """
        outgoing = self.current
        skipped = self.just_skipped
        self.just_skipped = False

        if (
            not skipped
            and outgoing is not None
            and (self.repeat or (not self.tracks and self.loop))
        ):
            outgoing.on_start.clear()
            return outgoing

        if not self.tracks:
            return None

        upcoming = self.tracks.pop(0)
        if self.loop and outgoing is not None:
            self._requeue(outgoing)
        return upcoming

    def _requeue(self, track: TrackDescriptor) -> None:
        if self.shuffle:
            index = ShuffleDomainService.biased_insert_index(len(self.tracks), self._rng)
            self.tracks.insert(index, track)
        else:
            self.tracks.append(track)

    # === Display ===

    @property
    def total_queued_seconds(self) -> int:
        return sum(track.duration_seconds for track in self.tracks)

    def total_queued_duration(self) -> str:
        """Sum of pending track durations as ``H:MM:SS`` (``M:SS`` under an hour)."""
        return format_duration(self.total_queued_seconds)
