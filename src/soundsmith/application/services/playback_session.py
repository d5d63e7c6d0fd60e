"""Playback session: one queue and one audio sink per guild.

The session serialises access to the guild's queue and drives a
single-track-at-a-time lifecycle. Queue edits are synchronous; every edit that
could make something playable schedules an *advance* attempt, and so does the
sink whenever it drops back to ``IDLE``. Advance attempts are serialised by a
per-session lock: an attempt that finds the lock held, or the sink busy, is a
no-op, so the overlapping triggers never pop the queue twice.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterable
from typing import TYPE_CHECKING

from soundsmith.domain.music.entities import PlaybackQueue, TrackDescriptor
from soundsmith.domain.music.value_objects import Gain, SinkStatus
from soundsmith.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from soundsmith.domain.music.callbacks import OnceCallback
    from soundsmith.application.interfaces.audio_resolver import AudioResolver
    from soundsmith.application.interfaces.audio_sink import AudioSink
    from soundsmith.application.interfaces.voice_transport import VoiceTransport

logger = logging.getLogger(__name__)


class PlaybackSession:
    """Queue, playback flags, and the active audio sink for one guild."""

    def __init__(
        self,
        *,
        guild_id: int,
        sink: AudioSink,
        resolver: AudioResolver,
        transport: VoiceTransport | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.guild_id = guild_id
        self._sink = sink
        self._resolver = resolver
        self._transport = transport
        self._state = PlaybackQueue(guild_id=guild_id, rng=rng)

        self._advance_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()
        self._closed = False
        # Set while the sink is being handed a track; an IDLE seen then means the start failed.
        self._starting = False
        self._stops = 0

        self._unsubscribe = sink.subscribe(self._on_sink_transition)

    # === Read access ===

    @property
    def queue(self) -> tuple[TrackDescriptor, ...]:
        return tuple(self._state.tracks)

    @property
    def current(self) -> TrackDescriptor | None:
        return self._state.current

    @property
    def now_playing(self) -> TrackDescriptor | None:
        """The loaded track while the sink is active, else None."""
        if self._sink.is_idle:
            return None
        return self._state.current

    @property
    def repeat(self) -> bool:
        return self._state.repeat

    @property
    def loop(self) -> bool:
        return self._state.loop

    @property
    def shuffle(self) -> bool:
        return self._state.shuffle

    @property
    def busy(self) -> bool:
        """True while an advance attempt holds the session."""
        return self._advance_lock.locked()

    @property
    def sink_status(self) -> SinkStatus:
        return self._sink.status

    @property
    def closed(self) -> bool:
        return self._closed

    def total_queued_duration(self) -> str:
        return self._state.total_queued_duration()

    # === Enqueue ===

    def enqueue(self, track: TrackDescriptor) -> int:
        """Append a track and return its 1-based display position."""
        position = self._state.push(track) + 1
        logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, self.guild_id)
        self._schedule_advance()
        return position

    def enqueue_front(self, track: TrackDescriptor) -> None:
        """Put a track at the head of the queue and skip whatever is playing."""
        self._state.push_front(track)
        logger.info(LogTemplates.QUEUE_ENQUEUED_FRONT, track.title, self.guild_id)
        self._force_skip()

    def enqueue_many(self, tracks: Iterable[TrackDescriptor], at_front: bool = False) -> int:
        """Insert a batch of tracks; returns how many were added."""
        count = self._state.extend(tracks, at_front=at_front)
        logger.info(LogTemplates.QUEUE_ENQUEUED_MANY, count, at_front, self.guild_id)
        if at_front:
            self._force_skip()
        else:
            self._schedule_advance()
        return count

    # === Skip / stop ===

    def skip_one(self) -> bool:
        """Skip the current track. Returns False if the sink was already idle."""
        return self.skip_count(1)

    def skip_count(self, count: int) -> bool:
        """Skip forward ``count`` tracks counting the current one."""
        dropped = self._state.drop_leading(count - 1)
        logger.info(LogTemplates.SKIP_REQUESTED, self.guild_id, dropped)
        return self._force_skip()

    def skip_range(self, lo: int, hi: int) -> int:
        """Remove tracks at display positions ``lo``..``hi`` and return how many went.

        Position 0 is the current track, so a range starting there skips
        forward instead. Otherwise this is a pure queue edit.
        """
        if lo == 0:
            available = min(hi, self._state.queue_length)
            was_playing = self.skip_count(hi + 1)
            return available + (1 if was_playing else 0)

        removed = self._state.remove_display_range(lo, hi)
        if removed:
            logger.info(LogTemplates.QUEUE_RANGE_REMOVED, removed, lo, hi, self.guild_id)
        return removed

    def stop_all(self) -> bool:
        """Clear the queue and stop playback; False if there was nothing to stop."""
        had_anything = not self._state.is_empty or not self._sink.is_idle or self.busy
        # A track still resolving is dropped once it arrives.
        self._stops += 1
        cleared = self._state.clear()
        self._force_skip()
        logger.info(LogTemplates.QUEUE_STOPPED, cleared, self.guild_id)
        return had_anything

    def pause(self) -> bool:
        return self._sink.pause()

    def unpause(self) -> bool:
        return self._sink.unpause()

    def _force_skip(self) -> bool:
        was_active = not self._sink.is_idle
        self._state.mark_skipped()
        self._sink.stop(force=True)
        self._schedule_advance()
        return was_active

    # === Flags ===

    def set_repeat(self, enabled: bool) -> bool:
        changed = self._state.set_repeat(enabled)
        logger.info(LogTemplates.QUEUE_FLAG_CHANGED, "repeat", enabled, self.guild_id, changed)
        return changed

    def set_loop(self, enabled: bool) -> bool:
        changed = self._state.set_loop(enabled)
        logger.info(LogTemplates.QUEUE_FLAG_CHANGED, "loop", enabled, self.guild_id, changed)
        return changed

    def set_shuffle(self, enabled: bool) -> bool:
        changed = self._state.set_shuffle(enabled)
        logger.info(LogTemplates.QUEUE_FLAG_CHANGED, "shuffle", enabled, self.guild_id, changed)
        return changed

    # === Advance cycle ===

    async def advance(self) -> None:
        """Start the next track if the sink is idle and nothing else is advancing.

        A track that fails to resolve or start is reported through its
        ``on_error`` hook and the next one is tried; such failures never
        propagate to the caller.
        """
        while await self._advance_once():
            pass

    async def _advance_once(self) -> bool:
        """Run one advance attempt; returns True when a failed track should be followed by a retry."""
        if self._closed or self._advance_lock.locked() or not self._sink.is_idle:
            if self._advance_lock.locked():
                logger.debug(LogTemplates.ADVANCE_BUSY, self.guild_id)
            return False

        if not self._state.has_next():
            if self._state.current is not None:
                logger.info(LogTemplates.QUEUE_EXHAUSTED, self.guild_id)
            self._state.current = None
            return False

        async with self._advance_lock:
            outgoing = self._state.current
            upcoming = self._state.take_next()
            if upcoming is None:
                self._state.current = None
                logger.info(LogTemplates.QUEUE_EXHAUSTED, self.guild_id)
                return False

            if upcoming is outgoing:
                logger.info(LogTemplates.ADVANCE_REPLAYING, upcoming.title, self.guild_id)

            try:
                logger.debug(LogTemplates.ADVANCE_RESOLVING, upcoming.title, self.guild_id)
                stops = self._stops
                stream = await self._resolver.resolve(upcoming.source_ref)
                if self._closed:
                    return False
                if self._stops != stops:
                    logger.info(
                        LogTemplates.ADVANCE_DROPPED_AFTER_STOP, upcoming.title, self.guild_id
                    )
                    self._state.current = None
                    return False

                self._state.current = upcoming
                logger.info(LogTemplates.ADVANCE_PLAYING, upcoming.title, self.guild_id)
                self._starting = True
                try:
                    self._sink.play(stream, Gain(upcoming.volume_scale))
                finally:
                    self._starting = False
                return False
            except Exception as exc:
                failure = exc
                # A failed track is not kept as current, so repeat/loop cannot pick it again.
                self._state.current = None

        logger.warning(LogTemplates.ADVANCE_FAILED, upcoming.title, self.guild_id, failure)
        self._fire(upcoming.on_error, upcoming, failure)
        return not self._closed

    def _on_sink_transition(self, old: SinkStatus, new: SinkStatus) -> None:
        if new is SinkStatus.IDLE and old is not SinkStatus.IDLE:
            if self._starting:
                return
            outgoing = self._state.current
            if outgoing is not None:
                self._fire(outgoing.on_finish, outgoing)
            self._schedule_advance()
        elif new is SinkStatus.PLAYING:
            current = self._state.current
            if current is not None:
                self._fire(current.on_start, current)

    def _fire(self, callback: OnceCallback, track: TrackDescriptor, *args: object) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception(LogTemplates.CALLBACK_FAILED, callback, track.title)

    def _schedule_advance(self) -> None:
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(
            self.advance(), name=f"soundsmith-advance-{self.guild_id}"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_for_advance(self) -> None:
        """Wait until every scheduled advance attempt has finished."""
        while True:
            pending = [task for task in self._pending if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # === Teardown ===

    async def destroy(self) -> None:
        """Clear the queue, stop output, and close the voice connection."""
        if self._closed:
            return
        self._closed = True

        self._unsubscribe()
        self._state.clear()
        self._state.current = None
        self._sink.stop(force=True)

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        if self._transport is not None:
            await self._transport.destroy(self.guild_id)
        logger.info(LogTemplates.SESSION_DESTROYED, self.guild_id)
