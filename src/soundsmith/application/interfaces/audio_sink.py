"""Port interface for a per-guild audio output."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from soundsmith.domain.music.value_objects import SinkStatus
from soundsmith.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.value_objects import Gain, ResolvedStream

logger = logging.getLogger(__name__)

SinkListener = Callable[[SinkStatus, SinkStatus], None]
"""Called with ``(old_status, new_status)`` on every status change."""


class AudioSink(ABC):
    """Audio output for one guild with observable status transitions.

    Implementations call ``_transition`` whenever the underlying player
    changes state; subscribers are notified synchronously, on the event loop.
    """

    def __init__(self, guild_id: int) -> None:
        self.guild_id = guild_id
        self._status = SinkStatus.IDLE
        self._listeners: list[SinkListener] = []

    @property
    def status(self) -> SinkStatus:
        return self._status

    @property
    def is_idle(self) -> bool:
        return self._status is SinkStatus.IDLE

    def subscribe(self, listener: SinkListener) -> Callable[[], None]:
        """Register a status listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, new_status: SinkStatus) -> None:
        old_status = self._status
        if old_status is new_status:
            return

        self._status = new_status
        logger.debug(LogTemplates.SINK_TRANSITION, self.guild_id, old_status.value, new_status.value)
        for listener in list(self._listeners):
            try:
                listener(old_status, new_status)
            except Exception:
                logger.exception(LogTemplates.SINK_LISTENER_FAILED, self.guild_id)

    @abstractmethod
    def play(self, stream: ResolvedStream, gain: Gain) -> None:
        """Start playing a stream at the given gain."""
        ...

    @abstractmethod
    def pause(self) -> bool:
        """Pause playback; returns False when nothing was playing."""
        ...

    @abstractmethod
    def unpause(self) -> bool:
        """Resume paused playback; returns False when not paused."""
        ...

    @abstractmethod
    def stop(self, force: bool = False) -> bool:
        """Stop the current stream; the sink then reports ``IDLE``.

        Returns False when the sink was already idle.
        """
        ...
