"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from soundsmith.domain.shared.messages import ErrorMessages

# Exponent of the perceived-loudness curve: a perceived volume of 0.5 maps to
# roughly a third of full linear amplitude.
LOGARITHMIC_EXPONENT: float = 1.660964


class SinkStatus(Enum):
    """Audio output states as reported by the sink.

    The session only reacts to transitions into and out of ``IDLE``, plus the
    entry into ``PLAYING`` that marks a track as started.
    """

    IDLE = "idle"
    BUFFERING = "buffering"
    PLAYING = "playing"
    PAUSED = "paused"

    @property
    def is_active(self) -> bool:
        return self is not SinkStatus.IDLE


class StreamType(Enum):
    """Hint telling the sink how to open a resolved stream."""

    REMOTE = "remote"  # HTTP(S) media URL, needs reconnect options
    LOCAL_FILE = "local_file"


@dataclass(frozen=True)
class ResolvedStream:
    """A playable stream produced just before playback."""

    handle: str
    stream_type: StreamType = StreamType.REMOTE

    def __post_init__(self) -> None:
        if not self.handle or not self.handle.strip():
            raise ValueError(ErrorMessages.EMPTY_STREAM_HANDLE)

    def __str__(self) -> str:
        return self.handle


@dataclass(frozen=True)
class Gain:
    """Perceived output volume in [0, 1]."""

    value: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 1.0:
            raise ValueError(ErrorMessages.INVALID_GAIN)

    def __float__(self) -> float:
        return self.value

    @property
    def linear(self) -> float:
        """Linear amplitude multiplier for the PCM volume transformer."""
        return self.value**LOGARITHMIC_EXPONENT
