"""
Music Bounded Context

Domain logic for track descriptors, queue state, and shuffle rules.
"""

from soundsmith.domain.music.callbacks import CallbackState, OnceCallback
from soundsmith.domain.music.entities import MediaInfo, PlaybackQueue, TrackDescriptor
from soundsmith.domain.music.services import ShuffleDomainService
from soundsmith.domain.music.value_objects import Gain, ResolvedStream, SinkStatus, StreamType

__all__ = [
    # Entities
    "MediaInfo",
    "TrackDescriptor",
    "PlaybackQueue",
    # Callbacks
    "OnceCallback",
    "CallbackState",
    # Value Objects
    "Gain",
    "ResolvedStream",
    "SinkStatus",
    "StreamType",
    # Services
    "ShuffleDomainService",
]
