"""
Application Commands

Command objects and their handlers for operations that change what a guild
is playing.
"""

from soundsmith.application.commands.join_voice import JoinVoiceCommand, JoinVoiceHandler
from soundsmith.application.commands.play_track import (
    PlayMode,
    PlayTrackCommand,
    PlayTrackHandler,
    PlayTrackResult,
    PlayTrackStatus,
    TrackHooks,
)

__all__ = [
    # Join
    "JoinVoiceCommand",
    "JoinVoiceHandler",
    # Play
    "PlayMode",
    "PlayTrackCommand",
    "PlayTrackHandler",
    "PlayTrackResult",
    "PlayTrackStatus",
    "TrackHooks",
]
