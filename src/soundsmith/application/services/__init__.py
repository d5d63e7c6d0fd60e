"""Application services that coordinate playback per guild."""

from soundsmith.application.services.playback_session import PlaybackSession
from soundsmith.application.services.session_registry import SessionRegistry

__all__ = ["PlaybackSession", "SessionRegistry"]
