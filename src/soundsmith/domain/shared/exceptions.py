"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when user input fails validation before reaching a session."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class ResolutionError(DomainError):
    """Raised when a source reference cannot be turned into playable audio.

    Covers unreachable, deleted, geo-blocked, and malformed references.
    """

    def __init__(self, source_ref: str, reason: str | None = None) -> None:
        msg = f"Could not resolve '{source_ref}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, code="RESOLUTION_ERROR")
        self.source_ref = source_ref
        self.reason = reason


class VoiceJoinError(DomainError):
    """Raised when joining a voice channel fails or times out."""

    def __init__(self, channel_id: int, reason: str | None = None, *, timed_out: bool = False) -> None:
        msg = reason or f"Could not join voice channel {channel_id}"
        super().__init__(msg, code="VOICE_JOIN_TIMEOUT" if timed_out else "VOICE_JOIN_FAILED")
        self.channel_id = channel_id
        self.timed_out = timed_out


class PresetNotFoundError(DomainError):
    """Raised when an ambient preset name is not in the catalogue."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown ambient preset '{name}'", code="PRESET_NOT_FOUND")
        self.name = name


class SessionNotFoundError(DomainError):
    """Raised when an operation needs a playback session that does not exist."""

    def __init__(self, guild_id: int) -> None:
        super().__init__(f"No playback session for guild {guild_id}", code="SESSION_NOT_FOUND")
        self.guild_id = guild_id
