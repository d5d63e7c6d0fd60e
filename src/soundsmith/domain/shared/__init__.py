"""Shared kernel: exceptions, message catalogues, and constrained types."""

from soundsmith.domain.shared.exceptions import (
    DomainError,
    PresetNotFoundError,
    ResolutionError,
    SessionNotFoundError,
    ValidationError,
    VoiceJoinError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "ResolutionError",
    "VoiceJoinError",
    "PresetNotFoundError",
    "SessionNotFoundError",
]
