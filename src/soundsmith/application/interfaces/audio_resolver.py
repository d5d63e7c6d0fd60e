"""Port interface for probing and resolving audio sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import MediaInfo
    from ...domain.music.value_objects import ResolvedStream


class AudioResolver(ABC):
    """Turns user queries into media info and source references into streams.

    ``probe`` runs when a track is requested; ``resolve`` runs just before
    playback so queued tracks never hold on to expiring stream URLs.
    """

    @abstractmethod
    async def probe(self, query: str) -> MediaInfo:
        """Look up title and duration for a URL, search query, or local track.

        Raises:
            ResolutionError: If nothing playable matches the query.
        """
        ...

    @abstractmethod
    async def probe_local(self, name: str) -> MediaInfo:
        """Look up a file in the local tracks directory by name.

        Raises:
            ResolutionError: If no such file exists or ``name`` escapes the directory.
        """
        ...

    @abstractmethod
    async def probe_playlist(self, url: str) -> list[MediaInfo]:
        """List the entries of a playlist URL; unplayable entries are skipped."""
        ...

    @abstractmethod
    async def resolve(self, source_ref: str) -> ResolvedStream:
        """Open a playable stream for a source reference.

        Raises:
            ResolutionError: If the source is unreachable, deleted,
                geo-blocked, or malformed.
        """
        ...

    @abstractmethod
    def is_url(self, query: str) -> bool:
        ...

    @abstractmethod
    def is_playlist(self, url: str) -> bool:
        ...
