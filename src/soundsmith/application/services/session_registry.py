"""Per-guild registry of live playback sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from soundsmith.domain.shared.exceptions import SessionNotFoundError
from soundsmith.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from soundsmith.application.services.playback_session import PlaybackSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps guild ids to their ``PlaybackSession``.

    Owned by the dependency container; there is at most one session per guild.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, PlaybackSession] = {}

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def guild_ids(self) -> list[int]:
        return list(self._sessions)

    def get(self, guild_id: int) -> PlaybackSession | None:
        return self._sessions.get(guild_id)

    def require(self, guild_id: int) -> PlaybackSession:
        session = self._sessions.get(guild_id)
        if session is None:
            raise SessionNotFoundError(guild_id)
        return session

    def add(self, session: PlaybackSession) -> None:
        if session.guild_id in self._sessions:
            logger.warning(LogTemplates.SESSION_REPLACED, session.guild_id)
        self._sessions[session.guild_id] = session
        logger.info(LogTemplates.SESSION_CREATED, session.guild_id)

    def remove(self, guild_id: int) -> PlaybackSession | None:
        """Forget a guild's session without tearing it down."""
        return self._sessions.pop(guild_id, None)

    async def discard(self, guild_id: int) -> bool:
        """Remove and destroy a guild's session. Returns False if there was none."""
        session = self.remove(guild_id)
        if session is None:
            return False
        await session.destroy()
        return True

    async def close_all(self) -> int:
        closed = 0
        for guild_id in self.guild_ids:
            try:
                if await self.discard(guild_id):
                    closed += 1
            except Exception:
                logger.exception(LogTemplates.VOICE_CLEANUP_ERROR, guild_id)
        logger.info(LogTemplates.SESSIONS_CLOSED, closed)
        return closed
