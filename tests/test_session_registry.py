"""Tests for SessionRegistry."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from soundsmith.application.services.playback_session import PlaybackSession
from soundsmith.application.services.session_registry import SessionRegistry
from soundsmith.domain.shared.exceptions import SessionNotFoundError

from conftest import GUILD_ID, FakeSink


@pytest.fixture
def registry():
    return SessionRegistry()


def _session(guild_id, resolver, transport=None):
    return PlaybackSession(
        guild_id=guild_id, sink=FakeSink(guild_id), resolver=resolver, transport=transport
    )


class TestSessionRegistry:
    """Unit tests for the per-guild session map."""

    def test_empty_registry(self, registry):
        assert len(registry) == 0
        assert registry.get(GUILD_ID) is None
        assert GUILD_ID not in registry

    def test_add_and_get(self, registry, fake_resolver):
        session = _session(GUILD_ID, fake_resolver)
        registry.add(session)

        assert registry.get(GUILD_ID) is session
        assert registry.require(GUILD_ID) is session
        assert registry.guild_ids == [GUILD_ID]

    def test_require_missing_raises(self, registry):
        with pytest.raises(SessionNotFoundError) as exc_info:
            registry.require(GUILD_ID)
        assert exc_info.value.code == "SESSION_NOT_FOUND"

    def test_add_replaces_existing(self, registry, fake_resolver, caplog):
        first = _session(GUILD_ID, fake_resolver)
        second = _session(GUILD_ID, fake_resolver)

        registry.add(first)
        registry.add(second)

        assert registry.get(GUILD_ID) is second
        assert len(registry) == 1
        assert "Replacing existing playback session" in caplog.text

    def test_remove_does_not_destroy(self, registry, fake_resolver):
        session = _session(GUILD_ID, fake_resolver)
        registry.add(session)

        assert registry.remove(GUILD_ID) is session
        assert not session.closed
        assert registry.remove(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_discard_destroys_session(self, registry, fake_resolver, fake_transport):
        session = _session(GUILD_ID, fake_resolver, fake_transport)
        registry.add(session)

        assert await registry.discard(GUILD_ID) is True

        assert session.closed
        assert GUILD_ID not in registry
        assert fake_transport.destroyed == [GUILD_ID]

    @pytest.mark.asyncio
    async def test_discard_missing_returns_false(self, registry):
        assert await registry.discard(GUILD_ID) is False

    @pytest.mark.asyncio
    async def test_close_all_counts_and_survives_errors(self, registry, fake_resolver):
        registry.add(_session(1, fake_resolver))
        registry.add(_session(2, fake_resolver))
        broken = MagicMock()
        broken.guild_id = 3
        broken.destroy = AsyncMock(side_effect=RuntimeError("voice gone"))
        registry.add(broken)

        closed = await registry.close_all()

        assert closed == 2
        assert len(registry) == 0
