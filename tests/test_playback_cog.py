"""Tests for PlaybackCog slash commands."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from soundsmith.application.commands.play_track import (
    PlayMode,
    PlayTrackResult,
    PlayTrackStatus,
)
from soundsmith.config.settings import VoiceSettings
from soundsmith.domain.music.entities import MediaInfo
from soundsmith.domain.shared.exceptions import VoiceJoinError
from soundsmith.domain.shared.messages import DiscordUIMessages, ErrorMessages
from soundsmith.infrastructure.audio.presets import PresetCatalog
from soundsmith.infrastructure.discord.cogs.playback_cog import PlaybackCog, setup

from conftest import GUILD_ID

VOICE_CHANNEL_ID = 333


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def session():
    s = MagicMock()
    s.pause.return_value = True
    s.unpause.return_value = True
    s.stop_all.return_value = True
    return s


@pytest.fixture
def mock_container(session):
    container = MagicMock()
    container.settings.voice = VoiceSettings()

    container.join_voice_handler.handle = AsyncMock(return_value=session)
    container.play_track_handler.handle = AsyncMock(
        return_value=PlayTrackResult(status=PlayTrackStatus.QUEUED, message="Enqueued **Song**")
    )

    container.session_registry = MagicMock()
    container.session_registry.get.return_value = session
    container.session_registry.discard = AsyncMock(return_value=True)

    container.preset_catalog = PresetCatalog()
    return container


@pytest.fixture
def cog(mock_container):
    return PlaybackCog(MagicMock(), mock_container)


@pytest.fixture
def interaction():
    i = MagicMock(spec=discord.Interaction)
    i.response = MagicMock()
    i.response.is_done.return_value = False
    i.response.send_message = AsyncMock()

    async def _defer(*args, **kwargs):
        i.response.is_done.return_value = True

    i.response.defer = AsyncMock(side_effect=_defer)
    i.followup = MagicMock()
    i.followup.send = AsyncMock()
    i.channel = MagicMock()
    i.channel.send = AsyncMock()

    i.guild = MagicMock()
    i.guild.id = GUILD_ID

    member = MagicMock(spec=discord.Member)
    member.id = 222
    member.display_name = "TestUser"
    member.name = "testuser"
    member.voice = MagicMock()
    member.voice.channel = MagicMock()
    member.voice.channel.id = VOICE_CHANNEL_ID
    i.user = member
    return i


def _after_defer(interaction):
    """The single message a deferred command ended up sending."""
    return interaction.followup.send.call_args


# =============================================================================
# Play commands
# =============================================================================


class TestPlayCommands:
    """The play family joins voice and hands off to the play handler."""

    @pytest.mark.asyncio
    async def test_play_joins_and_queues(self, cog, interaction, mock_container, session):
        await cog.play.callback(cog, interaction, query="never gonna")

        interaction.response.defer.assert_awaited_once()
        join_cmd = mock_container.join_voice_handler.handle.call_args.args[0]
        assert (join_cmd.guild_id, join_cmd.channel_id) == (GUILD_ID, VOICE_CHANNEL_ID)

        call_session, play_cmd = mock_container.play_track_handler.handle.call_args.args
        assert call_session is session
        assert play_cmd.query == "never gonna"
        assert play_cmd.mode is PlayMode.QUEUE
        assert play_cmd.user_name == "TestUser"

        args, kwargs = _after_defer(interaction)
        assert args == ("Enqueued **Song**",)
        assert kwargs["ephemeral"] is False

    @pytest.mark.parametrize(
        ("command", "kwargs", "mode"),
        [
            ("playnow", {"query": "x"}, PlayMode.NOW),
            ("playlocal", {"name": "intro.mp3"}, PlayMode.LOCAL),
            ("ambient", {"name": "rain"}, PlayMode.AMBIENT),
        ],
    )
    @pytest.mark.asyncio
    async def test_modes(self, cog, interaction, mock_container, command, kwargs, mode):
        await getattr(cog, command).callback(cog, interaction, **kwargs)

        play_cmd = mock_container.play_track_handler.handle.call_args.args[1]
        assert play_cmd.mode is mode

    @pytest.mark.asyncio
    async def test_playlist_front(self, cog, interaction, mock_container):
        await cog.playlist.callback(
            cog, interaction, url="https://youtube.com/playlist?list=PL", front=True
        )

        play_cmd = mock_container.play_track_handler.handle.call_args.args[1]
        assert play_cmd.mode is PlayMode.PLAYLIST
        assert play_cmd.at_front is True

    @pytest.mark.asyncio
    async def test_failed_lookup_is_ephemeral(self, cog, interaction, mock_container):
        mock_container.play_track_handler.handle.return_value = PlayTrackResult.error(
            PlayTrackStatus.TRACK_NOT_FOUND, DiscordUIMessages.ERROR_COULD_NOT_PLAY
        )

        await cog.play.callback(cog, interaction, query="missing")

        args, kwargs = _after_defer(interaction)
        assert args == (DiscordUIMessages.ERROR_COULD_NOT_PLAY,)
        assert kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_user_not_in_voice(self, cog, interaction, mock_container):
        interaction.user.voice = None

        await cog.play.callback(cog, interaction, query="x")

        interaction.followup.send.assert_awaited_once_with(
            DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE, ephemeral=True
        )
        mock_container.play_track_handler.handle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_join_timeout_message(self, cog, interaction, mock_container):
        mock_container.join_voice_handler.handle.side_effect = VoiceJoinError(
            VOICE_CHANNEL_ID, "timeout", timed_out=True
        )

        await cog.play.callback(cog, interaction, query="x")

        interaction.followup.send.assert_awaited_once_with(
            DiscordUIMessages.ERROR_JOIN_TIMEOUT.format(seconds=20.0), ephemeral=True
        )
        mock_container.play_track_handler.handle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_join_failure_message(self, cog, interaction, mock_container):
        mock_container.join_voice_handler.handle.side_effect = VoiceJoinError(VOICE_CHANNEL_ID)

        await cog.play.callback(cog, interaction, query="x")

        interaction.followup.send.assert_awaited_once_with(
            DiscordUIMessages.ERROR_JOIN_FAILED, ephemeral=True
        )


# =============================================================================
# Requester notifications
# =============================================================================


class TestNotifications:
    """Per-track hooks post lifecycle notices to the requesting channel."""

    async def _drain(self, cog):
        await asyncio.gather(*cog._notifications)

    @pytest.mark.asyncio
    async def test_hooks_post_notices(self, cog, interaction):
        hooks = cog._hooks_for(interaction.channel)(MediaInfo(source_ref="r", title="Song"))

        hooks.on_start()
        hooks.on_finish()
        hooks.on_error(RuntimeError("gone"))
        await self._drain(cog)

        sent = [c.args[0] for c in interaction.channel.send.call_args_list]
        assert sent == [
            DiscordUIMessages.NOTIFY_PLAYING.format(title="Song"),
            DiscordUIMessages.NOTIFY_FINISHED.format(title="Song"),
            DiscordUIMessages.NOTIFY_ERROR.format(title="Song", error="gone"),
        ]

    @pytest.mark.asyncio
    async def test_send_failure_is_logged(self, cog, interaction, caplog):
        interaction.channel.send.side_effect = discord.HTTPException(MagicMock(), "Failed")
        hooks = cog._hooks_for(interaction.channel)(MediaInfo(source_ref="r", title="Song"))

        hooks.on_start()
        await self._drain(cog)

        assert "Failed to notify requester" in caplog.text

    def test_no_channel_means_no_hooks(self, cog):
        assert cog._hooks_for(None) is None

    @pytest.mark.asyncio
    async def test_play_passes_hooks_factory(self, cog, interaction, mock_container):
        await cog.play.callback(cog, interaction, query="x")

        assert callable(mock_container.play_track_handler.handle.call_args.kwargs["hooks"])


# =============================================================================
# Controls
# =============================================================================


class TestControls:
    @pytest.mark.asyncio
    async def test_pause(self, cog, interaction):
        await cog.pause.callback(cog, interaction)
        interaction.response.send_message.assert_awaited_once_with(DiscordUIMessages.ACTION_PAUSED)

    @pytest.mark.asyncio
    async def test_pause_nothing_playing(self, cog, interaction, session):
        session.pause.return_value = False

        await cog.pause.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_NOTHING_TO_PAUSE, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_resume(self, cog, interaction):
        await cog.resume.callback(cog, interaction)
        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.ACTION_UNPAUSED
        )

    @pytest.mark.asyncio
    async def test_resume_not_paused(self, cog, interaction, session):
        session.unpause.return_value = False

        await cog.resume.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_NOT_PAUSED, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_stop(self, cog, interaction, session):
        await cog.stop.callback(cog, interaction)

        session.stop_all.assert_called_once()
        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.ACTION_STOPPED
        )

    @pytest.mark.asyncio
    async def test_stop_nothing(self, cog, interaction, session):
        session.stop_all.return_value = False

        await cog.stop.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_NOTHING_TO_STOP, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_controls_without_session(self, cog, interaction, mock_container):
        mock_container.session_registry.get.return_value = None

        await cog.pause.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_NOT_PLAYING_IN_SERVER, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_leave(self, cog, interaction, mock_container):
        await cog.leave.callback(cog, interaction)

        mock_container.session_registry.discard.assert_awaited_once_with(GUILD_ID)
        interaction.response.send_message.assert_awaited_once_with(DiscordUIMessages.ACTION_LEFT)

    @pytest.mark.asyncio
    async def test_leave_in_dm(self, cog, interaction, mock_container):
        interaction.guild = None

        await cog.leave.callback(cog, interaction)

        mock_container.session_registry.discard.assert_not_awaited()
        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_SERVER_ONLY, ephemeral=True
        )


# =============================================================================
# Autocomplete and setup
# =============================================================================


class TestAmbientAutocomplete:
    @pytest.mark.asyncio
    async def test_filters_by_name_or_title(self, cog, interaction):
        choices = await cog._ambient_autocomplete(interaction, "RAI")
        assert [c.value for c in choices] == ["rain"]

    @pytest.mark.asyncio
    async def test_empty_input_lists_everything(self, cog, interaction, mock_container):
        choices = await cog._ambient_autocomplete(interaction, "")
        assert len(choices) == len(mock_container.preset_catalog)


class TestSetup:
    @pytest.mark.asyncio
    async def test_setup_requires_container(self):
        bot = MagicMock(spec=["add_cog"])
        with pytest.raises(RuntimeError, match=ErrorMessages.CONTAINER_NOT_FOUND):
            await setup(bot)

    @pytest.mark.asyncio
    async def test_setup_adds_cog(self, mock_container):
        bot = MagicMock()
        bot.container = mock_container
        bot.add_cog = AsyncMock()

        await setup(bot)

        assert isinstance(bot.add_cog.call_args.args[0], PlaybackCog)
