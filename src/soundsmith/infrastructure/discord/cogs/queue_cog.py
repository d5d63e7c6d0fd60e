"""Slash-command cog for queue management: view, skip, skiprange, repeat, loop, shuffle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from soundsmith.domain.shared.exceptions import ValidationError
from soundsmith.domain.shared.messages import DiscordUIMessages, ErrorMessages
from soundsmith.infrastructure.discord.guards.voice_guards import get_session, send_ephemeral
from soundsmith.utils.reply import format_queue_listing, on_off, parse_skip_range

if TYPE_CHECKING:
    from ....application.services.playback_session import PlaybackSession
    from ....config.container import Container

logger = logging.getLogger(__name__)


class QueueCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _session(self, interaction: discord.Interaction) -> PlaybackSession | None:
        return await get_session(interaction, self.container.session_registry)

    @app_commands.command(name="queue", description="Show the current queue.")
    async def queue(self, interaction: discord.Interaction) -> None:
        session = await self._session(interaction)
        if session is None:
            return

        display = self.container.settings.display
        listing = format_queue_listing(
            session, max_items=display.queue_max_items, max_chars=display.queue_max_chars
        )
        await interaction.response.send_message(listing)

    # ─────────────────────────────────────────────────────────────────
    # Skipping
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="skip", description="Skip the current track.")
    @app_commands.describe(count="How many tracks to skip, counting the current one")
    async def skip(
        self, interaction: discord.Interaction, count: app_commands.Range[int, 1, 100] = 1
    ) -> None:
        session = await self._session(interaction)
        if session is None:
            return

        if not session.skip_count(count):
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_TO_SKIP)
            return

        if count == 1:
            await interaction.response.send_message(DiscordUIMessages.ACTION_SKIPPED)
        else:
            await interaction.response.send_message(
                DiscordUIMessages.ACTION_SKIPPED_COUNT.format(count=count)
            )

    @app_commands.command(name="skiprange", description="Remove a range of queued tracks.")
    @app_commands.describe(positions="A queue position like `3` or a range like `2-5`")
    async def skiprange(self, interaction: discord.Interaction, positions: str) -> None:
        session = await self._session(interaction)
        if session is None:
            return

        try:
            lo, hi = parse_skip_range(positions)
        except ValidationError as e:
            await send_ephemeral(interaction, e.message)
            return

        removed = session.skip_range(lo, hi)
        if removed:
            await interaction.response.send_message(
                DiscordUIMessages.ACTION_SKIP_RANGE.format(count=removed)
            )
        else:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SKIP_RANGE_NOTHING)

    # ─────────────────────────────────────────────────────────────────
    # Modifiers
    # ─────────────────────────────────────────────────────────────────

    async def _set_flag(
        self, interaction: discord.Interaction, flag: str, enabled: bool
    ) -> None:
        session = await self._session(interaction)
        if session is None:
            return

        match flag:
            case "repeat":
                changed = session.set_repeat(enabled)
                emoji = "\U0001f502"
            case "loop":
                changed = session.set_loop(enabled)
                emoji = "\U0001f501"
            case "shuffle":
                changed = session.set_shuffle(enabled)
                emoji = "\U0001f500"
            case _:
                raise ValueError(ErrorMessages.UNKNOWN_QUEUE_FLAG.format(flag=flag))

        state = on_off(enabled)
        if changed:
            await interaction.response.send_message(
                DiscordUIMessages.ACTION_FLAG_SET.format(
                    emoji=emoji, flag=flag.capitalize(), state=state
                )
            )
        else:
            await send_ephemeral(
                interaction,
                DiscordUIMessages.STATE_FLAG_UNCHANGED.format(flag=flag.capitalize(), state=state),
            )

    @app_commands.command(name="repeat", description="Replay the current track until turned off.")
    @app_commands.describe(enabled="Turn repeat on or off")
    async def repeat(self, interaction: discord.Interaction, enabled: bool) -> None:
        await self._set_flag(interaction, "repeat", enabled)

    @app_commands.command(name="loop", description="Send finished tracks back into the queue.")
    @app_commands.describe(enabled="Turn loop on or off")
    async def loop(self, interaction: discord.Interaction, enabled: bool) -> None:
        await self._set_flag(interaction, "loop", enabled)

    @app_commands.command(name="shuffle", description="Shuffle the queue and keep it shuffled.")
    @app_commands.describe(enabled="Turn shuffle on or off")
    async def shuffle(self, interaction: discord.Interaction, enabled: bool) -> None:
        await self._set_flag(interaction, "shuffle", enabled)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(QueueCog(bot, container))
