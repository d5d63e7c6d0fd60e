"""Discord bot wiring: cogs, slash-command sync, error replies and shutdown.

``SoundsmithBot`` owns the dependency container. Closing the bot destroys
every playback session first so voice connections are released before the
gateway goes away.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING, Any

import discord
from discord import app_commands
from discord.ext import commands

from soundsmith.domain.shared.exceptions import DomainError
from soundsmith.domain.shared.messages import DiscordUIMessages, LogTemplates
from soundsmith.infrastructure.discord.guards.voice_guards import send_ephemeral

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = (
    "soundsmith.infrastructure.discord.cogs.playback_cog",
    "soundsmith.infrastructure.discord.cogs.queue_cog",
    "soundsmith.infrastructure.discord.cogs.event_cog",
)


def build_intents() -> discord.Intents:
    """Slash commands and voice only; no message content or member lists."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.voice_states = True
    return intents


class SoundsmithBot(commands.Bot):
    def __init__(self, container: Container, settings: Settings, **kwargs: Any) -> None:
        super().__init__(
            command_prefix=commands.when_mentioned_or(settings.discord.command_prefix),
            intents=build_intents(),
            help_command=None,
            owner_ids=set(settings.discord.owner_ids) or None,
            **kwargs,
        )
        self.container = container
        self.settings = settings
        container.set_bot(self)

    # ─────────────────────────────────────────────────────────────────
    # Startup
    # ─────────────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)
        self.tree.on_error = self._on_app_command_error

        loaded = await self._load_cogs()
        logger.info(LogTemplates.BOT_COGS_LOADED_SUMMARY, loaded, len(COGS) - loaded)

        if self.settings.discord.sync_on_startup:
            await self.sync_command_tree()

        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> int:
        """Load every cog in ``COGS``; a broken cog is logged and skipped."""
        loaded = 0
        for name in COGS:
            try:
                await self.load_extension(name)
            except Exception as e:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, name, e)
                continue
            logger.info(LogTemplates.BOT_COG_LOADED, name)
            loaded += 1
        return loaded

    async def sync_command_tree(self) -> int:
        """Push slash commands to the test guilds (instantly) and globally.

        Returns the number of global commands synced, 0 if that sync failed.
        """
        for guild_id in self.settings.discord.test_guild_ids:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            try:
                synced = await self.tree.sync(guild=guild)
            except discord.HTTPException as e:
                logger.warning(LogTemplates.BOT_SYNC_GUILD_FAILED, guild_id, e)
            else:
                logger.info(LogTemplates.BOT_SYNCED_GUILD, len(synced), guild_id)

        try:
            synced = await self.tree.sync()
        except discord.HTTPException as e:
            logger.warning(LogTemplates.BOT_SYNC_GLOBAL_FAILED, e)
            return 0
        logger.info(LogTemplates.BOT_SYNCED_GLOBAL, len(synced))
        return len(synced)

    async def on_ready(self) -> None:
        assert self.user is not None
        logger.info(
            LogTemplates.BOT_READY, self.user, self.user.id, len(self.container.session_registry)
        )
        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.listening, name="/play")
        )

    # ─────────────────────────────────────────────────────────────────
    # Slash-command errors
    # ─────────────────────────────────────────────────────────────────

    async def _on_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        """Reply ephemerally; domain errors carry their own user-facing message."""
        original = getattr(error, "original", error)
        command = getattr(interaction.command, "name", "<unknown>")

        match original:
            case DomainError(code=code, message=message):
                logger.warning(LogTemplates.BOT_SLASH_COMMAND_REJECTED, command, code)
                reply = message
            case _:
                logger.error(LogTemplates.BOT_SLASH_COMMAND_ERROR, command, original)
                reply = DiscordUIMessages.ERROR_OCCURRED.format(error=original)

        try:
            await send_ephemeral(interaction, reply)
        except discord.HTTPException:
            logger.warning(LogTemplates.BOT_ERROR_MESSAGE_SEND_FAILED)

    # ─────────────────────────────────────────────────────────────────
    # Shutdown
    # ─────────────────────────────────────────────────────────────────

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)
        await self.container.shutdown()
        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    async def _close_within(self, timeout: float) -> None:
        try:
            await asyncio.wait_for(self.close(), timeout=timeout)
        except TimeoutError:
            logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, timeout)

    async def serve(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        """Log in and run until closed; SIGINT and SIGTERM trigger a bounded close."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(
                sig, lambda: loop.create_task(self._close_within(shutdown_timeout))
            )
        async with self:
            await self.start(token)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        asyncio.run(self.serve(token, shutdown_timeout=shutdown_timeout))


def create_bot(container: Container, settings: Settings) -> SoundsmithBot:
    return SoundsmithBot(container=container, settings=settings)
