#!/usr/bin/env python3
"""Main entry point for Soundsmith."""

from __future__ import annotations

import argparse
import json
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from soundsmith import __version__
from soundsmith.domain.shared.messages import ErrorMessages, LogTemplates
from soundsmith.utils.logging import ColoredFormatter

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FALLBACK_DATEFMT = "%Y-%m-%d %H:%M:%S"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _read_logging_config(config_path: Path) -> dict[str, Any]:
    with open(config_path, encoding="utf-8") as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"{config_path} must contain a JSON object")
    return config


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Apply the dictConfig in ``config_path``, or a coloured console handler if it is unusable."""
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        logging.config.dictConfig(_read_logging_config(config_path))
    except (OSError, ValueError) as e:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColoredFormatter(_FALLBACK_FORMAT, _FALLBACK_DATEFMT, stream=sys.stdout))
        logging.basicConfig(level=resolved_level, handlers=[handler])
        logging.getLogger(__name__).warning(LogTemplates.LOGGING_CONFIG_FALLBACK, config_path, e)

    logging.getLogger().setLevel(resolved_level)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="soundsmith", description="Discord bot that plays queued audio in voice channels."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=_LOG_LEVELS,
        help="Override LOG_LEVEL from the environment",
    )
    parser.add_argument(
        "--no-sync",
        action="store_true",
        help="Skip slash-command sync on startup",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    from soundsmith.config.settings import get_settings

    args = _parse_args(argv)
    settings = get_settings()
    if args.no_sync:
        discord_settings = settings.discord.model_copy(update={"sync_on_startup": False})
        settings = settings.model_copy(update={"discord": discord_settings})

    setup_logging(args.log_level or settings.log_level)
    logger = logging.getLogger(__name__)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING, __version__, settings.environment)

    from soundsmith.config.container import create_container
    from soundsmith.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)

    try:
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
