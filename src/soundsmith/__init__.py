"""Soundsmith: a Discord bot that plays queued audio in voice channels."""

__version__ = "0.3.0"
