"""discord.py implementations of the voice transport and audio sink ports."""
