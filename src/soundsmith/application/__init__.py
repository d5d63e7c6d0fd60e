"""
Application Layer

Playback sessions, the session registry, and command handlers that tie the
domain to the voice, sink, and resolver ports.
"""
