"""
Domain Layer

Pure playback and queue logic with no Discord or yt-dlp dependencies.
"""
