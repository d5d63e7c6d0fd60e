"""Audio infrastructure - yt-dlp resolver and ambient preset catalogue."""

from soundsmith.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from soundsmith.infrastructure.audio.presets import AmbientPreset, PresetCatalog
from soundsmith.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AmbientPreset",
    "AudioFormatInfo",
    "CacheEntry",
    "PresetCatalog",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
