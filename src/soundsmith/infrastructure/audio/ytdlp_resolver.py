"""AudioResolver implementation using yt-dlp for URL resolution and search."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from soundsmith.application.interfaces.audio_resolver import AudioResolver
from soundsmith.config.settings import AudioSettings
from soundsmith.domain.music.entities import MediaInfo
from soundsmith.domain.music.value_objects import ResolvedStream, StreamType
from soundsmith.domain.shared.exceptions import ResolutionError
from soundsmith.domain.shared.messages import ErrorMessages, LogTemplates
from soundsmith.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    LOG_URL_TRUNCATE,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_FORMAT: Final[str] = "251/140/bestaudio[protocol^=http]/bestaudio/best"

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"https?://"),
    re.compile(r"www\."),
]

PLAYLIST_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"[?&]list="),
    re.compile(r"/playlist\?"),
    re.compile(r"/sets/"),
]


class YtDlpResolver(AudioResolver):
    """Looks up remote media with yt-dlp and local files in the tracks directory.

    yt-dlp is blocking, so every extraction runs in a worker thread. Single
    extraction results are cached for ``info_cache_ttl_seconds``.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format or DEFAULT_FORMAT)
        self._tracks_dir = Path(self._settings.local_tracks_dir)
        self._cache_ttl = self._settings.info_cache_ttl_seconds
        self._info_cache: dict[str, CacheEntry] = {}

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_playlist_opts(self) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist")

    # === Blocking extraction (worker thread) ===

    def _extract_info_sync(self, target: str) -> YtDlpTrackInfo:
        now = time.time()
        cached = self._info_cache.get(target)
        if cached is not None:
            if now - cached.cached_at < self._cache_ttl:
                logger.debug(LogTemplates.CACHE_HIT_URL, target[:LOG_URL_TRUNCATE])
                return cached.info
            self._info_cache.pop(target, None)

        try:
            with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
                data = ydl.extract_info(target, download=False)
        except Exception as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, target[:LOG_URL_TRUNCATE])
            raise ResolutionError(target, str(e)) from e

        if isinstance(data, dict) and isinstance(data.get("entries"), list):
            # Search results arrive wrapped in a one-entry playlist.
            entries = [e for e in data["entries"] if e]
            data = entries[0] if entries else None
        if not isinstance(data, dict):
            raise ResolutionError(target, ErrorMessages.RESOLVER_RETURNED_NOTHING)

        info = YtDlpTrackInfo.model_validate(dict(data))
        self._remember(target, info, now)
        return info

    def _remember(self, target: str, info: YtDlpTrackInfo, now: float) -> None:
        self._info_cache[target] = CacheEntry(info=info, cached_at=now)
        if len(self._info_cache) <= CACHE_MAX_SIZE:
            return

        expired = [
            key
            for key, entry in self._info_cache.items()
            if now - entry.cached_at >= self._cache_ttl
        ]
        for key in expired:
            self._info_cache.pop(key, None)
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    def _extract_playlist_sync(self, url: str) -> list[YtDlpTrackInfo]:
        try:
            with YoutubeDL(params=cast(Any, self._get_playlist_opts().model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url[:LOG_URL_TRUNCATE])
            raise ResolutionError(url, str(e)) from e

        if not isinstance(data, dict):
            return []
        entries = data.get("entries") or []
        return [YtDlpTrackInfo.model_validate(dict(e)) for e in entries if isinstance(e, dict)]

    def _find_local_sync(self, name: str) -> Path:
        root = self._tracks_dir.resolve()
        candidate = (root / name).resolve()
        if not candidate.is_relative_to(root) or candidate == root:
            raise ResolutionError(name, ErrorMessages.LOCAL_TRACK_OUTSIDE_DIR)
        if not candidate.is_file():
            raise ResolutionError(name, ErrorMessages.LOCAL_TRACK_NOT_FOUND.format(name=name))
        return candidate

    # === AudioResolver ===

    async def probe(self, query: str) -> MediaInfo:
        target = query if self.is_url(query) else f"ytsearch1:{query}"
        info = await asyncio.to_thread(self._extract_info_sync, target)
        return info.to_media(info.page_url or query)

    async def probe_local(self, name: str) -> MediaInfo:
        path = await asyncio.to_thread(self._find_local_sync, name)
        logger.debug(LogTemplates.LOCAL_TRACK_RESOLVED, path)
        return MediaInfo(source_ref=str(path), title=path.stem or path.name)

    async def probe_playlist(self, url: str) -> list[MediaInfo]:
        entries = await asyncio.to_thread(self._extract_playlist_sync, url)
        return [entry.to_media(entry.page_url) for entry in entries if entry.page_url]

    async def resolve(self, source_ref: str) -> ResolvedStream:
        if not self.is_url(source_ref):
            path = Path(source_ref)
            if await asyncio.to_thread(path.is_file):
                return ResolvedStream(handle=str(path), stream_type=StreamType.LOCAL_FILE)

        info = await asyncio.to_thread(self._extract_info_sync, source_ref)
        stream_url = info.stream_url
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, info.title)
            raise ResolutionError(source_ref, ErrorMessages.NO_STREAM_URL)
        return ResolvedStream(handle=stream_url, stream_type=StreamType.REMOTE)

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in URL_PATTERNS)

    def is_playlist(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in PLAYLIST_PATTERNS)
