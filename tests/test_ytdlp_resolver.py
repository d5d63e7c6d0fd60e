"""
Unit Tests for YtDlpResolver

Tests for the yt-dlp based audio resolver infrastructure:
- URL and playlist detection
- Info parsing (YtDlpTrackInfo)
- Probe (URL and search), playlist probe, local probe
- Resolve (remote and local)
- Caching behavior and error handling

yt-dlp itself is patched out; no network access happens here.
"""

from unittest.mock import MagicMock, patch

import pytest

from soundsmith.config.settings import AudioSettings
from soundsmith.domain.music.value_objects import StreamType
from soundsmith.domain.shared.exceptions import ResolutionError
from soundsmith.infrastructure.audio.models import UNKNOWN_TITLE, YtDlpOpts, YtDlpTrackInfo
from soundsmith.infrastructure.audio.ytdlp_resolver import DEFAULT_FORMAT, YtDlpResolver

YDL_PATH = "soundsmith.infrastructure.audio.ytdlp_resolver.YoutubeDL"
WATCH_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def resolver(tmp_path):
    return YtDlpResolver(AudioSettings(local_tracks_dir=str(tmp_path)))


def _ydl(mock_ydl: MagicMock) -> MagicMock:
    return mock_ydl.return_value.__enter__.return_value


def _info(**overrides):
    data = {
        "webpage_url": WATCH_URL,
        "url": "https://cdn.example/selected-251",
        "title": "Test Song",
        "duration": 212,
        "formats": [
            {"url": "https://cdn.example/video", "acodec": "none"},
            {"url": "https://cdn.example/audio-low", "acodec": "mp4a"},
            {"url": "https://cdn.example/audio-high", "acodec": "opus"},
        ],
    }
    data.update(overrides)
    return data


# =============================================================================
# Detection
# =============================================================================


class TestDetection:
    @pytest.mark.parametrize(
        "query",
        [WATCH_URL, "http://example.com/a.mp3", "www.youtube.com/watch?v=x"],
    )
    def test_is_url(self, resolver, query):
        assert resolver.is_url(query)

    def test_plain_text_is_not_url(self, resolver):
        assert not resolver.is_url("never gonna give you up")

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/playlist?list=PL123",
            "https://www.youtube.com/watch?v=abc&list=PL123",
            "https://soundcloud.com/artist/sets/album",
        ],
    )
    def test_is_playlist(self, resolver, url):
        assert resolver.is_playlist(url)

    def test_single_video_is_not_playlist(self, resolver):
        assert not resolver.is_playlist(WATCH_URL)


# =============================================================================
# Models
# =============================================================================


class TestYtDlpTrackInfo:
    """Parsing of raw yt-dlp info dicts."""

    def test_stream_url_prefers_selected_format(self):
        info = YtDlpTrackInfo.model_validate(
            _info(
                formats=[
                    {"url": "https://cdn.example/251-opus", "acodec": "opus"},
                    {"url": "https://cdn.example/18-mp4", "acodec": "mp4a.40.2"},
                ]
            )
        )
        assert info.stream_url == "https://cdn.example/selected-251"

    def test_stream_url_falls_back_to_last_audio_format(self):
        info = YtDlpTrackInfo.model_validate(_info(url=None))
        assert info.stream_url == "https://cdn.example/audio-high"

    def test_stream_url_skips_video_only_formats(self):
        info = YtDlpTrackInfo.model_validate(
            _info(url=None, formats=[{"url": "https://cdn.example/video", "acodec": "none"}])
        )
        assert info.stream_url is None

    def test_garbage_values_are_coerced(self):
        info = YtDlpTrackInfo.model_validate(
            {"title": "   ", "duration": "n/a", "webpage_url": "", "unknown": 1}
        )
        assert info.title == UNKNOWN_TITLE
        assert info.duration is None
        assert info.webpage_url is None

    def test_negative_duration_is_dropped(self):
        assert YtDlpTrackInfo.model_validate({"duration": -3}).duration is None

    def test_long_title_is_truncated(self):
        assert len(YtDlpTrackInfo.model_validate({"title": "x" * 900}).title) == 500

    def test_to_media(self):
        media = YtDlpTrackInfo.model_validate(_info(duration=None)).to_media("fallback")
        assert media.source_ref == WATCH_URL
        assert media.title == "Test Song"
        assert media.duration_seconds == 0

    def test_opts_default_format(self):
        resolver = YtDlpResolver(AudioSettings(ytdlp_format=""))
        assert resolver._get_opts().format == DEFAULT_FORMAT
        assert YtDlpOpts().noplaylist is True


# =============================================================================
# Probe
# =============================================================================


class TestProbe:
    """Metadata lookups."""

    @pytest.mark.asyncio
    async def test_probe_url(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = _info()
            media = await resolver.probe(WATCH_URL)

        _ydl(mock_ydl).extract_info.assert_called_once_with(WATCH_URL, download=False)
        assert media.source_ref == WATCH_URL
        assert media.title == "Test Song"
        assert media.duration_seconds == 212

    @pytest.mark.asyncio
    async def test_probe_search_takes_first_entry(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = {"entries": [None, _info(title="Hit")]}
            media = await resolver.probe("some song")

        _ydl(mock_ydl).extract_info.assert_called_once_with("ytsearch1:some song", download=False)
        assert media.title == "Hit"

    @pytest.mark.asyncio
    async def test_probe_empty_search_raises(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = {"entries": []}
            with pytest.raises(ResolutionError):
                await resolver.probe("nothing matches")

    @pytest.mark.asyncio
    async def test_probe_ytdlp_error_becomes_resolution_error(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.side_effect = RuntimeError("Video unavailable")
            with pytest.raises(ResolutionError, match="Video unavailable"):
                await resolver.probe(WATCH_URL)

    @pytest.mark.asyncio
    async def test_info_is_cached(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = _info()
            await resolver.probe(WATCH_URL)
            await resolver.probe(WATCH_URL)

        assert _ydl(mock_ydl).extract_info.call_count == 1

    @pytest.mark.asyncio
    async def test_expired_cache_entry_is_refetched(self):
        resolver = YtDlpResolver(AudioSettings(info_cache_ttl_seconds=0))
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = _info()
            await resolver.probe(WATCH_URL)
            await resolver.probe(WATCH_URL)

        assert _ydl(mock_ydl).extract_info.call_count == 2

    @pytest.mark.asyncio
    async def test_probe_playlist_skips_entries_without_url(self, resolver):
        url = "https://www.youtube.com/playlist?list=PL1"
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = {
                "entries": [
                    {"url": "https://youtu.be/a", "title": "A"},
                    {"title": "no url"},
                    None,
                    {"webpage_url": "https://youtu.be/b", "title": "B", "duration": 30},
                ]
            }
            media = await resolver.probe_playlist(url)

        assert [m.source_ref for m in media] == ["https://youtu.be/a", "https://youtu.be/b"]
        assert media[1].duration_seconds == 30
        params = mock_ydl.call_args.kwargs["params"]
        assert params["noplaylist"] is False
        assert params["extract_flat"] == "in_playlist"

    @pytest.mark.asyncio
    async def test_probe_playlist_non_dict_is_empty(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = None
            assert await resolver.probe_playlist("https://x.test/playlist?list=1") == []


class TestLocalTracks:
    """Files in the local tracks directory."""

    @pytest.mark.asyncio
    async def test_probe_local_finds_file(self, resolver, tmp_path):
        track = tmp_path / "intro.mp3"
        track.write_bytes(b"ID3")

        media = await resolver.probe_local("intro.mp3")

        assert media.source_ref == str(track.resolve())
        assert media.title == "intro"

    @pytest.mark.asyncio
    async def test_probe_local_missing_file(self, resolver):
        with pytest.raises(ResolutionError, match="not found"):
            await resolver.probe_local("missing.mp3")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["../secret.mp3", "/etc/passwd", "."])
    async def test_probe_local_rejects_escaping_names(self, resolver, name):
        with pytest.raises(ResolutionError, match="must not leave"):
            await resolver.probe_local(name)

    @pytest.mark.asyncio
    async def test_resolve_local_file(self, resolver, tmp_path):
        track = tmp_path / "loop.ogg"
        track.write_bytes(b"OggS")

        stream = await resolver.resolve(str(track))

        assert stream.stream_type is StreamType.LOCAL_FILE
        assert stream.handle == str(track)


# =============================================================================
# Resolve
# =============================================================================


class TestResolve:
    @pytest.mark.asyncio
    async def test_resolve_remote(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = _info()
            stream = await resolver.resolve(WATCH_URL)

        assert stream.stream_type is StreamType.REMOTE
        assert stream.handle == "https://cdn.example/selected-251"

    @pytest.mark.asyncio
    async def test_resolve_without_stream_url_raises(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = _info(url=None, formats=[])
            with pytest.raises(ResolutionError, match="No playable audio stream"):
                await resolver.resolve(WATCH_URL)

    @pytest.mark.asyncio
    async def test_resolve_search_ref(self, resolver):
        with patch(YDL_PATH) as mock_ydl:
            _ydl(mock_ydl).extract_info.return_value = {"entries": [_info()]}
            stream = await resolver.resolve("ytsearch1:rain ambience")

        _ydl(mock_ydl).extract_info.assert_called_once_with(
            "ytsearch1:rain ambience", download=False
        )
        assert stream.stream_type is StreamType.REMOTE
