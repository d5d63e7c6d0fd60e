"""Catalogue of ambient presets: name -> source reference -> default gain.

Built-in presets can be extended or overridden by a JSON file of the form::

    {"presets": [{"name": "rain", "title": "Rain", "source_ref": "...", "default_gain": 0.4}]}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from soundsmith.domain.music.entities import MediaInfo
from soundsmith.domain.shared.exceptions import PresetNotFoundError
from soundsmith.domain.shared.messages import LogTemplates
from soundsmith.domain.shared.types import NonEmptyStr, PresetNameStr, TrackTitleStr, UnitInterval

logger = logging.getLogger(__name__)


class AmbientPreset(BaseModel):
    """A named ambient track with the gain it should play at."""

    model_config = ConfigDict(frozen=True)

    name: PresetNameStr
    title: TrackTitleStr
    source_ref: NonEmptyStr
    default_gain: UnitInterval = 0.3

    def to_media(self) -> MediaInfo:
        return MediaInfo(source_ref=self.source_ref, title=self.title)


class PresetFile(BaseModel):
    """On-disk preset catalogue."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    presets: list[AmbientPreset] = Field(default_factory=list)


BUILTIN_PRESETS: tuple[AmbientPreset, ...] = (
    AmbientPreset(
        name="rain", title="Rain on a Window", source_ref="ytsearch1:rain on window ambience", default_gain=0.35
    ),
    AmbientPreset(
        name="fireplace", title="Crackling Fireplace", source_ref="ytsearch1:crackling fireplace ambience", default_gain=0.4
    ),
    AmbientPreset(
        name="ocean", title="Ocean Waves", source_ref="ytsearch1:ocean waves ambience", default_gain=0.35
    ),
    AmbientPreset(
        name="forest", title="Forest Birdsong", source_ref="ytsearch1:forest birds ambience", default_gain=0.3
    ),
    AmbientPreset(
        name="tavern", title="Medieval Tavern", source_ref="ytsearch1:medieval tavern ambience", default_gain=0.3
    ),
    AmbientPreset(
        name="storm", title="Thunderstorm", source_ref="ytsearch1:thunderstorm ambience", default_gain=0.35
    ),
)


class PresetCatalog:
    """Read-only lookup of ambient presets by name."""

    def __init__(self, presets: Iterable[AmbientPreset] = BUILTIN_PRESETS) -> None:
        self._presets: dict[str, AmbientPreset] = {p.name: p for p in presets}

    @classmethod
    def load(cls, path: str | Path | None = None) -> PresetCatalog:
        """Built-in presets, overlaid with those in ``path`` when it can be read.

        A missing or malformed file is logged and ignored.
        """
        presets = {p.name: p for p in BUILTIN_PRESETS}
        if path is None:
            return cls(presets.values())

        try:
            loaded = PresetFile.model_validate_json(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception(LogTemplates.PRESETS_FILE_INVALID, path)
            return cls(presets.values())

        for preset in loaded.presets:
            presets[preset.name] = preset
        logger.info(LogTemplates.PRESETS_LOADED, len(loaded.presets), path)
        return cls(presets.values())

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def __len__(self) -> int:
        return len(self._presets)

    def __iter__(self) -> Iterator[AmbientPreset]:
        return iter(self._presets.values())

    @property
    def names(self) -> list[str]:
        return sorted(self._presets)

    def get(self, name: str) -> AmbientPreset:
        try:
            return self._presets[name.strip().lower()]
        except KeyError:
            raise PresetNotFoundError(name) from None
