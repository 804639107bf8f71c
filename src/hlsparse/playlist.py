"""Playlist containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .segment import MediaSegment
from .streams import IframeStream, Rendition, RenditionType, VariantStream
from .tag import Line


class PlaylistKind(str, Enum):
    """Which kind of playlist the scanned lines describe."""

    UNDETERMINED = "undetermined"
    MEDIA = "media"
    MASTER = "master"


@dataclass
class Playlist:
    """Lines of a playlist in file order plus its compatibility version."""

    lines: List[Line] = field(default_factory=list)
    version: int = 1

    kind = PlaylistKind.UNDETERMINED

    def format(self) -> str:
        """Render the playlist back to M3U8 text."""
        return "".join(line.format() + "\n" for line in self.lines)


@dataclass
class MediaPlaylist(Playlist):
    """A playlist listing the media segments of one rendition."""

    segments: List[MediaSegment] = field(default_factory=list)
    media_sequence: int = 0
    discontinuity_sequence: int = 0

    kind = PlaylistKind.MEDIA

    @property
    def duration(self) -> float:
        return sum(segment.duration for segment in self.segments)


@dataclass
class MasterPlaylist(Playlist):
    """A playlist listing variant streams and their renditions."""

    variant_streams: List[VariantStream] = field(default_factory=list)
    iframe_streams: List[IframeStream] = field(default_factory=list)
    rendition_groups: Dict[RenditionType, Dict[str, List[Rendition]]] = field(
        default_factory=dict
    )

    kind = PlaylistKind.MASTER

    def add_rendition(self, rendition: Rendition) -> None:
        group = self.rendition_groups.setdefault(rendition.type, {})
        group.setdefault(rendition.group_id, []).append(rendition)

    def renditions(self, rendition_type: RenditionType, group_id: str) -> List[Rendition]:
        return list(self.rendition_groups.get(rendition_type, {}).get(group_id, ()))
