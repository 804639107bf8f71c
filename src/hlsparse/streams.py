"""Master playlist entities: renditions, variant streams and i-frame streams."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import FormatError
from .fields import expect_tag, read_attr, resolve_url
from .tag import Line, Tag
from .value import EnumValue, Resolution, parse_uint


class RenditionType(str, Enum):
    """Valid ``TYPE`` values of ``EXT-X-MEDIA``."""

    AUDIO = "AUDIO"
    VIDEO = "VIDEO"
    SUBTITLES = "SUBTITLES"
    CLOSED_CAPTIONS = "CLOSED-CAPTIONS"


@dataclass
class RenditionChannels:
    """Slash separated ``CHANNELS`` parameters of an audio rendition."""

    audio_channels_count: Optional[int] = None
    audio_object_coding_identifiers: List[str] = field(default_factory=list)

    @classmethod
    def parse(cls, rendition_type: RenditionType, text: str) -> "RenditionChannels":
        channels = cls()
        if rendition_type is not RenditionType.AUDIO:
            return channels
        parts = text.split("/")
        channels.audio_channels_count = parse_uint(parts[0], "CHANNELS count")
        if len(parts) >= 2:
            channels.audio_object_coding_identifiers = parts[1].split(",")
        return channels


@dataclass
class Rendition:
    """An alternative rendition declared by ``EXT-X-MEDIA``."""

    type: RenditionType
    group_id: str
    name: str
    uri: Optional[str] = None
    language: Optional[str] = None
    assoc_language: Optional[str] = None
    stable_rendition_id: Optional[str] = None
    default: bool = False
    autoselect: bool = False
    forced: bool = False
    instream_id: Optional[str] = None
    characteristics: List[str] = field(default_factory=list)
    channels: Optional[RenditionChannels] = None
    tag: Optional[Tag] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_tag(cls, tag: Tag, base_url: str = "") -> "Rendition":
        expect_tag(tag, "EXT-X-MEDIA", "rendition")
        type_name = read_attr(tag, "TYPE", "as_enum", required=True)
        try:
            rendition_type = RenditionType(type_name)
        except ValueError:
            raise FormatError(
                f"{tag.name} tag has invalid TYPE enum value: {type_name}"
            ) from None

        # Only closed captions are carried in-band and may omit the URI.
        uri = read_attr(
            tag,
            "URI",
            "as_string",
            required=rendition_type is not RenditionType.CLOSED_CAPTIONS,
        )
        rendition = cls(
            type=rendition_type,
            group_id=read_attr(tag, "GROUP-ID", "as_string", required=True),
            name=read_attr(tag, "NAME", "as_string", required=True),
            uri=resolve_url(base_url, uri) if uri is not None else None,
            language=read_attr(tag, "LANGUAGE", "as_string"),
            assoc_language=read_attr(tag, "ASSOC-LANGUAGE", "as_string"),
            stable_rendition_id=read_attr(tag, "STABLE-RENDITION-ID", "as_string"),
            default=bool(read_attr(tag, "DEFAULT", "as_yes_no")),
            autoselect=bool(read_attr(tag, "AUTOSELECT", "as_yes_no")),
            forced=bool(read_attr(tag, "FORCED", "as_yes_no")),
            instream_id=read_attr(tag, "INSTREAM-ID", "as_string"),
            tag=tag,
        )

        characteristics = read_attr(tag, "CHARACTERISTICS", "as_string")
        if characteristics is not None:
            rendition.characteristics = characteristics.split(",")
        channels = read_attr(tag, "CHANNELS", "as_string")
        if channels is not None:
            rendition.channels = RenditionChannels.parse(rendition_type, channels)
        return rendition


@dataclass
class BaseStream:
    """Attributes shared by ``EXT-X-STREAM-INF`` and ``EXT-X-I-FRAME-STREAM-INF``."""

    bandwidth: int = 0
    uri: Optional[str] = None
    average_bandwidth: Optional[int] = None
    score: Optional[float] = None
    codecs: Optional[str] = None
    resolution: Optional[Resolution] = None
    hdcp_level: Optional[str] = None
    allowed_cpc: Optional[str] = None
    video_range: Optional[str] = None
    stable_variant_id: Optional[str] = None
    tag: Optional[Tag] = field(default=None, repr=False, compare=False)
    tag_line: Optional[Line] = field(default=None, repr=False, compare=False)

    def _read_common(self, tag: Tag, tag_line: Optional[Line]) -> None:
        self.tag = tag
        self.tag_line = tag_line
        self.bandwidth = read_attr(tag, "BANDWIDTH", "as_uint", required=True)
        self.average_bandwidth = read_attr(tag, "AVERAGE-BANDWIDTH", "as_uint")
        self.score = read_attr(tag, "SCORE", "as_number")
        self.codecs = read_attr(tag, "CODECS", "as_string")
        self.resolution = read_attr(tag, "RESOLUTION", "as_resolution")
        self.hdcp_level = read_attr(tag, "HDCP-LEVEL", "as_enum")
        self.allowed_cpc = read_attr(tag, "ALLOWED-CPC", "as_string")
        self.video_range = read_attr(tag, "VIDEO-RANGE", "as_enum")
        self.stable_variant_id = read_attr(tag, "STABLE-VARIANT-ID", "as_string")

    @property
    def codec_list(self) -> List[str]:
        if not self.codecs:
            return []
        return [codec.strip() for codec in self.codecs.split(",")]


@dataclass
class VariantStream(BaseStream):
    """A variant declared by ``EXT-X-STREAM-INF`` and the URI line after it."""

    uri_line: Optional[Line] = field(default=None, repr=False, compare=False)
    frame_rate: Optional[float] = None
    audio: Optional[str] = None
    video: Optional[str] = None
    subtitles: Optional[str] = None
    closed_captions: Optional[str] = None
    closed_captions_none: bool = False

    @classmethod
    def from_tag(cls, tag: Tag, tag_line: Optional[Line] = None) -> "VariantStream":
        expect_tag(tag, "EXT-X-STREAM-INF", "variant stream")
        stream = cls()
        stream._read_common(tag, tag_line)
        stream.frame_rate = read_attr(tag, "FRAME-RATE", "as_number")
        stream.audio = read_attr(tag, "AUDIO", "as_string")
        stream.video = read_attr(tag, "VIDEO", "as_string")
        stream.subtitles = read_attr(tag, "SUBTITLES", "as_string")
        stream.closed_captions = read_attr(tag, "CLOSED-CAPTIONS", "as_string_or_enum")
        attr = tag.attributes().get_last("CLOSED-CAPTIONS")
        stream.closed_captions_none = attr is not None and attr.value == EnumValue("NONE")
        return stream


@dataclass
class IframeStream(BaseStream):
    """An i-frame only variant; its URI is an attribute of the tag itself."""

    @classmethod
    def from_tag(
        cls, tag: Tag, tag_line: Optional[Line] = None, base_url: str = ""
    ) -> "IframeStream":
        expect_tag(tag, "EXT-X-I-FRAME-STREAM-INF", "i-frame stream")
        stream = cls()
        stream._read_common(tag, tag_line)
        stream.uri = resolve_url(
            base_url, read_attr(tag, "URI", "as_string", required=True)
        )
        return stream
