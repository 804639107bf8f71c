"""hlsparse: parse and render HLS (M3U8) playlists."""

from .attr_parser import parse_attribute_list
from .attributes import Attribute, AttributeList
from .config import ParserConfig
from .errors import FormatError, HLSError, WrongTypeError
from .parser import ParserHandler, PlaylistParser, load, loads, parse
from .playlist import MasterPlaylist, MediaPlaylist, Playlist, PlaylistKind
from .segment import ByteRange, InitSection, Key, KeyMethod, MediaSegment
from .streams import (
    IframeStream,
    Rendition,
    RenditionChannels,
    RenditionType,
    VariantStream,
)
from .tag import Line, LineType, Tag
from .value import (
    BytesValue,
    EnumValue,
    FloatValue,
    IntegerValue,
    Resolution,
    ResolutionValue,
    StringValue,
    Value,
    ValueType,
    yes_no,
)

__all__ = [
    "Attribute",
    "AttributeList",
    "ByteRange",
    "BytesValue",
    "EnumValue",
    "FloatValue",
    "FormatError",
    "HLSError",
    "IframeStream",
    "InitSection",
    "IntegerValue",
    "Key",
    "KeyMethod",
    "Line",
    "LineType",
    "MasterPlaylist",
    "MediaPlaylist",
    "MediaSegment",
    "ParserConfig",
    "ParserHandler",
    "Playlist",
    "PlaylistKind",
    "PlaylistParser",
    "Rendition",
    "RenditionChannels",
    "RenditionType",
    "Resolution",
    "ResolutionValue",
    "StringValue",
    "Tag",
    "Value",
    "ValueType",
    "VariantStream",
    "WrongTypeError",
    "load",
    "loads",
    "parse",
    "parse_attribute_list",
    "yes_no",
]
