"""Media segments and the state they inherit: keys, init sections, byte ranges."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import FormatError
from .fields import expect_tag, read_attr, resolve_url
from .tag import Line, Tag
from .value import parse_uint

_DURATION_RE = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")


@dataclass
class ByteRange:
    """Sub-range ``length[@offset]`` of a resource."""

    length: int
    offset: int = 0
    tag: Optional[Tag] = field(default=None, repr=False, compare=False)

    @property
    def end(self) -> int:
        return self.offset + self.length

    @classmethod
    def parse(cls, text: str, default_offset: int = 0, tag: Optional[Tag] = None) -> "ByteRange":
        """Parse ``length[@offset]``; a missing offset uses ``default_offset``."""
        length_str, at, offset_str = text.partition("@")
        length = parse_uint(length_str, "byte range length")
        offset = parse_uint(offset_str, "byte range offset") if at else default_offset
        return cls(length=length, offset=offset, tag=tag)

    @classmethod
    def from_tag(cls, tag: Tag, default_offset: int = 0) -> "ByteRange":
        expect_tag(tag, "EXT-X-BYTERANGE", "byte range")
        return cls.parse(tag.value, default_offset, tag=tag)

    def format(self) -> str:
        return f"{self.length}@{self.offset}"


class KeyMethod(str, Enum):
    """Encryption methods of ``EXT-X-KEY``."""

    NONE = "NONE"
    AES_128 = "AES-128"
    SAMPLE_AES = "SAMPLE-AES"


@dataclass
class Key:
    """How media segments are encrypted (``EXT-X-KEY``)."""

    method: KeyMethod
    uri: Optional[str] = None
    iv: Optional[bytes] = None
    key_format: Optional[str] = None
    # Absent KEYFORMATVERSIONS means version 1.
    key_format_versions: List[int] = field(default_factory=lambda: [1])
    tag: Optional[Tag] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_tag(cls, tag: Tag, base_url: str = "") -> "Key":
        expect_tag(tag, "EXT-X-KEY", "key")
        method_name = read_attr(tag, "METHOD", "as_enum", required=True)
        try:
            method = KeyMethod(method_name)
        except ValueError:
            raise FormatError(
                f"{tag.name} tag has invalid METHOD enum value: {method_name}"
            ) from None

        key = cls(method=method, tag=tag)
        uri = read_attr(tag, "URI", "as_string")
        if uri is not None:
            key.uri = resolve_url(base_url, uri)
        key.iv = read_attr(tag, "IV", "as_bytes")
        key.key_format = read_attr(tag, "KEYFORMAT", "as_string")

        versions = read_attr(tag, "KEYFORMATVERSIONS", "as_string")
        if versions is not None:
            key.key_format_versions = [
                parse_uint(part, f"{tag.name} KEYFORMATVERSIONS entry")
                for part in versions.split("/")
            ]
        return key


@dataclass
class InitSection:
    """Media initialization section declared by ``EXT-X-MAP``."""

    uri: str
    byte_range: Optional[ByteRange] = None
    key: Optional[Key] = None
    tag: Optional[Tag] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_tag(cls, tag: Tag, base_url: str = "", key: Optional[Key] = None) -> "InitSection":
        """Decode ``EXT-X-MAP``; ``key`` is the key in effect at the tag."""
        expect_tag(tag, "EXT-X-MAP", "init section")
        uri = read_attr(tag, "URI", "as_string", required=True)
        section = cls(uri=resolve_url(base_url, uri), key=key, tag=tag)
        byte_range = read_attr(tag, "BYTERANGE", "as_string")
        if byte_range is not None:
            section.byte_range = ByteRange.parse(byte_range)
        return section


@dataclass
class MediaSegment:
    """A media segment built from the tags preceding its URI line.

    ``media_sequence``, ``discontinuity_sequence``, ``key`` and
    ``init_section`` are inherited from the scan state when the URI line is
    reached.
    """

    uri: Optional[str] = None
    uri_line: Optional[Line] = field(default=None, repr=False, compare=False)
    tag: Optional[Tag] = field(default=None, repr=False, compare=False)
    duration: float = 0.0
    title: str = ""
    byte_range: Optional[ByteRange] = None
    is_discontinuity: bool = False
    is_gap: bool = False

    media_sequence: int = 0
    discontinuity_sequence: int = 0
    key: Optional[Key] = None
    init_section: Optional[InitSection] = None
    # Reserved: no directive sets it.
    bitrate: Optional[int] = None

    def apply_extinf(self, tag: Tag) -> None:
        """Read ``duration[,title]`` from an ``EXTINF`` tag."""
        expect_tag(tag, "EXTINF", "media segment")
        duration_str, _, title = tag.value.partition(",")
        if not _DURATION_RE.fullmatch(duration_str):
            raise FormatError(
                f"EXTINF duration has invalid float or integer format: {duration_str!r}"
            )
        duration = float(duration_str)
        if not math.isfinite(duration):
            raise FormatError(f"EXTINF duration is out of range: {duration_str}")
        self.tag = tag
        self.duration = duration
        self.title = title.strip()

    def apply_byte_range(self, tag: Tag, default_offset: int) -> None:
        self.byte_range = ByteRange.from_tag(tag, default_offset)
