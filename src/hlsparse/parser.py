"""Scan M3U8 playlists line by line and build media or master playlists."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Union

from .config import ParserConfig
from .errors import FormatError
from .fields import resolve_url
from .playlist import MasterPlaylist, MediaPlaylist, PlaylistKind
from .segment import InitSection, Key, MediaSegment
from .streams import IframeStream, Rendition, VariantStream
from .tag import Line, LineType, Tag
from .value import UINT64_MAX, parse_uint

logger = logging.getLogger(__name__)

AnyPlaylist = Union[MediaPlaylist, MasterPlaylist]


@dataclass
class ParserHandler:
    """Callbacks fired while a playlist is scanned.

    The per-entity callbacks run as soon as their entity is complete; returning
    ``False`` stops the scan after the current line. The playlist callbacks run
    exactly once at the end, also after an early stop.
    """

    on_media_segment: Optional[Callable[[MediaSegment, MediaPlaylist], Optional[bool]]] = None
    on_variant_stream: Optional[Callable[[VariantStream, MasterPlaylist], Optional[bool]]] = None
    on_iframe_stream: Optional[Callable[[IframeStream, MasterPlaylist], Optional[bool]]] = None
    on_media_playlist: Optional[Callable[[MediaPlaylist], None]] = None
    on_master_playlist: Optional[Callable[[MasterPlaylist], None]] = None


@dataclass
class ScanContext:
    """State of one scan. Created per call, never shared."""

    base_url: str
    media: MediaPlaylist
    master: MasterPlaylist
    kind: PlaylistKind = PlaylistKind.UNDETERMINED
    line_num: int = 0
    media_sequence: int = 0
    discontinuity_sequence: int = 0
    # Key and init section stay in effect until the next tag of their kind.
    key: Optional[Key] = None
    init_section: Optional[InitSection] = None
    byte_range_offset: int = 0
    segment: MediaSegment = field(default_factory=MediaSegment)
    variant: Optional[VariantStream] = None
    stop: bool = False

    @classmethod
    def create(cls, base_url: str) -> "ScanContext":
        lines: List[Line] = []
        return cls(
            base_url=base_url,
            media=MediaPlaylist(lines=lines),
            master=MasterPlaylist(lines=lines),
        )

    @property
    def lines(self) -> List[Line]:
        return self.media.lines

    def require_kind(self, kind: PlaylistKind) -> None:
        """Lock the playlist kind, or fail if the other kind is locked."""
        if self.kind is PlaylistKind.UNDETERMINED:
            self.kind = kind
        elif self.kind is not kind:
            raise FormatError("mixing media and master playlist tags")

    def set_version(self, version: int) -> None:
        self.media.version = version
        self.master.version = version


class PlaylistParser:
    """Line scanner and directive dispatcher.

    A parser keeps no scan state of its own, so one instance may be reused
    for any number of playlists.
    """

    def __init__(
        self,
        handler: Optional[ParserHandler] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self.handler = handler or ParserHandler()
        self.config = config or ParserConfig()
        self._directives: Dict[str, Callable[[ScanContext, Tag, Line], None]] = {
            "EXT-X-VERSION": self._on_version,
            "EXT-X-STREAM-INF": self._on_stream_inf,
            "EXT-X-I-FRAME-STREAM-INF": self._on_iframe_stream_inf,
            "EXT-X-MEDIA": self._on_media,
            "EXT-X-MEDIA-SEQUENCE": self._on_media_sequence,
            "EXT-X-DISCONTINUITY-SEQUENCE": self._on_discontinuity_sequence,
            "EXTINF": self._on_extinf,
            "EXT-X-BYTERANGE": self._on_byte_range,
            "EXT-X-DISCONTINUITY": self._on_discontinuity,
            "EXT-X-GAP": self._on_gap,
            "EXT-X-MAP": self._on_map,
            "EXT-X-KEY": self._on_key,
        }

    def parse(self, stream: BinaryIO, base_url: str = "") -> AnyPlaylist:
        """Scan ``stream`` to the end (or until a callback stops it)."""
        ctx = ScanContext.create(base_url)
        limit = self.config.max_line_length
        while not ctx.stop:
            raw = stream.readline(limit + 2)
            if not raw:
                break
            ctx.line_num += 1
            try:
                self._scan_line(ctx, self._decode_line(ctx, raw, limit))
            except FormatError as exc:
                if exc.line_num is None:
                    exc.line_num = ctx.line_num
                raise
        return self._finish(ctx)

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def _decode_line(self, ctx: ScanContext, raw: bytes, limit: int) -> str:
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        if len(raw) > limit:
            raise FormatError(f"playlist line too long (limit {limit} bytes)")
        try:
            text = raw.decode(self.config.encoding)
        except UnicodeDecodeError as exc:
            raise FormatError(f"cannot decode line as {self.config.encoding}: {exc}") from exc
        if ctx.line_num == 1:
            text = text.lstrip("\ufeff")
        return text

    def _scan_line(self, ctx: ScanContext, text: str) -> None:
        trimmed = text.lstrip(" \t")
        if not trimmed:
            ctx.lines.append(Line(ctx.line_num, LineType.BLANK, text=text))
            return
        if not trimmed.startswith("#"):
            self._on_url(ctx, text)
            return

        tag = Tag.from_line(trimmed)
        line = Line(
            ctx.line_num,
            LineType.TAG,
            tag=tag,
            prefix=text[:len(text) - len(trimmed)],
        )
        ctx.lines.append(line)
        directive = self._directives.get(tag.name)
        if directive is None:
            logger.debug("Keeping unrecognized tag %s on line %d", tag.name, ctx.line_num)
            return
        directive(ctx, tag, line)

    def _on_url(self, ctx: ScanContext, text: str) -> None:
        line = Line(ctx.line_num, LineType.URL, text=text)
        ctx.lines.append(line)
        uri = resolve_url(ctx.base_url, text.strip())

        if ctx.kind is PlaylistKind.MASTER:
            variant = ctx.variant
            if variant is None:
                raise FormatError("URI line without a preceding EXT-X-STREAM-INF")
            variant.uri = uri
            variant.uri_line = line
            ctx.variant = None
            ctx.master.variant_streams.append(variant)
            logger.debug("Variant stream %s (bandwidth %d)", uri, variant.bandwidth)
            ctx.stop = self._notify(self.handler.on_variant_stream, variant, ctx.master)
            return

        ctx.require_kind(PlaylistKind.MEDIA)
        if ctx.media_sequence > UINT64_MAX:
            raise FormatError("media sequence number exceeds 64-bit range")
        segment = ctx.segment
        segment.uri = uri
        segment.uri_line = line
        segment.media_sequence = ctx.media_sequence
        segment.discontinuity_sequence = ctx.discontinuity_sequence
        segment.key = ctx.key
        segment.init_section = ctx.init_section
        ctx.media_sequence += 1
        ctx.segment = MediaSegment()
        ctx.media.segments.append(segment)
        logger.debug("Media segment %d: %s", segment.media_sequence, uri)
        ctx.stop = self._notify(self.handler.on_media_segment, segment, ctx.media)

    @staticmethod
    def _notify(callback, entity, playlist) -> bool:
        """Run an entity callback; True means the scan must stop."""
        if callback is None:
            return False
        return callback(entity, playlist) is False

    def _finish(self, ctx: ScanContext) -> AnyPlaylist:
        if ctx.kind is PlaylistKind.MASTER:
            playlist = ctx.master
            logger.info(
                "Parsed master playlist: %d variant streams, %d i-frame streams",
                len(playlist.variant_streams),
                len(playlist.iframe_streams),
            )
            if self.handler.on_master_playlist is not None:
                self.handler.on_master_playlist(playlist)
            return playlist
        if ctx.kind is PlaylistKind.MEDIA:
            playlist = ctx.media
            logger.info("Parsed media playlist: %d segments", len(playlist.segments))
            if self.handler.on_media_playlist is not None:
                self.handler.on_media_playlist(playlist)
            return playlist
        raise FormatError("ambiguous playlist: no media or master playlist tags")

    # ------------------------------------------------------------------
    # Directives
    # ------------------------------------------------------------------

    def _on_version(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.set_version(parse_uint(tag.value, "EXT-X-VERSION value"))

    def _on_stream_inf(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MASTER)
        ctx.variant = VariantStream.from_tag(tag, line)

    def _on_iframe_stream_inf(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MASTER)
        stream = IframeStream.from_tag(tag, line, ctx.base_url)
        ctx.master.iframe_streams.append(stream)
        logger.debug("I-frame stream %s (bandwidth %d)", stream.uri, stream.bandwidth)
        ctx.stop = self._notify(self.handler.on_iframe_stream, stream, ctx.master)

    def _on_media(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MASTER)
        ctx.master.add_rendition(Rendition.from_tag(tag, ctx.base_url))

    def _on_media_sequence(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MEDIA)
        ctx.media_sequence = parse_uint(tag.value, "EXT-X-MEDIA-SEQUENCE value")
        ctx.media.media_sequence = ctx.media_sequence

    def _on_discontinuity_sequence(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MEDIA)
        ctx.discontinuity_sequence = parse_uint(
            tag.value, "EXT-X-DISCONTINUITY-SEQUENCE value"
        )
        ctx.media.discontinuity_sequence = ctx.discontinuity_sequence

    def _on_extinf(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MEDIA)
        ctx.segment.apply_extinf(tag)

    def _on_byte_range(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MEDIA)
        ctx.segment.apply_byte_range(tag, ctx.byte_range_offset)
        ctx.byte_range_offset = ctx.segment.byte_range.end

    def _on_discontinuity(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MEDIA)
        if ctx.discontinuity_sequence >= UINT64_MAX:
            raise FormatError("discontinuity sequence number exceeds 64-bit range")
        ctx.segment.is_discontinuity = True
        ctx.discontinuity_sequence += 1

    def _on_gap(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.require_kind(PlaylistKind.MEDIA)
        ctx.segment.is_gap = True

    def _on_map(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.init_section = InitSection.from_tag(tag, ctx.base_url, key=ctx.key)

    def _on_key(self, ctx: ScanContext, tag: Tag, line: Line) -> None:
        ctx.key = Key.from_tag(tag, ctx.base_url)


def parse(
    stream: BinaryIO,
    base_url: str = "",
    handler: Optional[ParserHandler] = None,
    *,
    config: Optional[ParserConfig] = None,
) -> AnyPlaylist:
    """Parse a playlist from a binary stream.

    Args:
        stream: Object with a ``readline(limit)`` method returning bytes
        base_url: URL that relative URIs are resolved against
        handler: Optional callbacks fired while scanning
        config: Optional parser limits

    Returns:
        The MediaPlaylist or MasterPlaylist described by the stream

    Raises:
        FormatError: On any syntax error; no partial playlist is returned
    """
    return PlaylistParser(handler, config).parse(stream, base_url)


def loads(
    text: str,
    base_url: str = "",
    handler: Optional[ParserHandler] = None,
    *,
    config: Optional[ParserConfig] = None,
) -> AnyPlaylist:
    """Parse a playlist held in a string."""
    config = config or ParserConfig()
    return parse(io.BytesIO(text.encode(config.encoding)), base_url, handler, config=config)


def load(
    path: Union[str, Path],
    base_url: Optional[str] = None,
    handler: Optional[ParserHandler] = None,
    *,
    config: Optional[ParserConfig] = None,
) -> AnyPlaylist:
    """Parse a playlist file; relative URIs resolve against the file by default."""
    path = Path(path)
    if base_url is None:
        base_url = path.resolve().as_uri()
    with path.open("rb") as stream:
        return parse(stream, base_url, handler, config=config)
