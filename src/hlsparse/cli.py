"""Command-line interface for hlsparse."""

from __future__ import annotations

import logging
import sys

import click

from .attr_parser import parse_attribute_list
from .config import ParserConfig
from .errors import FormatError
from .parser import ParserHandler, parse
from .playlist import MasterPlaylist, MediaPlaylist


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _parse_file(stream, base_url: str, handler: ParserHandler | None = None):
    try:
        config = ParserConfig.from_env()
    except ValueError as exc:
        _fail(exc)
    try:
        return parse(stream, base_url, handler, config=config)
    except FormatError as exc:
        _fail(exc)


def _echo_media(playlist: MediaPlaylist) -> None:
    click.echo(f"Media playlist (version {playlist.version})")
    click.echo(f"Media sequence: {playlist.media_sequence}")
    click.echo(f"Discontinuity sequence: {playlist.discontinuity_sequence}")
    click.echo(
        f"Segments: {len(playlist.segments)} (total {playlist.duration:.3f}s)"
    )
    for segment in playlist.segments:
        details = [f"{segment.duration:.3f}s"]
        if segment.byte_range:
            details.append(f"bytes {segment.byte_range.format()}")
        if segment.key:
            details.append(f"key {segment.key.method.value}")
        if segment.is_discontinuity:
            details.append("discontinuity")
        if segment.is_gap:
            details.append("gap")
        click.echo(f"  #{segment.media_sequence} {segment.uri} [{', '.join(details)}]")


def _echo_master(playlist: MasterPlaylist) -> None:
    click.echo(f"Master playlist (version {playlist.version})")
    click.echo(f"Variant streams: {len(playlist.variant_streams)}")
    for stream in playlist.variant_streams:
        line = f"  {stream.bandwidth} bps"
        if stream.resolution:
            line += f" {stream.resolution.format()}"
        if stream.codecs:
            line += f" {stream.codecs}"
        click.echo(f"{line} -> {stream.uri}")
    if playlist.iframe_streams:
        click.echo(f"I-frame streams: {len(playlist.iframe_streams)}")
        for stream in playlist.iframe_streams:
            click.echo(f"  {stream.bandwidth} bps -> {stream.uri}")
    for rendition_type, groups in playlist.rendition_groups.items():
        for group_id, renditions in groups.items():
            click.echo(f"Renditions {rendition_type.value} group {group_id!r}:")
            for rendition in renditions:
                marker = " (default)" if rendition.default else ""
                click.echo(f"  {rendition.name}{marker} -> {rendition.uri or '-'}")


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity",
)
def cli(log_level):
    """HLS playlist parser CLI."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@cli.command()
@click.argument("playlist", type=click.File("rb"))
@click.option("--base-url", default="", help="URL that relative URIs resolve against")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    help="Stop after this many segments or variant streams",
)
def inspect(playlist, base_url, limit):
    """Summarize a playlist file ('-' reads stdin)."""
    handler = None
    if limit is not None:
        seen = 0

        def _count(entity, owner):
            nonlocal seen
            seen += 1
            return seen < limit

        handler = ParserHandler(on_media_segment=_count, on_variant_stream=_count)

    result = _parse_file(playlist, base_url, handler)
    if isinstance(result, MediaPlaylist):
        _echo_media(result)
    else:
        _echo_master(result)


@cli.command(name="format")
@click.argument("playlist", type=click.File("rb"))
def format_playlist(playlist):
    """Parse a playlist and write it back out."""
    result = _parse_file(playlist, "")
    click.echo(result.format(), nl=False)


@cli.command()
@click.argument("text")
def attrs(text):
    """Show the typed values of an attribute list."""
    try:
        attributes = parse_attribute_list(text)
    except FormatError as exc:
        _fail(exc)
    for attr in attributes:
        click.echo(f"{attr.name}\t{attr.value.value_type.value}\t{attr.value.format()}")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
