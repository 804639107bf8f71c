#!/usr/bin/env python3
"""Test the hlsparse command-line interface."""

import sys

import pytest
from click.testing import CliRunner

from hlsparse.cli import cli

MEDIA = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-MEDIA-SEQUENCE:5
#EXTINF:9.009,
first.ts
#EXT-X-KEY:METHOD=AES-128,URI="k.key"
#EXT-X-DISCONTINUITY
#EXTINF:9.009,
second.ts
#EXTINF:3.003,
third.ts
#EXT-X-ENDLIST
"""

MASTER = """#EXTM3U
#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aac",NAME="English",DEFAULT=YES,URI="audio/en.m3u8"
#EXT-X-STREAM-INF:BANDWIDTH=1280000,RESOLUTION=640x360,CODECS="avc1.4d401e,mp4a.40.2",AUDIO="aac"
low/index.m3u8
#EXT-X-I-FRAME-STREAM-INF:BANDWIDTH=86000,URI="low/iframe.m3u8"
"""


@pytest.fixture
def runner():
    return CliRunner()


def test_inspect_media_from_stdin(runner):
    result = runner.invoke(cli, ["inspect", "-"], input=MEDIA)
    assert result.exit_code == 0, result.output
    assert "Media playlist (version 3)" in result.output
    assert "Media sequence: 5" in result.output
    assert "Segments: 3 (total 21.021s)" in result.output
    assert "  #5 first.ts [9.009s]" in result.output
    assert "  #6 second.ts [9.009s, key AES-128, discontinuity]" in result.output


def test_inspect_resolves_base_url(runner):
    result = runner.invoke(
        cli, ["inspect", "-", "--base-url", "https://cdn.example.com/hls/"], input=MEDIA
    )
    assert result.exit_code == 0, result.output
    assert "https://cdn.example.com/hls/third.ts" in result.output


def test_inspect_limit_stops_early(runner):
    result = runner.invoke(cli, ["inspect", "-", "--limit", "1"], input=MEDIA)
    assert result.exit_code == 0, result.output
    assert "Segments: 1 " in result.output
    assert "second.ts" not in result.output


def test_inspect_master_file(runner, tmp_path):
    path = tmp_path / "master.m3u8"
    path.write_text(MASTER)
    result = runner.invoke(cli, ["--log-level", "debug", "inspect", str(path)])
    assert result.exit_code == 0, result.output
    assert "Master playlist (version 1)" in result.output
    assert "1280000 bps 640x360 avc1.4d401e,mp4a.40.2 -> low/index.m3u8" in result.output
    assert "I-frame streams: 1" in result.output
    assert "Renditions AUDIO group 'aac':" in result.output
    assert "English (default) -> audio/en.m3u8" in result.output


def test_inspect_reports_format_errors(runner):
    result = runner.invoke(cli, ["inspect", "-"], input="#EXTM3U\n#EXT-X-VERSION:x\n")
    assert result.exit_code == 1
    assert "Error: line 2:" in result.output


def test_inspect_honours_line_limit_from_env(runner, monkeypatch):
    monkeypatch.setenv("HLSPARSE_MAX_LINE_LENGTH", "8")
    result = runner.invoke(cli, ["inspect", "-"], input=MEDIA)
    assert result.exit_code == 1
    assert "too long" in result.output


def test_inspect_reports_bad_line_limit(runner, monkeypatch):
    monkeypatch.setenv("HLSPARSE_MAX_LINE_LENGTH", "lots")
    result = runner.invoke(cli, ["inspect", "-"], input=MEDIA)
    assert result.exit_code == 1
    assert "Error: HLSPARSE_MAX_LINE_LENGTH must be an integer" in result.output


def test_format_round_trip(runner):
    result = runner.invoke(cli, ["format", "-"], input=MEDIA)
    assert result.exit_code == 0, result.output
    assert result.output == MEDIA


def test_attrs(runner):
    result = runner.invoke(cli, ["attrs", 'TYPE=AUDIO,GROUP-ID="aac",BANDWIDTH=600000,IV=0x0a0B'])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "TYPE\tEnum\tAUDIO",
        'GROUP-ID\tString\t"aac"',
        "BANDWIDTH\tInteger\t600000",
        "IV\tBytes\t0x0A0B",
    ]


def test_attrs_reports_errors(runner):
    result = runner.invoke(cli, ["attrs", "A=0xABC"])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "even number of hex digits" in result.output


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
