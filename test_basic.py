#!/usr/bin/env python3
"""Basic smoke test for hlsparse package imports."""

import sys

import pytest


def test_imports():
    """Test that all modules can be imported."""
    from hlsparse import PlaylistParser, ParserHandler, parse_attribute_list
    from hlsparse.attr_parser import AttributeListParser, AttrState
    from hlsparse.cli import cli
    from hlsparse.config import ParserConfig
    from hlsparse.parser import ScanContext
    from hlsparse.playlist import PlaylistKind
    from hlsparse.segment import MediaSegment
    from hlsparse.streams import VariantStream
    from hlsparse.tag import Tag
    from hlsparse.value import Value

    assert AttrState.BYTES in AttrState
    assert PlaylistKind.UNDETERMINED.value == "undetermined"


def test_basic_creation():
    """Test that basic objects can be created."""
    from hlsparse import ParserConfig, PlaylistParser

    parser = PlaylistParser()
    assert parser.config.max_line_length == 4096
    assert parser.handler.on_media_segment is None
    assert ParserConfig(max_line_length=10).encoding == "utf-8"


def test_config_rejects_non_positive_limit():
    from hlsparse import ParserConfig

    with pytest.raises(ValueError):
        ParserConfig(max_line_length=0)


def test_config_from_env(monkeypatch):
    """HLSPARSE_MAX_LINE_LENGTH overrides the default line limit."""
    from hlsparse import ParserConfig

    monkeypatch.setenv("HLSPARSE_MAX_LINE_LENGTH", "32")
    assert ParserConfig.from_env().max_line_length == 32
    monkeypatch.delenv("HLSPARSE_MAX_LINE_LENGTH")
    assert ParserConfig.from_env().max_line_length == 4096


def test_config_from_env_rejects_non_integer(monkeypatch):
    from hlsparse import ParserConfig

    monkeypatch.setenv("HLSPARSE_MAX_LINE_LENGTH", "4k")
    with pytest.raises(ValueError, match="must be an integer, got '4k'"):
        ParserConfig.from_env()


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
