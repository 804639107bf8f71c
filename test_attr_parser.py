#!/usr/bin/env python3
"""Test the attribute list grammar."""

import sys

import pytest

from hlsparse.attr_parser import parse_attribute_list
from hlsparse.errors import FormatError
from hlsparse.value import (
    BytesValue,
    EnumValue,
    FloatValue,
    IntegerValue,
    Resolution,
    ResolutionValue,
    StringValue,
)

FULL_LIST = (
    'TYPE=AUDIO,GROUP-ID="aac",BITRATE=600000,SCORE=-3.14159,'
    "KEY=0xDEADBEEF00112233,RESOLUTION=1920x1080,NAME=\"English\","
    'DEFAULT=YES,AUTOSELECT=YES,LANGUAGE="en",URI="main/english-audio.m3u8",EXTRA=0'
)


def single(text):
    attrs = parse_attribute_list(text)
    assert len(attrs) == 1
    return next(iter(attrs)).value


def test_full_list_types_and_order():
    """Every value kind is recognized and declaration order is kept."""
    attrs = parse_attribute_list(FULL_LIST)
    assert [a.name for a in attrs] == [
        "TYPE", "GROUP-ID", "BITRATE", "SCORE", "KEY", "RESOLUTION",
        "NAME", "DEFAULT", "AUTOSELECT", "LANGUAGE", "URI", "EXTRA",
    ]
    assert attrs.get_last("TYPE").value == EnumValue("AUDIO")
    assert attrs.get_last("GROUP-ID").value == StringValue("aac")
    assert attrs.get_last("BITRATE").value == IntegerValue(600000)
    assert attrs.get_last("SCORE").value == FloatValue(-3.14159)
    assert attrs.get_last("KEY").value == BytesValue(bytes.fromhex("DEADBEEF00112233"))
    assert attrs.get_last("RESOLUTION").value == ResolutionValue(Resolution(1920, 1080))
    assert attrs.get_last("EXTRA").value == IntegerValue(0)


def test_full_list_formats_back_unchanged():
    assert parse_attribute_list(FULL_LIST).format() == FULL_LIST


def test_empty_input():
    assert len(parse_attribute_list("")) == 0


def test_strings_keep_commas_and_spaces():
    assert single('CODECS="avc1.4d401e, mp4a.40.2"') == StringValue("avc1.4d401e, mp4a.40.2")
    assert single('NAME=""') == StringValue("")


def test_leading_zero_ambiguity():
    """A value starting with 0 may become any numeric kind or an enum."""
    assert single("A=0") == IntegerValue(0)
    assert single("A=0x") == BytesValue(b"")
    assert single("A=0X0a") == BytesValue(b"\x0a")
    assert single("A=0.5") == FloatValue(0.5)
    assert single("A=012") == IntegerValue(12)
    assert single("A=0640x480") == ResolutionValue(Resolution(640, 480))
    assert single("A=0abc") == EnumValue("0abc")
    assert single("A=0x12x34") == EnumValue("0x12x34")
    assert single("A=0xZZ") == EnumValue("0xZZ")


def test_zero_followed_by_separator():
    attrs = parse_attribute_list("A=0,B=0 ,C=1")
    assert [a.value for a in attrs] == [IntegerValue(0), IntegerValue(0), IntegerValue(1)]


def test_numbers():
    assert single("A=-12") == IntegerValue(-12)
    assert single("A=.5") == FloatValue(0.5)
    assert single("A=-.5") == FloatValue(-0.5)
    assert single("A=1.5e3") == FloatValue(1500.0)
    assert single("A=29.97") == FloatValue(29.97)


def test_spaces_around_separators():
    attrs = parse_attribute_list(" A = 1 , B=YES ,C=\"x\" ")
    assert attrs.format() == 'A=1,B=YES,C="x"'


def test_trailing_comma_is_accepted():
    assert parse_attribute_list("A=1,").format() == "A=1"


def test_duplicates_are_kept():
    attrs = parse_attribute_list("A=1,A=2")
    assert len(attrs) == 2
    assert attrs.get_first("A").value == IntegerValue(1)
    assert attrs.get_last("A").value == IntegerValue(2)


def test_float_canonical_form_is_stable():
    """Formatting and parsing again gives the same text and the same type."""
    first = parse_attribute_list("A=3.140,B=1.0").format()
    assert first == "A=3.14,B=1.0"
    again = parse_attribute_list(first)
    assert again.format() == first
    assert again.get_last("B").value == FloatValue(1.0)


@pytest.mark.parametrize(
    "text",
    [
        "A=0xABC",
        'A="abc',
        'A=AB"C',
        "A=-1x2",
        "A=1920x",
        "A=1920x1080x2",
        "A=1.2.3",
        "A=12a",
        "A=99999999999999999999",
        "A",
        "A=",
        "A=,B=1",
        "A=1 B=2",
        "=1",
        "A B=1",
    ],
)
def test_malformed_lists(text):
    with pytest.raises(FormatError):
        parse_attribute_list(text)


def test_resolution_dimensions_are_bounded():
    assert single("R=18446744073709551615x1") == ResolutionValue(Resolution(2**64 - 1, 1))
    with pytest.raises(FormatError, match="width is out of 64-bit range"):
        parse_attribute_list("R=99999999999999999999999x1")
    with pytest.raises(FormatError, match="height is out of 64-bit range"):
        parse_attribute_list("R=1x18446744073709551616")


def test_zero_width_resolution_does_not_reparse():
    """A 0-wide resolution renders as hex text, so it comes back as Bytes."""
    value = single("A=00x50")
    assert value == ResolutionValue(Resolution(0, 50))
    assert value.format() == "0x50"
    assert single("A=" + value.format()) == BytesValue(b"\x50")
    with pytest.raises(FormatError):
        parse_attribute_list("A=" + ResolutionValue(Resolution(0, 5)).format())


def test_lowercase_name_reports_position():
    with pytest.raises(FormatError) as exc_info:
        parse_attribute_list("a=1")
    assert exc_info.value.position == 0
    assert exc_info.value.char == "a"
    assert "got 'a'" in str(exc_info.value)


def test_unterminated_string_message():
    with pytest.raises(FormatError, match="unterminated quoted string"):
        parse_attribute_list('URI="index.m3u8')


def test_missing_equals_names_attribute():
    with pytest.raises(FormatError, match="attribute NAME is missing '='"):
        parse_attribute_list("A=1,NAME")


def test_odd_hex_digits_message():
    with pytest.raises(FormatError, match="even number of hex digits"):
        parse_attribute_list("IV=0x123,A=1")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
