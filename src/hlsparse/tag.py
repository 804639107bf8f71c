"""Playlist lines and the directive (tag) wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .attr_parser import parse_attribute_list
from .attributes import AttributeList
from .errors import FormatError


class Tag:
    """A ``#NAME`` or ``#NAME:VALUE`` directive.

    The attribute list is parsed on first request and cached. Changes to the
    cached list are written back to ``value`` only by :meth:`update_value`.
    """

    def __init__(self, name: str, value: str = "", has_separator: bool = False) -> None:
        self.name = name
        self.value = value
        self.has_separator = has_separator
        self._attributes: Optional[AttributeList] = None

    @classmethod
    def from_line(cls, text: str) -> "Tag":
        """Split a ``#``-prefixed line on its first colon."""
        name, sep, value = text[1:].partition(":")
        return cls(name, value, has_separator=bool(sep))

    def __repr__(self) -> str:
        return f"Tag({self.format()!r})"

    def attributes(self) -> AttributeList:
        if self._attributes is None:
            try:
                self._attributes = parse_attribute_list(self.value)
            except FormatError as exc:
                exc.reason = f"parsing {self.name} attribute list: {exc.reason}"
                raise
        return self._attributes

    def update_value(self) -> None:
        """Re-render ``value`` from the cached attribute list."""
        self.value = self.attributes().format()
        self.has_separator = True

    def format(self) -> str:
        if not self.has_separator:
            return f"#{self.name}"
        return f"#{self.name}:{self.value}"


class LineType(str, Enum):
    """Classification of a playlist line."""

    TAG = "tag"
    URL = "url"
    BLANK = "blank"


@dataclass
class Line:
    """One line of a playlist, kept for exact reconstruction."""

    line_num: int
    type: LineType
    tag: Optional[Tag] = None
    text: str = ""
    # Whitespace before the "#" of an indented directive.
    prefix: str = ""

    def format(self) -> str:
        if self.type is LineType.TAG and self.tag is not None:
            return self.prefix + self.tag.format()
        return self.text
