"""Single-pass parser for HLS attribute lists.

An attribute list is the comma separated ``NAME=value`` text that follows the
colon of directives such as ``EXT-X-STREAM-INF``. The value grammar is
ambiguous on its first character: ``0`` may start a hexadecimal byte
sequence, a decimal integer, a float, a resolution or an enumerated token.
The parser is a finite state machine that reads one character at a time and,
when a run turns out to belong to a different value kind, switches state and
looks at the current character again (:meth:`AttributeListParser._reexamine`).
Nothing is ever re-read further back than that single character.
"""

from __future__ import annotations

import math
import string
from enum import Enum, auto
from typing import Callable, Dict, Optional

from .attributes import Attribute, AttributeList
from .errors import FormatError
from .value import (
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    BytesValue,
    EnumValue,
    FloatValue,
    IntegerValue,
    Resolution,
    ResolutionValue,
    StringValue,
    Value,
)

_SPACES = frozenset(" \t")
_DIGITS = frozenset(string.digits)
_NAME_CHARS = frozenset(string.ascii_uppercase + string.digits + "-_")
_HEX_CHARS = frozenset(string.hexdigits)
_FLOAT_CHARS = frozenset(string.digits + "eE+-")


class AttrState(Enum):
    """States of the attribute list machine."""

    START = auto()
    NAME = auto()
    NAME_END = auto()
    VALUE_START = auto()
    STRING = auto()
    ENUM = auto()
    INTEGER = auto()
    FLOAT = auto()
    BYTES = auto()
    RESOLUTION = auto()
    VALUE_END = auto()


def _is_separator(c: str) -> bool:
    return c == "," or c in _SPACES


class AttributeListParser:
    """Parse one attribute list string into an :class:`AttributeList`.

    Instances are single use: create one per string.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.start = 0
        self.state = AttrState.START
        self.name = ""
        self.signed = False
        self.width = 0
        self.attrs = AttributeList()

        self._handlers: Dict[AttrState, Callable[[str], None]] = {
            AttrState.START: self._on_start,
            AttrState.NAME: self._on_name,
            AttrState.NAME_END: self._on_name_end,
            AttrState.VALUE_START: self._on_value_start,
            AttrState.STRING: self._on_string,
            AttrState.ENUM: self._on_enum,
            AttrState.INTEGER: self._on_integer,
            AttrState.FLOAT: self._on_float,
            AttrState.BYTES: self._on_bytes,
            AttrState.RESOLUTION: self._on_resolution,
            AttrState.VALUE_END: self._on_value_end,
        }
        self._finishers: Dict[AttrState, Callable[[str], None]] = {
            AttrState.ENUM: self._finish_enum,
            AttrState.INTEGER: self._finish_integer,
            AttrState.FLOAT: self._finish_float,
            AttrState.BYTES: self._finish_bytes_or_zero,
            AttrState.RESOLUTION: self._finish_resolution,
        }

    def parse(self) -> AttributeList:
        text = self.text
        while self.pos < len(text):
            self._handlers[self.state](text[self.pos])
            self.pos += 1
        self._finish_input()
        return self.attrs

    # ------------------------------------------------------------------
    # Machine primitives
    # ------------------------------------------------------------------

    def _reexamine(self, state: AttrState) -> None:
        """Switch to ``state`` and feed it the current character again.

        The main loop advances ``pos`` after every handler, so stepping back
        one position makes the next iteration see the same character.
        """
        self.state = state
        self.pos -= 1

    def _error(
        self,
        reason: str,
        char: Optional[str] = None,
        position: Optional[int] = None,
    ) -> FormatError:
        return FormatError(
            reason,
            position=self.pos if position is None else position,
            char=char,
        )

    def _emit(self, value: Value, c: str) -> None:
        self.attrs.append(Attribute(self.name, value))
        self.signed = False
        self.state = AttrState.START if c == "," else AttrState.VALUE_END

    def _finish_input(self) -> None:
        if self.state in (AttrState.START, AttrState.VALUE_END):
            return
        finisher = self._finishers.get(self.state)
        if finisher is not None:
            finisher("")
        elif self.state is AttrState.STRING:
            raise self._error(
                "unterminated quoted string", position=self.start - 1
            )
        elif self.state is AttrState.VALUE_START:
            raise self._error(f"attribute {self.name} is missing a value")
        else:
            name = self.text[self.start:self.pos].strip()
            raise self._error(f"attribute {name} is missing '='")

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    def _on_start(self, c: str) -> None:
        if _is_separator(c):
            return
        if c in _NAME_CHARS:
            self.start = self.pos
            self.state = AttrState.NAME
            return
        raise self._error(
            "before attribute name, expecting space, comma or attribute name character",
            c,
        )

    def _on_name(self, c: str) -> None:
        if c in _NAME_CHARS:
            return
        if c == "=" or c in _SPACES:
            self.name = self.text[self.start:self.pos]
            self.state = AttrState.VALUE_START if c == "=" else AttrState.NAME_END
            return
        raise self._error(
            "inside attribute name, expecting '=' or attribute name character", c
        )

    def _on_name_end(self, c: str) -> None:
        if c in _SPACES:
            return
        if c == "=":
            self.state = AttrState.VALUE_START
            return
        raise self._error(f"after attribute name {self.name}, expecting '='", c)

    def _on_value_start(self, c: str) -> None:
        if c in _SPACES:
            return
        if c == ",":
            raise self._error("at value start, got comma", c)
        if c == '"':
            self.start = self.pos + 1
            self.state = AttrState.STRING
            return
        self.start = self.pos
        if c == "-":
            self.signed = True
            self.state = AttrState.INTEGER
        elif c == ".":
            self.state = AttrState.FLOAT
        elif c == "0":
            self.state = AttrState.BYTES
        elif c in _DIGITS:
            self.state = AttrState.INTEGER
        else:
            self.state = AttrState.ENUM

    def _on_string(self, c: str) -> None:
        if c == '"':
            self._emit(StringValue(self.text[self.start:self.pos]), c)

    def _on_enum(self, c: str) -> None:
        if _is_separator(c):
            self._finish_enum(c)
        elif c == '"':
            raise self._error("inside Enum, unexpected double quote", c)

    def _on_integer(self, c: str) -> None:
        if c in _DIGITS:
            return
        if c == ".":
            self.state = AttrState.FLOAT
        elif c in "xX":
            if self.signed:
                raise self._error("Resolution width cannot be signed", c)
            self.width = int(self.text[self.start:self.pos])
            if self.width > UINT64_MAX:
                raise self._error(
                    "Resolution width is out of 64-bit range", position=self.start
                )
            self.start = self.pos + 1
            self.state = AttrState.RESOLUTION
        elif _is_separator(c):
            self._finish_integer(c)
        else:
            raise self._error("inside Integer, expecting digit, '.' or 'x'", c)

    def _on_float(self, c: str) -> None:
        if c in _FLOAT_CHARS:
            return
        if _is_separator(c):
            self._finish_float(c)
            return
        raise self._error("inside Float, expecting digit or exponent", c)

    def _on_bytes(self, c: str) -> None:
        # ``start`` points at the leading "0".
        if self.pos - self.start == 1:
            if c in "xX":
                return
            if c == ".":
                self.state = AttrState.FLOAT
            elif c in _DIGITS:
                self.state = AttrState.INTEGER
            elif _is_separator(c):
                self._finish_integer(c)
            else:
                self._reexamine(AttrState.ENUM)
            return
        if c in _HEX_CHARS:
            return
        if _is_separator(c):
            self._finish_bytes(c)
        else:
            self._reexamine(AttrState.ENUM)

    def _on_resolution(self, c: str) -> None:
        if c in _DIGITS:
            return
        if _is_separator(c):
            self._finish_resolution(c)
            return
        raise self._error("inside Resolution height, expecting digit", c)

    def _on_value_end(self, c: str) -> None:
        if c == ",":
            self.state = AttrState.START
        elif c not in _SPACES:
            raise self._error("after value, expecting space or comma", c)

    # ------------------------------------------------------------------
    # Value completion
    # ------------------------------------------------------------------

    def _finish_enum(self, c: str) -> None:
        self._emit(EnumValue(self.text[self.start:self.pos]), c)

    def _finish_integer(self, c: str) -> None:
        raw = self.text[self.start:self.pos]
        try:
            value = int(raw)
        except ValueError:
            raise self._error(
                f"invalid Integer {raw!r}", position=self.start
            ) from None
        if not INT64_MIN <= value <= INT64_MAX:
            raise self._error(
                f"Integer {raw} is out of 64-bit range", position=self.start
            )
        self._emit(IntegerValue(value), c)

    def _finish_float(self, c: str) -> None:
        raw = self.text[self.start:self.pos]
        try:
            value = float(raw)
        except ValueError:
            raise self._error(f"invalid Float {raw!r}", position=self.start) from None
        if not math.isfinite(value):
            raise self._error(f"Float {raw} is out of range", position=self.start)
        self._emit(FloatValue(value), c)

    def _finish_bytes(self, c: str) -> None:
        digits = self.text[self.start + 2:self.pos]
        if len(digits) % 2:
            raise self._error(
                "Bytes value must have an even number of hex digits",
                position=self.start,
            )
        self._emit(BytesValue(bytes.fromhex(digits)), c)

    def _finish_bytes_or_zero(self, c: str) -> None:
        # A lone "0" at the end of input is the integer zero.
        if self.pos - self.start == 1:
            self._finish_integer(c)
        else:
            self._finish_bytes(c)

    def _finish_resolution(self, c: str) -> None:
        if self.start == self.pos:
            raise self._error("Resolution is missing height", position=self.start)
        height = int(self.text[self.start:self.pos])
        if height > UINT64_MAX:
            raise self._error(
                "Resolution height is out of 64-bit range", position=self.start
            )
        self._emit(ResolutionValue(Resolution(self.width, height)), c)


def parse_attribute_list(text: str) -> AttributeList:
    """Parse ``text`` into an attribute list or raise :class:`FormatError`."""
    return AttributeListParser(text).parse()
