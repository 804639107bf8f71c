"""Typed attribute values found in HLS attribute lists."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar

from .errors import FormatError, WrongTypeError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

_UINT_RE = re.compile(r"[0-9]+")


class ValueType(str, Enum):
    """The six kinds of attribute value."""

    STRING = "String"
    ENUM = "Enum"
    INTEGER = "Integer"
    FLOAT = "Float"
    BYTES = "Bytes"
    RESOLUTION = "Resolution"


@dataclass(frozen=True)
class Resolution:
    """Pixel resolution written as ``<width>x<height>``.

    A zero width renders as ``0x<height>``, which the attribute grammar reads
    back as a Bytes value rather than a Resolution.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("resolution dimensions must be non-negative")

    def format(self) -> str:
        return f"{self.width}x{self.height}"


class Value:
    """Base class of the attribute value variants.

    Every accessor raises :class:`WrongTypeError` unless the concrete variant
    overrides it, so only the active variant's payload can ever be read.
    """

    __slots__ = ()

    value_type: ClassVar[ValueType]

    def _wrong_type(self, wanted: str) -> WrongTypeError:
        return WrongTypeError(
            f"consuming {self.value_type.value} value as {wanted}"
        )

    def as_string(self) -> str:
        raise self._wrong_type("String")

    def as_enum(self) -> str:
        raise self._wrong_type("Enum")

    def as_yes_no(self) -> bool:
        raise self._wrong_type("YES/NO Enum")

    def as_string_or_enum(self) -> str:
        raise self._wrong_type("String or Enum")

    def as_int(self) -> int:
        raise self._wrong_type("Integer")

    def as_uint(self) -> int:
        raise self._wrong_type("unsigned Integer")

    def as_float(self) -> float:
        raise self._wrong_type("Float")

    def as_number(self) -> float:
        raise self._wrong_type("Number")

    def as_bytes(self) -> bytes:
        raise self._wrong_type("Bytes")

    def as_resolution(self) -> Resolution:
        raise self._wrong_type("Resolution")

    def format(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class StringValue(Value):
    """Quoted string; the quotes are not part of the value."""

    value: str
    value_type: ClassVar[ValueType] = ValueType.STRING

    def as_string(self) -> str:
        return self.value

    def as_string_or_enum(self) -> str:
        return self.value

    def format(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class EnumValue(Value):
    """Bare enumerated token such as ``AUDIO`` or ``YES``."""

    value: str
    value_type: ClassVar[ValueType] = ValueType.ENUM

    def as_enum(self) -> str:
        return self.value

    def as_yes_no(self) -> bool:
        if self.value == "YES":
            return True
        if self.value == "NO":
            return False
        raise WrongTypeError(f"consuming {self.value} value as YES/NO Enum")

    def as_string_or_enum(self) -> str:
        return self.value

    def format(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerValue(Value):
    """Signed 64-bit decimal integer."""

    value: int
    value_type: ClassVar[ValueType] = ValueType.INTEGER

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"integer {self.value} does not fit in 64 bits")

    def as_int(self) -> int:
        return self.value

    def as_uint(self) -> int:
        if self.value < 0:
            raise WrongTypeError("consuming negative value as unsigned Integer")
        return self.value

    def as_number(self) -> float:
        return float(self.value)

    def format(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue(Value):
    """64-bit decimal floating point number."""

    value: float
    value_type: ClassVar[ValueType] = ValueType.FLOAT

    def as_float(self) -> float:
        return self.value

    def as_number(self) -> float:
        return self.value

    def format(self) -> str:
        return format_float(self.value)


@dataclass(frozen=True)
class BytesValue(Value):
    """Hexadecimal sequence written as ``0x`` followed by hex digits."""

    value: bytes
    value_type: ClassVar[ValueType] = ValueType.BYTES

    def as_bytes(self) -> bytes:
        return self.value

    def format(self) -> str:
        return "0x" + self.value.hex().upper()


@dataclass(frozen=True)
class ResolutionValue(Value):
    """Decimal resolution ``<width>x<height>``."""

    value: Resolution
    value_type: ClassVar[ValueType] = ValueType.RESOLUTION

    def as_resolution(self) -> Resolution:
        return self.value

    def format(self) -> str:
        return self.value.format()


def yes_no(flag: bool) -> EnumValue:
    """Build the ``YES``/``NO`` enum for a boolean."""
    return EnumValue("YES" if flag else "NO")


def format_float(value: float) -> str:
    """Shortest plain decimal text that parses back to ``value`` as a float.

    ``repr`` already yields the shortest round-tripping digits; scientific
    notation is expanded and a ``.`` is kept so the text stays a Float.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite float {value!r}")
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if "." not in text:
        text += ".0"
    return text


def parse_uint(text: str, what: str) -> int:
    """Parse an unsigned 64-bit decimal integer made of ASCII digits only."""
    if not _UINT_RE.fullmatch(text):
        raise FormatError(f"{what} has invalid integer format: {text!r}")
    value = int(text)
    if value > UINT64_MAX:
        raise FormatError(f"{what} is out of range: {text}")
    return value
