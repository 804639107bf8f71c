"""Exceptions raised while parsing HLS playlists."""

from __future__ import annotations

from typing import Optional


class HLSError(Exception):
    """Base class for hlsparse errors."""


class FormatError(HLSError, ValueError):
    """Raised when playlist text violates the M3U8 syntax.

    ``line_num`` is filled in by the playlist scanner when the error surfaces
    from a directive; ``position`` and ``char`` point at the offending
    character inside an attribute list when the grammar parser knows it.
    """

    def __init__(
        self,
        reason: str,
        *,
        line_num: Optional[int] = None,
        position: Optional[int] = None,
        char: Optional[str] = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.line_num = line_num
        self.position = position
        self.char = char

    def __str__(self) -> str:
        message = self.reason
        if self.line_num is not None:
            message = f"line {self.line_num}: {message}"
        if self.position is not None:
            detail = f"at position {self.position}"
            if self.char is not None:
                detail += f", got {self.char!r}"
            message = f"{message} ({detail})"
        return message


class WrongTypeError(HLSError, TypeError):
    """Raised when a value is consumed as a type it does not hold."""
