"""Parser configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_LINE_LENGTH = 4096


@dataclass
class ParserConfig:
    """Limits and decoding options for a playlist scan."""

    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.max_line_length <= 0:
            raise ValueError("max_line_length must be positive")

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """Build a config, letting HLSPARSE_MAX_LINE_LENGTH override the limit."""
        raw = os.getenv("HLSPARSE_MAX_LINE_LENGTH", str(DEFAULT_MAX_LINE_LENGTH))
        try:
            max_line_length = int(raw)
        except ValueError:
            raise ValueError(
                f"HLSPARSE_MAX_LINE_LENGTH must be an integer, got {raw!r}"
            ) from None
        return cls(max_line_length=max_line_length)
