"""Helpers shared by the directive decoders."""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urljoin, urlparse

from .errors import FormatError, WrongTypeError
from .tag import Tag


def expect_tag(tag: Tag, name: str, what: str) -> None:
    if tag.name != name:
        raise FormatError(f"parsing {what} using the wrong tag: {tag.name}")


def read_attr(tag: Tag, name: str, accessor: str, *, required: bool = False) -> Optional[Any]:
    """Read the last ``name`` attribute of ``tag`` through a typed accessor.

    ``accessor`` names a :class:`~hlsparse.value.Value` method such as
    ``"as_uint"``. A value of the wrong kind is a format error of the tag.
    """
    attr = tag.attributes().get_last(name)
    if attr is None:
        if required:
            raise FormatError(f"{tag.name} tag is missing {name} attribute")
        return None
    try:
        return getattr(attr.value, accessor)()
    except WrongTypeError as exc:
        raise FormatError(f"{tag.name} tag has invalid {name} attribute: {exc}") from exc


def resolve_url(base: str, relative: str) -> str:
    parsed = urlparse(relative)
    if parsed.scheme or not base:
        return relative
    return urljoin(base, relative)
