"""Ordered, name-indexed attribute lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from .value import Value


@dataclass
class Attribute:
    """A single ``NAME=value`` pair."""

    name: str
    value: Value

    def format(self) -> str:
        return f"{self.name}={self.value.format()}"


class AttributeList:
    """Attributes in declaration order plus an index by name.

    Duplicate names are kept; consumers usually take the last occurrence.
    """

    def __init__(self, attrs: Optional[Iterable[Attribute]] = None) -> None:
        self._attrs: List[Attribute] = []
        self._index: Dict[str, List[Attribute]] = {}
        for attr in attrs or ():
            self.append(attr)

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"AttributeList({self.format()!r})"

    def append(self, attr: Attribute) -> None:
        self._attrs.append(attr)
        self._index.setdefault(attr.name, []).append(attr)

    def get(self, name: str) -> List[Attribute]:
        return list(self._index.get(name, ()))

    def get_first(self, name: str) -> Optional[Attribute]:
        found = self._index.get(name)
        return found[0] if found else None

    def get_last(self, name: str) -> Optional[Attribute]:
        found = self._index.get(name)
        return found[-1] if found else None

    def remove(self, name: str) -> None:
        """Drop every attribute called ``name``."""
        if self._index.pop(name, None) is None:
            return
        self._attrs = [attr for attr in self._attrs if attr.name != name]

    def set(self, name: str, value: Value) -> None:
        """Replace the first ``name`` in place, dropping later duplicates.

        Appends a new attribute when ``name`` is absent.
        """
        found = self.get_first(name)
        if found is None:
            self.append(Attribute(name, value))
            return
        found.value = value
        self._attrs = [
            attr for attr in self._attrs if attr.name != name or attr is found
        ]
        self._index[name] = [found]

    def format(self) -> str:
        return ",".join(attr.format() for attr in self._attrs)
