from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class SectionHeader:
    """A `[name]` line. `name` is trimmed but not case-folded."""
    name: str
    line: int


@dataclass(frozen=True)
class ParsedKV:
    """
    A normalized `key=value` assignment.

    `value` is None when the raw value could not be decoded (dangling
    backslash); the key is still declared.
    """
    key: str
    value: Optional[str]
    append: bool = False
    line: Optional[int] = None


ParsedEntry = Union[SectionHeader, ParsedKV]
