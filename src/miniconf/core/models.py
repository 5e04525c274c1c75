from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from miniconf.parsers.common import normalize_key
from miniconf.parsers.ini_parser import DEFAULT_COMMENT_PREFIXES


# ================================
# Loader config (defaults only)
# ================================


class LoaderConfig(BaseModel):
    """
    Loader defaults live here.
    Pass an instance to the load_configuration* functions to override them.
    """

    encoding: str = Field(default="utf-8", min_length=1)
    errors: str = Field(default="strict", min_length=1)
    comment_prefixes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_COMMENT_PREFIXES),
        min_length=1,
        description="Line prefixes that mark a comment. Checked after stripping whitespace.",
    )

    @field_validator("comment_prefixes")
    @classmethod
    def _prefixes_must_be_usable(cls, v: List[str]) -> List[str]:
        for p in v:
            if not p:
                raise ValueError("comment prefix must not be empty")
            if p.startswith("["):
                raise ValueError("comment prefix must not start with '['")
        return v


# ================================
# Sections
# ================================


class Section(Mapping[str, Tuple[str, ...]]):
    """
    Read-only, case-insensitive view over one section's keys.

    Every key maps to a tuple of raw values, a singleton for plain keys.
    """

    __slots__ = ("name", "_values")

    def __init__(self, name: str, values: Optional[Mapping[str, Tuple[str, ...]]] = None) -> None:
        self.name = name
        self._values: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {normalize_key(k): tuple(v) for k, v in (values or {}).items()}
        )

    def __getitem__(self, key: str) -> Tuple[str, ...]:
        return self._values[normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Section({self.name!r}, {dict(self._values)!r})"


def lookup(section: Optional[Section], key: Optional[str]) -> Optional[Tuple[str, ...]]:
    """
    Raw values for `key`, or None when the section or key is absent.
    An empty key never matches.
    """
    if section is None:
        return None
    k = normalize_key(key)
    if not k:
        return None
    return section.get(k)
