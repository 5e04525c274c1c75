from __future__ import annotations

from types import MappingProxyType
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple, TypeVar

from miniconf.core.binding import populate
from miniconf.core.coerce import Coercer, coerce_all, to_bool, to_float, to_int, to_str
from miniconf.core.models import Section, lookup
from miniconf.parsers.common import normalize_key

T = TypeVar("T")


def _scalar(section: Optional[Section], key: Optional[str], default: T, coerce: Coercer[T]) -> T:
    # array keys holding several values are not scalars
    values = lookup(section, key)
    if values is None or len(values) != 1:
        return default
    value = coerce(values[0])
    return default if value is None else value


def _array(section: Optional[Section], key: Optional[str], coerce: Coercer[T]) -> Optional[List[T]]:
    values = lookup(section, key)
    if values is None:
        return None
    return coerce_all(values, coerce)


class Configuration:
    """
    Parsed, read-only document: one default section plus named sections.

    Lookups in the default section never fall through to a named section and
    vice versa. Missing keys and sections give the caller's default (scalar
    getters) or None (array getters, key sets); nothing here raises for
    missing data or bad values.
    """

    __slots__ = ("_default", "_sections")

    def __init__(
        self,
        default: Optional[Section] = None,
        sections: Optional[Mapping[str, Section]] = None,
    ) -> None:
        self._default = default if default is not None else Section("")
        self._sections: Mapping[str, Section] = MappingProxyType(
            {normalize_key(name): s for name, s in (sections or {}).items()}
        )

    def __repr__(self) -> str:
        return f"Configuration(keys={len(self._default)}, sections={list(self.section_names())!r})"

    # ----------------------------
    # Sections
    # ----------------------------

    @property
    def default_section(self) -> Section:
        return self._default

    def section(self, name: Optional[str]) -> Optional[Section]:
        return self._sections.get(normalize_key(name))

    def has_section(self, name: Optional[str]) -> bool:
        return self.section(name) is not None

    def section_names(self) -> Tuple[str, ...]:
        """Named sections in first-seen order, as first spelled in the source."""
        return tuple(s.name for s in self._sections.values())

    def keys(self) -> FrozenSet[str]:
        return frozenset(self._default)

    def keys_for_section(self, name: Optional[str]) -> Optional[FrozenSet[str]]:
        section = self.section(name)
        if section is None:
            return None
        return frozenset(section)

    # ----------------------------
    # Default section
    # ----------------------------

    def get_string(self, key: str, default: str = "") -> str:
        return _scalar(self._default, key, default, to_str)

    def get_int(self, key: str, default: int = 0) -> int:
        return _scalar(self._default, key, default, to_int)

    def get_float(self, key: str, default: float = 0.0) -> float:
        return _scalar(self._default, key, default, to_float)

    def get_bool(self, key: str, default: bool = False) -> bool:
        return _scalar(self._default, key, default, to_bool)

    def get_strings(self, key: str) -> Optional[List[str]]:
        return _array(self._default, key, to_str)

    def get_ints(self, key: str) -> Optional[List[int]]:
        return _array(self._default, key, to_int)

    def get_floats(self, key: str) -> Optional[List[float]]:
        return _array(self._default, key, to_float)

    # ----------------------------
    # Named sections
    # ----------------------------

    def get_string_from_section(self, section: str, key: str, default: str = "") -> str:
        return _scalar(self.section(section), key, default, to_str)

    def get_int_from_section(self, section: str, key: str, default: int = 0) -> int:
        return _scalar(self.section(section), key, default, to_int)

    def get_float_from_section(self, section: str, key: str, default: float = 0.0) -> float:
        return _scalar(self.section(section), key, default, to_float)

    def get_bool_from_section(self, section: str, key: str, default: bool = False) -> bool:
        return _scalar(self.section(section), key, default, to_bool)

    def get_strings_from_section(self, section: str, key: str) -> Optional[List[str]]:
        return _array(self.section(section), key, to_str)

    def get_ints_from_section(self, section: str, key: str) -> Optional[List[int]]:
        return _array(self.section(section), key, to_int)

    def get_floats_from_section(self, section: str, key: str) -> Optional[List[float]]:
        return _array(self.section(section), key, to_float)

    # ----------------------------
    # Records
    # ----------------------------

    def data_from_section(self, section: str, target: Any) -> bool:
        """
        Populate a pydantic model or dataclass instance from a section.

        Returns False, leaving `target` untouched, when the section does not
        exist. Fields are matched case-insensitively; fields whose key is
        missing or not coercible keep the value the caller set.
        """
        found = self.section(section)
        if found is None:
            return False
        populate(found, target)
        return True
