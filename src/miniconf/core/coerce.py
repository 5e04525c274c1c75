from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

Coercer = Callable[[str], Optional[T]]

_INT_RE = re.compile(r"^[+-]?[0-9]+$")


def to_int(raw: str) -> Optional[int]:
    s = raw.strip()
    if not _INT_RE.match(s):
        return None
    return int(s, 10)


def to_float(raw: str) -> Optional[float]:
    s = raw.strip()
    # python accepts "1_000.5", keep to plain digits
    if not s or "_" in s:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def to_bool(raw: str) -> Optional[bool]:
    s = raw.strip().lower()
    if s == "true":
        return True
    if s == "false":
        return False
    return None


def to_str(raw: str) -> Optional[str]:
    return raw


def coerce_all(values: Sequence[str], coerce: Coercer[T]) -> Optional[List[T]]:
    """
    Coerce every element or nothing: one bad element -> None.
    """
    out: List[T] = []
    for v in values:
        c = coerce(v)
        if c is None:
            return None
        out.append(c)
    return out
