from __future__ import annotations

import collections.abc
import dataclasses
import logging
import types
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, TypeAdapter, ValidationError

from miniconf.core.coerce import Coercer, coerce_all, to_bool, to_float, to_int, to_str
from miniconf.core.models import Section, lookup
from miniconf.parsers.common import normalize_key

logger = logging.getLogger(__name__)

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):  # py3.10+ `X | None`
    _UNION_TYPES += (types.UnionType,)


class FieldKind(str, Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRINGS = "strings"
    INTS = "ints"
    FLOATS = "floats"

    @property
    def is_sequence(self) -> bool:
        return self in (FieldKind.STRINGS, FieldKind.INTS, FieldKind.FLOATS)


_SCALAR_KINDS: Dict[Any, FieldKind] = {
    str: FieldKind.STRING,
    bool: FieldKind.BOOL,
    int: FieldKind.INT,
    float: FieldKind.FLOAT,
}

_SEQUENCE_KINDS: Dict[Any, FieldKind] = {
    str: FieldKind.STRINGS,
    int: FieldKind.INTS,
    float: FieldKind.FLOATS,
}

_COERCERS: Dict[FieldKind, Coercer[Any]] = {
    FieldKind.STRING: to_str,
    FieldKind.INT: to_int,
    FieldKind.FLOAT: to_float,
    FieldKind.BOOL: to_bool,
    FieldKind.STRINGS: to_str,
    FieldKind.INTS: to_int,
    FieldKind.FLOATS: to_float,
}


@dataclass(frozen=True)
class FieldBinding:
    """One settable record field and the section keys that feed it."""
    attr: str
    keys: Tuple[str, ...]
    kind: FieldKind
    # pydantic constraints (e.g. NonNegativeInt) checked after coercion
    validator: Optional[TypeAdapter] = None


def _unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) in _UNION_TYPES:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _strip_annotated(tp: Any) -> Any:
    if get_origin(tp) is Annotated:
        return get_args(tp)[0]
    return tp


def _has_constraints(tp: Any) -> bool:
    """True when an Annotated[...] appears anywhere inside `tp`."""
    if get_origin(tp) is Annotated:
        return True
    return any(_has_constraints(a) for a in get_args(tp))


def field_kind(tp: Any) -> Optional[FieldKind]:
    """
    Map a type annotation to a FieldKind, or None when unsupported.

    Examples:
      int                       -> INT
      Optional[str]             -> STRING
      Optional[NonNegativeInt]  -> INT
      List[float]               -> FLOATS
      List[NonNegativeInt]      -> INTS
      List[bool]                -> None
    """
    tp = _strip_annotated(_unwrap_optional(_strip_annotated(tp)))
    try:
        kind = _SCALAR_KINDS.get(tp)
    except TypeError:  # unhashable annotation
        return None
    if kind is not None:
        return kind

    if get_origin(tp) in (list, collections.abc.Sequence):
        args = get_args(tp)
        if len(args) == 1:
            return _SEQUENCE_KINDS.get(_strip_annotated(args[0]))
    return None


def _lookup_keys(*names: Optional[str]) -> Tuple[str, ...]:
    out: List[str] = []
    for n in names:
        k = normalize_key(n)
        if k and k not in out:
            out.append(k)
    return tuple(out)


def _model_bindings(cls: type) -> List[FieldBinding]:
    out: List[FieldBinding] = []
    for name, info in cls.model_fields.items():
        if name.startswith("_"):
            continue
        if info.frozen:
            logger.debug("%s.%s: frozen field, skipped", cls.__name__, name)
            continue
        kind = field_kind(info.annotation)
        if kind is None:
            logger.debug("%s.%s: unsupported field type %r, skipped", cls.__name__, name, info.annotation)
            continue

        # top-level constraints live in metadata, nested ones stay in the annotation
        validator = None
        if info.metadata:
            validator = TypeAdapter(Annotated[(info.annotation, *info.metadata)])
        elif _has_constraints(info.annotation):
            validator = TypeAdapter(info.annotation)

        out.append(
            FieldBinding(
                attr=name,
                keys=_lookup_keys(info.alias, name),
                kind=kind,
                validator=validator,
            )
        )
    return out


def _dataclass_bindings(cls: type) -> List[FieldBinding]:
    hints = get_type_hints(cls, include_extras=True)
    out: List[FieldBinding] = []
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        hint = hints.get(f.name, f.type)
        kind = field_kind(hint)
        if kind is None:
            logger.debug("%s.%s: unsupported field type %r, skipped", cls.__name__, f.name, f.type)
            continue
        validator = TypeAdapter(hint) if _has_constraints(hint) else None
        out.append(FieldBinding(attr=f.name, keys=_lookup_keys(f.name), kind=kind, validator=validator))
    return out


@lru_cache(maxsize=None)
def bindings_for(cls: type) -> Tuple[FieldBinding, ...]:
    """
    Build (once per type) the table of fields a section can populate.

    Accepts mutable pydantic models and dataclasses; frozen records and
    anything else are a TypeError, raised before any field is written.
    """
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        if cls.model_config.get("frozen"):
            raise TypeError(f"cannot bind section data to frozen model {cls.__name__}")
        return tuple(_model_bindings(cls))
    if dataclasses.is_dataclass(cls):
        if cls.__dataclass_params__.frozen:
            raise TypeError(f"cannot bind section data to frozen dataclass {cls.__name__}")
        return tuple(_dataclass_bindings(cls))
    raise TypeError(f"cannot bind section data to {cls!r}: expected a pydantic model or dataclass")


def _coerce(kind: FieldKind, values: Tuple[str, ...]) -> Any:
    coerce = _COERCERS[kind]
    if kind.is_sequence:
        return coerce_all(values, coerce)
    if len(values) != 1:
        return None
    return coerce(values[0])


def populate(section: Section, target: Any) -> None:
    """
    Assign every field of `target` that has a matching, coercible key.

    Missing keys and failed coercions leave the field untouched.
    """
    for b in bindings_for(type(target)):
        values = None
        for key in b.keys:
            values = lookup(section, key)
            if values is not None:
                break
        if values is None:
            continue

        value = _coerce(b.kind, values)
        if value is None:
            logger.debug("[%s] %s: %r is not a valid %s, keeping prior value",
                         section.name, b.attr, values, b.kind.value)
            continue

        if b.validator is not None:
            try:
                value = b.validator.validate_python(value)
            except ValidationError:
                logger.debug("[%s] %s: %r rejected by field constraints, keeping prior value",
                             section.name, b.attr, value)
                continue

        setattr(target, b.attr, value)
