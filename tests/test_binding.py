"""Tests for populating records from a section."""

from dataclasses import dataclass, field
from typing import List, Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PrivateAttr

from miniconf import load_configuration_from_string
from miniconf.core.binding import FieldKind, bindings_for, field_kind


STRUCT_INI = """[section]
first=alpha
second=beta
third="gamma bamma"
fourth = 'delta'
l=-32
f64=3.14
flag=true
unflag=false
strings[]=one
strings[]=two
LS[]=1
LS[]=2
F64s[]=11.0
F64s[]=22.0
flags[]=true
u=-5
#comment
; comment"""


class Record(BaseModel):
    First: str = ""
    Second: str = ""
    L: int = 0
    F64: float = 0.0
    Flag: bool = False
    Strings: Optional[List[str]] = None
    LS: Optional[List[int]] = None
    F64s: Optional[List[float]] = None
    Missing: str = ""
    MissingInt: int = 0
    MissingArray: Optional[List[str]] = None
    Flags: Optional[List[bool]] = None
    U: NonNegativeInt = 0

    _private: str = PrivateAttr(default="")


@dataclass
class PlainRecord:
    first: str = ""
    l: int = 0
    f64: float = 0.0
    flag: bool = False
    strings: Optional[List[str]] = None
    ls: List[int] = field(default_factory=list)
    missing: str = "kept"
    _private: str = ""


def test_load_into_pydantic_model():
    config = load_configuration_from_string(STRUCT_INI)

    data = Record(MissingInt=33, Missing="hello world", U=7)
    ok = config.data_from_section("section", data)

    assert ok is True
    assert data.First == "alpha"
    assert data.Second == "beta"
    assert data.L == -32
    assert data.F64 == 3.14
    assert data.Flag is True
    assert data.Missing == "hello world"
    assert data.MissingInt == 33
    assert data.MissingArray is None
    assert data._private == ""

    assert data.Strings == ["one", "two"]
    assert data.LS == [1, 2]
    assert data.F64s == [11.0, 22.0]


def test_unsupported_sequence_field_is_untouched():
    config = load_configuration_from_string(STRUCT_INI)

    data = Record()
    config.data_from_section("section", data)

    assert data.Flags is None


def test_constraint_violation_keeps_prior_value():
    config = load_configuration_from_string(STRUCT_INI)

    data = Record(U=7)
    config.data_from_section("section", data)

    assert data.U == 7


def test_unsigned_field_accepts_non_negative():
    config = load_configuration_from_string("[s]\nu=12")

    data = Record()
    config.data_from_section("s", data)

    assert data.U == 12


def test_bad_values_keep_prior_values():
    config = load_configuration_from_string("[s]\nl=abc\nf64=x\nflag=maybe\nls[]=1\nls[]=two")

    data = Record(L=5, F64=1.5, Flag=True, LS=[9])
    config.data_from_section("s", data)

    assert data.L == 5
    assert data.F64 == 1.5
    assert data.Flag is True
    assert data.LS == [9]


def test_scalar_field_from_multi_value_key_keeps_prior_value():
    config = load_configuration_from_string("[s]\nfirst[]=a\nfirst[]=b")

    data = Record(First="prior")
    config.data_from_section("s", data)

    assert data.First == "prior"


def test_alias_is_used_for_lookup():
    class Aliased(BaseModel):
        host_name: str = Field(default="", alias="host")

    config = load_configuration_from_string("[s]\nHOST=example.org")

    data = Aliased()
    config.data_from_section("s", data)

    assert data.host_name == "example.org"


def test_load_into_dataclass():
    config = load_configuration_from_string(STRUCT_INI)

    data = PlainRecord(_private="secret")
    ok = config.data_from_section("section", data)

    assert ok is True
    assert data.first == "alpha"
    assert data.l == -32
    assert data.f64 == 3.14
    assert data.flag is True
    assert data.strings == ["one", "two"]
    assert data.ls == [1, 2]
    assert data.missing == "kept"
    assert data._private == "secret"


def test_load_struct_missing_section():
    config = load_configuration_from_string("")

    data = Record(First="untouched")
    ok = config.data_from_section("section", data)

    assert ok is False
    assert data.First == "untouched"


def test_missing_section():
    config = load_configuration_from_string("[section]\nfirst=alpha")

    assert config.data_from_section("missing_section", Record()) is False


def test_empty_section_still_succeeds():
    config = load_configuration_from_string("[section]")

    data = Record(First="kept")

    assert config.data_from_section("section", data) is True
    assert data.First == "kept"


def test_unsupported_target_type():
    config = load_configuration_from_string("[section]\nfirst=alpha")

    with pytest.raises(TypeError):
        config.data_from_section("section", {"first": ""})


class Ports(BaseModel):
    port: Optional[NonNegativeInt] = None
    ports: Optional[List[NonNegativeInt]] = None


@dataclass
class PlainPorts:
    port: Optional[NonNegativeInt] = None
    ports: List[NonNegativeInt] = field(default_factory=list)


def test_optional_and_list_of_constrained_ints_are_bound():
    config = load_configuration_from_string("[s]\nport=8080\nports[]=1\nports[]=2")

    data = Ports()
    config.data_from_section("s", data)

    assert data.port == 8080
    assert data.ports == [1, 2]


def test_constrained_ints_reject_negatives():
    config = load_configuration_from_string("[s]\nport=-1\nports[]=1\nports[]=-2")

    data = Ports(port=80, ports=[443])
    config.data_from_section("s", data)

    assert data.port == 80
    assert data.ports == [443]


def test_dataclass_honours_annotated_constraints():
    config = load_configuration_from_string("[s]\nport=-1\nports[]=3")

    data = PlainPorts(port=22)
    config.data_from_section("s", data)

    assert data.port == 22
    assert data.ports == [3]


class FrozenRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    first: str = ""


@dataclass(frozen=True)
class FrozenPlainRecord:
    first: str = ""


@pytest.mark.parametrize("target", [FrozenRecord(), FrozenPlainRecord()])
def test_frozen_target_is_rejected_before_any_write(target):
    config = load_configuration_from_string("[section]\nfirst=alpha")

    with pytest.raises(TypeError):
        config.data_from_section("section", target)

    assert target.first == ""


def test_frozen_field_is_skipped():
    class PartlyFrozen(BaseModel):
        first: str = Field(default="fixed", frozen=True)
        second: str = ""

    config = load_configuration_from_string("[s]\nfirst=alpha\nsecond=beta")

    data = PartlyFrozen()
    config.data_from_section("s", data)

    assert data.first == "fixed"
    assert data.second == "beta"


@pytest.mark.parametrize("tp,expected", [
    (str, FieldKind.STRING),
    (int, FieldKind.INT),
    (float, FieldKind.FLOAT),
    (bool, FieldKind.BOOL),
    (Optional[int], FieldKind.INT),
    (List[str], FieldKind.STRINGS),
    (Optional[List[float]], FieldKind.FLOATS),
    (Optional[NonNegativeInt], FieldKind.INT),
    (List[NonNegativeInt], FieldKind.INTS),
    (List[bool], None),
    (dict, None),
])
def test_field_kind(tp, expected):
    assert field_kind(tp) is expected


def test_bindings_are_cached_per_type():
    first = bindings_for(Record)

    assert bindings_for(Record) is first
    assert "Flags" not in {b.attr for b in first}
    assert "_private" not in {b.attr for b in first}
