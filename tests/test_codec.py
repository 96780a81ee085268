import enum
from dataclasses import dataclass
from typing import Optional

import pytest

from sewup.codec import (
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    deserialize,
    serialize,
    serialized_size,
)


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


@dataclass
class Person:
    trusted: bool
    age: U8
    name: str
    nickname: Optional[str]
    scores: list[U16]
    tags: dict[str, int]


@pytest.mark.parametrize(
    "cls, value",
    [
        (U8, 0),
        (U8, 255),
        (I8, -128),
        (I8, 127),
        (U16, 65535),
        (I16, -32768),
        (U32, 4294967295),
        (I32, -2147483648),
        (U64, 2**64 - 1),
        (I64, -(2**63)),
    ],
)
def test_fixed_int_round_trip(cls, value):
    data = serialize(cls(value))
    assert len(data) == cls.bits // 8
    loaded = deserialize(data, cls)
    assert loaded == value
    assert type(loaded) is cls


def test_little_endian_layout():
    assert serialize(U32(1)) == b"\x01\x00\x00\x00"


def test_string_has_u64_length_prefix():
    data = serialize("ab")
    assert data[:8] == bytes([2, 0, 0, 0, 0, 0, 0, 0])
    assert data[8:] == b"ab"
    assert deserialize(data, str) == "ab"


def test_bool_encoding():
    assert serialize(True) == b"\x01"
    assert deserialize(serialize(False), bool) is False


@pytest.mark.parametrize(
    "cls, value", [(U8, 256), (U8, -1), (I8, -129), (I8, 128), (U16, 65536)]
)
def test_out_of_range_rejected(cls, value):
    with pytest.raises(OverflowError):
        cls(value)


def test_plain_int_is_u64():
    assert serialize(7) == serialize(U64(7))
    assert deserialize(serialize(7), int) == 7
    assert deserialize(serialize(-3), I64) == -3


def test_float_round_trip():
    assert deserialize(serialize(1.5), float) == 1.5


def test_bytes_round_trip():
    data = serialize(b"abc")
    assert deserialize(data, bytes) == b"abc"
    assert serialized_size(b"abc") == serialized_size(b"xyz")


def test_list_round_trip():
    data = serialize([U8(1), U8(2)])
    assert data[8:] == b"\x01\x02"
    assert deserialize(data, list[U8]) == [1, 2]


def test_tuple_has_no_length():
    data = serialize((U8(1), "x"))
    assert data[:1] == b"\x01"
    assert deserialize(data, tuple[U8, str]) == (1, "x")


def test_dict_round_trip():
    value = {"a": 1, "b": 2}
    assert deserialize(serialize(value), dict[str, int]) == value


def test_enum_uses_declaration_index():
    assert serialize(Color.GREEN) == serialize(U32(1))
    assert deserialize(serialize(Color.BLUE), Color) is Color.BLUE


def test_dataclass_round_trip():
    person = Person(True, U8(30), "alice", None, [U16(1), U16(500)], {"k": 9})
    assert deserialize(serialize(person), Person) == person
    other = Person(False, U8(1), "bob", "bobby", [], {})
    assert deserialize(serialize(other), Person) == other


def test_optional_presence_changes_size():
    absent = Person(True, U8(1), "a", None, [], {})
    present = Person(True, U8(1), "a", "b", [], {})
    assert serialized_size(present) - serialized_size(absent) == serialized_size("b")


def test_serialized_size_matches_serialize():
    person = Person(True, U8(30), "alice", "al", [U16(7)], {"x": 1})
    assert serialized_size(person) == len(serialize(person))


def test_trailing_bytes_ignored():
    assert deserialize(serialize(U8(7)) + b"xyz", U8) == 7


def test_truncated_input_rejected():
    with pytest.raises(ValueError):
        deserialize(serialize(U8(1)), U32)


def test_invalid_bool_rejected():
    with pytest.raises(ValueError):
        deserialize(b"\x02", bool)


def test_invalid_option_tag_rejected():
    with pytest.raises(ValueError):
        deserialize(b"\x05", Optional[U8])


def test_invalid_enum_index_rejected():
    with pytest.raises(ValueError):
        deserialize(serialize(U32(3)), Color)


def test_unserializable_value_rejected():
    with pytest.raises(TypeError):
        serialize(object())


def test_unknown_target_type_rejected():
    with pytest.raises(TypeError):
        deserialize(b"\x00", object)