import pytest

from sewup.codec import deserialize, serialize, serialized_size
from sewup.raw import Raw


def test_serde_for_raw():
    raw = Raw([0, 1])
    assert raw.to_bytes32() == bytes([0, 1] + [0] * 30)
    load = deserialize(serialize(raw), Raw)
    assert load.to_bytes32() == raw.to_bytes32()


def test_serde_for_raw2():
    data = [
        0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
        200, 201, 202, 203, 204, 205, 206, 207, 208, 209, 210, 211, 212, 213, 214, 215,
    ]
    raw = Raw(data)
    assert raw.to_bytes32() == bytes(data)
    load = deserialize(serialize(raw), Raw)
    assert load.to_bytes32() == raw.to_bytes32()


def test_raw_serializes_as_32_bytes():
    raw = Raw(b"abc")
    assert serialize(raw) == raw.to_bytes32()
    assert serialized_size(raw) == 32


def test_from():
    r1 = Raw([1, 2, 3])
    assert r1 == [1, 2, 3] + [0] * 29
    r2 = Raw(bytes([4] * 32))
    assert r2 == [4] * 32


def test_short_string():
    r1 = Raw("abcd")
    assert r1 == [97, 98, 99, 100] + [0] * 28


def test_box():
    r1 = Raw(bytes([1, 2, 3]))
    assert r1 == [1, 2, 3] + [0] * 29
    r2 = Raw(bytes([5] * 32))
    assert r2 == [5] * 32


@pytest.mark.parametrize(
    "value, width",
    [(5, 8), (300, 16), (4294967295, 32), (4300000000, 64), (4294967295, 64)],
)
def test_unsigned_integer_convert(value, width):
    assert Raw.from_uint(value, width).to_uint(width) == value


@pytest.mark.parametrize(
    "value, width",
    [(-5, 8), (-300, 16), (-2147483648, 32), (-4294967295, 64), (-2147483648, 64)],
)
def test_signed_integer_convert(value, width):
    assert Raw.from_int(value, width).to_int(width) == value


def test_unsigned_is_right_aligned_big_endian():
    raw = Raw.from_uint(300, 16)
    assert raw.to_bytes32() == bytes(30) + (300).to_bytes(2, "big")


def test_integer_out_of_range():
    with pytest.raises(OverflowError):
        Raw.from_uint(256, 8)
    with pytest.raises(OverflowError):
        Raw.from_int(-129, 8)
    with pytest.raises(ValueError):
        Raw.from_uint(1, 12)


def test_integer_input_rejected():
    with pytest.raises(TypeError):
        Raw(5)


def test_too_long_rejected():
    with pytest.raises(ValueError):
        Raw(bytes(33))


def test_address_round_trip():
    addr = bytes(range(1, 21))
    raw = Raw.from_raw_address(addr)
    assert raw.to_bytes20() == addr
    assert raw.to_bytes32()[:12] == bytes(12)


def test_address_length_checked():
    with pytest.raises(ValueError):
        Raw.from_raw_address(bytes(19))


def test_wipe_header():
    raw = Raw(bytes([7] * 32))
    raw.wipe_header(3)
    assert raw == [0, 0, 0] + [7] * 29
    with pytest.raises(ValueError):
        raw.wipe_header(33)


def test_copy_is_independent():
    original = Raw(bytes([9] * 32))
    copy = Raw(original)
    copy.wipe_header(1)
    assert original == [9] * 32
    assert copy != original


def test_as_str():
    assert Raw("hello").as_str() == "hello" + "\x00" * 27
    with pytest.raises(UnicodeDecodeError):
        Raw(b"\xff").as_str()


def test_ordering_and_hash():
    low, high = Raw(b"\x01"), Raw(b"\x02")
    assert low < high
    assert sorted([high, low]) == [low, high]
    assert {Raw(b"a"): 1}[Raw(b"a")] == 1
    assert bytes(low) == low.to_bytes32()
    assert hash(low) == hash(bytes(low))


def test_truncated_decode_rejected():
    with pytest.raises(ValueError):
        deserialize(bytes(31), Raw)