"""Compact binary encoding with fixed-width little-endian integers.

Lengths of strings, byte strings, lists and maps are written as u64 before
their content; tuples, dataclasses and types with their own encoding are
written without a length. ``None`` is the absent optional (a single zero
byte); a present optional is a one byte followed by the value. Enum members
are written as their declaration index in a u32.

Types may take part by defining ``bincode_encode(self) -> bytes`` and a
classmethod ``bincode_decode(cls, data, offset) -> (value, new_offset)``.
"""

import dataclasses
import enum
import functools
import struct
import types
import typing
from typing import Any, ClassVar, Union

__all__ = [
    "U8",
    "U16",
    "U32",
    "U64",
    "I8",
    "I16",
    "I32",
    "I64",
    "serialize",
    "deserialize",
    "serialized_size",
]


class _FixedInt(int):
    """An integer restricted to a fixed width."""

    bits: ClassVar[int] = 64
    signed: ClassVar[bool] = False

    def __new__(cls, value=0):
        number = super().__new__(cls, value)
        low, high = cls.bounds()
        if not low <= number <= high:
            raise OverflowError(f"{int(number)} does not fit in {cls.__name__}")
        return number

    @classmethod
    def bounds(cls):
        """The smallest and largest value of the type."""
        if cls.signed:
            half = 1 << (cls.bits - 1)
            return -half, half - 1
        return 0, (1 << cls.bits) - 1

    def to_bytes_le(self):
        return int(self).to_bytes(self.bits // 8, "little", signed=self.signed)

    def __repr__(self):
        return f"{type(self).__name__}({int(self)})"


class U8(_FixedInt):
    """Unsigned 8-bit integer."""

    bits = 8


class U16(_FixedInt):
    """Unsigned 16-bit integer."""

    bits = 16


class U32(_FixedInt):
    """Unsigned 32-bit integer."""

    bits = 32


class U64(_FixedInt):
    """Unsigned 64-bit integer."""

    bits = 64


class I8(_FixedInt):
    """Signed 8-bit integer."""

    bits = 8
    signed = True


class I16(_FixedInt):
    """Signed 16-bit integer."""

    bits = 16
    signed = True


class I32(_FixedInt):
    """Signed 32-bit integer."""

    bits = 32
    signed = True


class I64(_FixedInt):
    """Signed 64-bit integer."""

    bits = 64
    signed = True


_NOT_OPTIONAL = object()
_DOUBLE = struct.Struct("<d")
_BUILTIN_NAMES = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
}


def _int_bytes(value, bits, signed):
    return int(value).to_bytes(bits // 8, "little", signed=signed)


def _length(count):
    return _int_bytes(count, 64, False)


def _take(data, offset, size):
    end = offset + size
    if end > len(data):
        raise ValueError("unexpected end of input")
    return data[offset:end], end


def _read_length(data, offset):
    chunk, offset = _take(data, offset, 8)
    return int.from_bytes(chunk, "little"), offset


def _optional_inner(hint):
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(hint)
        present = [arg for arg in args if arg is not type(None)]
        if len(present) == 1 and len(args) == 2:
            return present[0]
        raise TypeError(f"unsupported union type {hint!r}")
    return _NOT_OPTIONAL


def _field_hint(field):
    hint = field.type
    if isinstance(hint, str):
        # Annotations left as text are only understood for plain builtins.
        return _BUILTIN_NAMES.get(hint, Any)
    return hint


@functools.lru_cache(maxsize=None)
def _dataclass_fields(cls):
    return tuple(
        (field.name, _field_hint(field), field.init)
        for field in dataclasses.fields(cls)
    )


def _encode_enum(member):
    return _int_bytes(list(type(member)).index(member), 32, False)


def _encode_dataclass(value):
    return b"".join(
        _encode(getattr(value, name), hint)
        for name, hint, _ in _dataclass_fields(type(value))
    )


def _encode_text(value):
    encoded = value.encode("utf-8")
    return _length(len(encoded)) + encoded


def _encode_inferred(value):
    if value is None:
        return b"\x00"
    encoder = getattr(value, "bincode_encode", None)
    if callable(encoder) and not isinstance(value, type):
        return encoder()
    if isinstance(value, bool):
        return b"\x01" if value else b"\x00"
    if isinstance(value, enum.Enum):
        return _encode_enum(value)
    if isinstance(value, _FixedInt):
        return value.to_bytes_le()
    if isinstance(value, int):
        return _int_bytes(value, 64, value < 0)
    if isinstance(value, float):
        return _DOUBLE.pack(value)
    if isinstance(value, str):
        return _encode_text(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        payload = bytes(value)
        return _length(len(payload)) + payload
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _encode_dataclass(value)
    if isinstance(value, tuple):
        return b"".join(_encode(item) for item in value)
    if isinstance(value, list):
        return _length(len(value)) + b"".join(_encode(item) for item in value)
    if isinstance(value, dict):
        return _length(len(value)) + b"".join(
            _encode(key) + _encode(item) for key, item in value.items()
        )
    raise TypeError(f"cannot serialize value of type {type(value).__name__}")


def _encode(value, hint=None):
    if hint is None or hint is Any:
        return _encode_inferred(value)
    inner = _optional_inner(hint)
    if inner is not _NOT_OPTIONAL:
        return b"\x00" if value is None else b"\x01" + _encode(value, inner)
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin is list:
        item_hint = args[0] if args else None
        return _length(len(value)) + b"".join(_encode(item, item_hint) for item in value)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return b"".join(_encode(item, args[0]) for item in value)
        if len(args) != len(value):
            raise ValueError(f"expected {len(args)} items, got {len(value)}")
        return b"".join(_encode(item, arg) for item, arg in zip(value, args))
    if origin is dict:
        key_hint, value_hint = args if args else (None, None)
        return _length(len(value)) + b"".join(
            _encode(key, key_hint) + _encode(item, value_hint)
            for key, item in value.items()
        )
    if isinstance(hint, type):
        if issubclass(hint, bool):
            return b"\x01" if value else b"\x00"
        if issubclass(hint, enum.Enum):
            return _encode_enum(hint(value))
        if issubclass(hint, _FixedInt):
            return hint(value).to_bytes_le()
        if hint is int:
            return _int_bytes(value, 64, False)
        if hint is float:
            return _DOUBLE.pack(value)
    return _encode_inferred(value)


def _decode(data, offset, hint):
    if hint is None or hint is Any:
        raise TypeError("a target type is required to deserialize")
    inner = _optional_inner(hint)
    if inner is not _NOT_OPTIONAL:
        tag, offset = _take(data, offset, 1)
        if tag == b"\x00":
            return None, offset
        if tag == b"\x01":
            return _decode(data, offset, inner)
        raise ValueError(f"invalid option tag {tag[0]}")
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin is list:
        if not args:
            raise TypeError("list element type is required")
        count, offset = _read_length(data, offset)
        items = []
        for _ in range(count):
            item, offset = _decode(data, offset, args[0])
            items.append(item)
        return items, offset
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            raise TypeError("tuples of unknown length cannot be deserialized")
        items = []
        for arg in args:
            item, offset = _decode(data, offset, arg)
            items.append(item)
        return tuple(items), offset
    if origin is dict:
        if not args:
            raise TypeError("map key and value types are required")
        count, offset = _read_length(data, offset)
        mapping = {}
        for _ in range(count):
            key, offset = _decode(data, offset, args[0])
            mapping[key], offset = _decode(data, offset, args[1])
        return mapping, offset
    if isinstance(hint, type):
        decoder = getattr(hint, "bincode_decode", None)
        if callable(decoder):
            return decoder(data, offset)
        if issubclass(hint, bool):
            chunk, offset = _take(data, offset, 1)
            if chunk[0] > 1:
                raise ValueError(f"invalid boolean byte {chunk[0]}")
            return chunk[0] == 1, offset
        if issubclass(hint, enum.Enum):
            chunk, offset = _take(data, offset, 4)
            index = int.from_bytes(chunk, "little")
            members = list(hint)
            if index >= len(members):
                raise ValueError(f"invalid variant index {index} for {hint.__name__}")
            return members[index], offset
        if issubclass(hint, _FixedInt):
            chunk, offset = _take(data, offset, hint.bits // 8)
            return hint(int.from_bytes(chunk, "little", signed=hint.signed)), offset
        if hint is int:
            chunk, offset = _take(data, offset, 8)
            return int.from_bytes(chunk, "little"), offset
        if hint is float:
            chunk, offset = _take(data, offset, 8)
            return _DOUBLE.unpack(chunk)[0], offset
        if hint is str:
            count, offset = _read_length(data, offset)
            chunk, offset = _take(data, offset, count)
            return chunk.decode("utf-8"), offset
        if issubclass(hint, (bytes, bytearray)):
            count, offset = _read_length(data, offset)
            chunk, offset = _take(data, offset, count)
            return hint(chunk), offset
        if dataclasses.is_dataclass(hint):
            init_values = {}
            other_values = {}
            for name, field_hint, in_init in _dataclass_fields(hint):
                value, offset = _decode(data, offset, field_hint)
                (init_values if in_init else other_values)[name] = value
            instance = hint(**init_values)
            for name, value in other_values.items():
                object.__setattr__(instance, name, value)
            return instance, offset
    raise TypeError(f"cannot deserialize into {hint!r}")


def serialize(value):
    """Encode ``value`` into bytes."""
    return _encode(value)


def deserialize(data, type_):
    """Decode a value of ``type_`` from the start of ``data``; trailing bytes are ignored."""
    value, _ = _decode(bytes(data), 0, type_)
    return value


def serialized_size(value):
    """The number of bytes ``serialize(value)`` produces."""
    return len(serialize(value))