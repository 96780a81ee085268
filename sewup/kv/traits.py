"""Encoding of bucket keys and values into rows, and the hash keys that index them.

Unsigned integers, strings, addresses and ``Raw`` units are stored directly.
Any other value is stored as a header byte followed by its binary encoding.
The header byte is the padding indicator ``(length + 1) & 31``.
"""

import hashlib
import typing

from ..address import Address
from ..codec import U8, U16, U32, U64, deserialize, serialize
from ..raw import Raw
from ..row import Row

__all__ = [
    "encode_key",
    "decode_key",
    "encode_value",
    "decode_value",
    "key_hash",
    "hash_key",
    "hash_key_sizes",
    "hash_key_matches",
]

_UNSIGNED = (U8, U16, U32, U64)
_HASH_SIZE = 24
_MISSING = object()


def _is_raw_sequence(value):
    return isinstance(value, (list, tuple)) and bool(value) and all(
        isinstance(item, Raw) for item in value
    )


def _raw_tuple_length(type_):
    """The number of units a ``tuple[Raw, ...]`` hint asks for; -1 for any, None if no such hint."""
    if typing.get_origin(type_) is not tuple:
        return None
    args = typing.get_args(type_)
    if len(args) == 2 and args[0] is Raw and args[1] is Ellipsis:
        return -1
    if args and all(arg is Raw for arg in args):
        return len(args)
    return None


def _encode_generic(value):
    payload = serialize(value)
    header = (len(payload) + 1) & 31
    return Row.from_bytes(bytes([header]) + payload)


def _decode_generic(row, type_):
    buffer = row.to_bytes()
    if not buffer:
        raise ValueError("cannot decode from an empty row")
    # The padding after the payload is ignored by the decoder.
    return deserialize(buffer[1:], type_)


def _encode_plain(value):
    if isinstance(value, Raw):
        return Row([value])
    if isinstance(value, Address):
        return Row([Raw(value.to_bytes32())])
    if isinstance(value, bool):
        return None
    if isinstance(value, _UNSIGNED):
        return Row([Raw.from_uint(int(value), type(value).bits)])
    if type(value) is int:
        return Row([Raw.from_uint(value, 64)])
    if isinstance(value, str):
        return Row.from_bytes(value)
    if _is_raw_sequence(value):
        return Row(value)
    return None


def _decode_plain(row, type_):
    if type_ is Raw:
        return row.first_raw()
    if type_ is Address:
        return Address.from_bytes32(row.first_raw().to_bytes32())
    if isinstance(type_, type) and type_ in _UNSIGNED:
        return type_(row.first_raw().to_uint(type_.bits))
    if type_ is int:
        return row.first_raw().to_uint(64)
    if type_ is str:
        return row.to_utf8_string()
    if type_ is Row:
        return Row(row.raws)
    count = _raw_tuple_length(type_)
    if count is not None:
        raws = row.raws
        if count == -1:
            return tuple(raws)
        if len(raws) < count:
            raise ValueError(f"row holds {len(raws)} units, {count} expected")
        return tuple(raws[:count])
    return _MISSING


def encode_key(key):
    """The row a bucket key is stored as."""
    if isinstance(key, Row):
        return _encode_generic(key)
    row = _encode_plain(key)
    return _encode_generic(key) if row is None else row


def decode_key(row, type_):
    """Read a key of ``type_`` back from its row."""
    value = _decode_plain(row, type_)
    return _decode_generic(row, type_) if value is _MISSING else value


def encode_value(value):
    """The row a bucket value is stored as."""
    if isinstance(value, Row):
        return Row(value.raws)
    row = _encode_plain(value)
    return _encode_generic(value) if row is None else row


def decode_value(row, type_):
    """Read a value of ``type_`` back from its row."""
    value = _decode_plain(row, type_)
    return _decode_generic(row, type_) if value is _MISSING else value


def key_hash(key):
    """The 24-byte BLAKE2s digest of the binary encoding of ``key``."""
    data = tuple(key) if _is_raw_sequence(key) else key
    return hashlib.blake2s(serialize(data), digest_size=_HASH_SIZE).digest()


def hash_key(key, key_len, value_len):
    """A unit holding the key hash and the sizes, in units, of the key and value rows."""
    return Raw(
        key_hash(key)
        + int(key_len).to_bytes(4, "big")
        + int(value_len).to_bytes(4, "big")
    )


def hash_key_sizes(raw):
    """The key and value sizes recorded in a hash key."""
    data = raw.to_bytes32()
    return int.from_bytes(data[24:28], "big"), int.from_bytes(data[28:32], "big")


def hash_key_matches(raw, hash_):
    """Whether a hash key was made from a key with digest ``hash_``."""
    return raw.to_bytes32()[:_HASH_SIZE] == bytes(hash_)