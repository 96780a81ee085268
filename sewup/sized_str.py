"""Strings stored in a fixed number of 32-byte units."""

import struct

from .errors import SizeExcessError
from .raw import Raw

__all__ = ["SizedString"]

_SIZE = 32
_LENGTH = struct.Struct("<Q")


def _read_length(data, offset):
    end = offset + _LENGTH.size
    if end > len(data):
        raise ValueError("unexpected end of input")
    (value,) = _LENGTH.unpack(data[offset:end])
    return value, end


class SizedString:
    """A string with a byte capacity fixed in advance."""

    __slots__ = ("capacity", "_len", "_inner")

    def __init__(self, capacity):
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._len = 0
        self._inner = []

    def from_bytes(self, data):
        """Store ``data``, which must fit in the capacity; returns ``self``."""
        payload = bytes(data)
        if len(payload) > self.capacity:
            raise SizeExcessError(self.capacity)
        self._len = len(payload)
        self._inner = [
            Raw(payload[start:start + _SIZE]) for start in range(0, len(payload), _SIZE)
        ]
        padding = self.capacity // _SIZE - self._len // _SIZE
        self._inner.extend(Raw() for _ in range(padding))
        return self

    def from_str(self, s):
        """Store the UTF-8 bytes of ``s``; returns ``self``."""
        return self.from_bytes(s.encode("utf-8"))

    def to_utf8_string(self):
        """The stored bytes decoded as UTF-8."""
        buffer = b"".join(raw.to_bytes32() for raw in self._inner)
        return buffer[: self._len].decode("utf-8")

    def to_raws(self):
        """A copy of the units holding the string."""
        return [Raw(raw) for raw in self._inner]

    @property
    def is_empty(self):
        return self._len == 0

    def bincode_encode(self):
        return (
            _LENGTH.pack(self.capacity)
            + _LENGTH.pack(self._len)
            + _LENGTH.pack(len(self._inner))
            + b"".join(raw.bincode_encode() for raw in self._inner)
        )

    @classmethod
    def bincode_decode(cls, data, offset):
        capacity, offset = _read_length(data, offset)
        length, offset = _read_length(data, offset)
        count, offset = _read_length(data, offset)
        inner = []
        for _ in range(count):
            raw, offset = Raw.bincode_decode(data, offset)
            inner.append(raw)
        instance = cls(capacity)
        instance._len = length
        instance._inner = inner
        return instance, offset

    def __len__(self):
        return self._len

    def __eq__(self, other):
        if not isinstance(other, SizedString):
            return NotImplemented
        return (self.capacity, self._len, self._inner) == (
            other.capacity,
            other._len,
            other._inner,
        )

    __hash__ = None

    def __repr__(self):
        return f"SizedString(capacity={self.capacity}, len={self._len})"