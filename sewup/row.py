"""A list of 32-byte storage units for data larger than one unit."""

import struct

from .raw import Raw

__all__ = ["Row"]

_SIZE = 32
_LENGTH = struct.Struct("<Q")


def _read_length(data, offset):
    end = offset + _LENGTH.size
    if end > len(data):
        raise ValueError("unexpected end of input")
    (value,) = _LENGTH.unpack(data[offset:end])
    return value, end


class Row:
    """An ordered list of :class:`Raw` units."""

    __slots__ = ("_raws",)
    __hash__ = None

    def __init__(self, raws=()):
        self._raws = [Raw(raw) for raw in raws]

    @classmethod
    def from_bytes(cls, data):
        """Split bytes (or a UTF-8 string) into 32-byte units, padding the last one."""
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return cls(payload[start:start + _SIZE] for start in range(0, len(payload), _SIZE))

    @property
    def raws(self):
        """A copy of the units of the row."""
        return [Raw(raw) for raw in self._raws]

    def to_bytes(self):
        """All units joined into one byte string."""
        return b"".join(raw.to_bytes32() for raw in self._raws)

    def to_utf8_string(self):
        """All units decoded as UTF-8, padding included."""
        return self.to_bytes().decode("utf-8")

    def first_raw(self):
        """The first unit of the row."""
        if not self._raws:
            raise ValueError("Row should be bigger than raw")
        return Raw(self._raws[0])

    def wipe_header(self, header_size):
        """Zero the first ``header_size`` bytes of the first unit."""
        if not 0 <= header_size <= _SIZE:
            raise ValueError("header size must be between 0 and 32")
        if not self._raws:
            raise IndexError("cannot wipe the header of an empty row")
        self._raws[0].wipe_header(header_size)

    def bincode_encode(self):
        # The units as a sequence, followed by an empty scratch buffer.
        return (
            _LENGTH.pack(len(self._raws))
            + b"".join(raw.bincode_encode() for raw in self._raws)
            + _LENGTH.pack(0)
        )

    @classmethod
    def bincode_decode(cls, data, offset):
        count, offset = _read_length(data, offset)
        raws = []
        for _ in range(count):
            raw, offset = Raw.bincode_decode(data, offset)
            raws.append(raw)
        buffer_length, offset = _read_length(data, offset)
        if offset + buffer_length > len(data):
            raise ValueError("unexpected end of input")
        return cls(raws), offset + buffer_length

    def __len__(self):
        return len(self._raws)

    def __iter__(self):
        return iter(self.raws)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Row(self._raws[index])
        return Raw(self._raws[index])

    def __eq__(self, other):
        if not isinstance(other, Row):
            return NotImplemented
        return self._raws == other._raws

    def __repr__(self):
        return f"Row({self._raws!r})"