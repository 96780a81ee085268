"""The 32-byte storage unit of a contract."""

from functools import total_ordering

__all__ = ["Raw"]

_SIZE = 32


def _byte_width(width):
    if width % 8 or not 8 <= width <= _SIZE * 8:
        raise ValueError(f"unsupported integer width {width}")
    return width // 8


@total_ordering
class Raw:
    """Thirty-two bytes of storage; shorter input is padded with zeros on the right."""

    __slots__ = ("_bytes",)

    def __init__(self, data=b""):
        if isinstance(data, Raw):
            payload = data.to_bytes32()
        elif isinstance(data, str):
            payload = data.encode("utf-8")
        elif isinstance(data, int):
            raise TypeError("use Raw.from_uint or Raw.from_int for integers")
        else:
            payload = bytes(data)
        if len(payload) > _SIZE:
            raise ValueError("input slice is bigger than a Raw")
        self._bytes = bytearray(payload.ljust(_SIZE, b"\x00"))

    @classmethod
    def from_raw_address(cls, addr):
        """Build a Raw from a 20-byte address, right aligned."""
        address = bytes(addr)
        if len(address) != 20:
            raise ValueError("an address has 20 bytes")
        return cls(bytes(12) + address)

    @classmethod
    def from_uint(cls, num, width=64):
        """Store an unsigned integer big-endian in the last bytes."""
        _byte_width(width)
        if not 0 <= num < 1 << width:
            raise OverflowError(f"{num} does not fit in {width} unsigned bits")
        return cls(int(num).to_bytes(_SIZE, "big"))

    def to_uint(self, width=64):
        """Read an unsigned integer of ``width`` bits from the last bytes."""
        size = _byte_width(width)
        return int.from_bytes(self._bytes[_SIZE - size:], "big")

    @classmethod
    def from_int(cls, num, width=64):
        """Store a signed integer in two's complement of ``width`` bits."""
        _byte_width(width)
        half = 1 << (width - 1)
        if not -half <= num < half:
            raise OverflowError(f"{num} does not fit in {width} signed bits")
        return cls.from_uint(num & ((1 << width) - 1), width)

    def to_int(self, width=64):
        """Read a signed integer of ``width`` bits from the last bytes."""
        value = self.to_uint(width)
        if value >= 1 << (width - 1):
            value -= 1 << width
        return value

    def as_str(self):
        """All 32 bytes decoded as UTF-8."""
        return bytes(self._bytes).decode("utf-8")

    def to_bytes32(self):
        return bytes(self._bytes)

    def to_bytes20(self):
        return bytes(self._bytes[12:])

    def wipe_header(self, header_size):
        """Zero the first ``header_size`` bytes."""
        if not 0 <= header_size <= _SIZE:
            raise ValueError("header size must be between 0 and 32")
        self._bytes[:header_size] = bytes(header_size)

    def bincode_encode(self):
        return bytes(self._bytes)

    @classmethod
    def bincode_decode(cls, data, offset):
        chunk = data[offset:offset + _SIZE]
        if len(chunk) < _SIZE:
            raise ValueError("unexpected end of input")
        return cls(chunk), offset + _SIZE

    def __bytes__(self):
        return bytes(self._bytes)

    def __eq__(self, other):
        if isinstance(other, Raw):
            return self._bytes == other._bytes
        if isinstance(other, (bytes, bytearray, memoryview, list, tuple)):
            try:
                return bytes(self._bytes) == bytes(other)
            except (TypeError, ValueError):
                return False
        return NotImplemented

    def __lt__(self, other):
        if not isinstance(other, Raw):
            return NotImplemented
        return self._bytes < other._bytes

    def __hash__(self):
        return hash(bytes(self._bytes))

    def __repr__(self):
        return f"Raw({bytes(self._bytes)!r})"