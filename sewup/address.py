"""Twenty-byte account addresses."""

import string
from dataclasses import dataclass

__all__ = ["Address"]

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Address:
    """A 20-byte address; stored on chain right aligned in 32 bytes."""

    inner: bytes = bytes(20)

    def __post_init__(self):
        inner = bytes(self.inner)
        if len(inner) != 20:
            raise ValueError("hex str can not convert to [u8; 20]")
        object.__setattr__(self, "inner", inner)

    @classmethod
    def from_str(cls, s):
        """Parse a hex address, with or without a leading ``0x``."""
        hex_s = s[2:] if s.startswith("0x") else s
        if not set(hex_s) <= _HEX_DIGITS:
            raise ValueError(f"invalid hex string {s!r}")
        return cls(bytes.fromhex(hex_s))

    def to_bytes32(self):
        """The address padded with twelve leading zero bytes."""
        return bytes(12) + self.inner

    @classmethod
    def from_bytes32(cls, data):
        """Take the address from the last 20 of 32 bytes."""
        payload = bytes(data)
        if len(payload) != 32:
            raise ValueError("expected 32 bytes")
        return cls(payload[12:])

    def bincode_encode(self):
        return self.to_bytes32()

    @classmethod
    def bincode_decode(cls, data, offset):
        chunk = data[offset:offset + 32]
        if len(chunk) < 32:
            raise ValueError("unexpected end of input")
        return cls.from_bytes32(chunk), offset + 32

    def __str__(self):
        return "0x" + self.inner.hex()