"""Contract call data and pre-serialized return values."""

import struct
from dataclasses import dataclass

from .codec import serialize
from .errors import ContractSizeError

__all__ = ["Contract", "EwasmAny", "FunctionSignature"]

FunctionSignature = bytes

_LENGTH = struct.Struct("<Q")


@dataclass
class Contract:
    """The call data of a contract invocation and its function selector."""

    data_size: int
    input_data: bytes
    fn_sig: FunctionSignature

    @classmethod
    def from_calldata(cls, input_data):
        """Build a contract from call data; it must hold at least a 4-byte selector."""
        data = bytes(input_data)
        if len(data) < 4:
            raise ContractSizeError(len(data))
        return cls(len(data), data, data[:4])

    def function_selector(self):
        """The 4-byte function signature the call data starts with."""
        return self.fn_sig

    @classmethod
    def mock(cls):
        """A contract with five zero bytes of call data."""
        return cls(5, bytes(5), bytes(4))


@dataclass
class EwasmAny:
    """Any serializable value, encoded once and carried as bytes."""

    bin: bytes

    @classmethod
    def from_value(cls, instance):
        """Encode ``instance`` and keep its bytes."""
        return cls(serialize(instance))

    @classmethod
    def bincode_decode(cls, data, offset):
        end = offset + _LENGTH.size
        if end > len(data):
            raise ValueError("unexpected end of input")
        (length,) = _LENGTH.unpack(data[offset:end])
        if end + length > len(data):
            raise ValueError("unexpected end of input")
        return cls(bytes(data[end:end + length])), end + length