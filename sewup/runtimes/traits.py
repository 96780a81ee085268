"""The interface a virtual machine offers to run contracts, and the messages it takes."""

import abc
import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Optional

from ..errors import SewupError
from ..raw import Raw

__all__ = [
    "VmErrorKind",
    "VmError",
    "CallKind",
    "Flags",
    "VMResult",
    "VMMessage",
    "VMMessageBuilder",
    "RT",
]


class VmErrorKind(enum.Enum):
    """The ways an execution can fail, with their messages."""

    ARGUMENT_OUT_OF_RANGE = "argument out of range"
    BAD_JUMP_DESTINATION = "bad jump destination"
    CALL_DEPTH_EXCEEDED = "call depth exceeded"
    CONTRACT_VALIDATION_FAILURE = "contract validation failure"
    CUSTOMIZED_ERROR = "customized error"
    FAILURE = "failure"
    INTERNAL_ERROR = "internal error"
    INVALID_INSTRUCTION = "invalid instruction"
    INVALID_MEMORY_ACCESS = "invalid memory access"
    OUT_OF_GAS = "out of gas"
    OUT_OF_MEMORY = "out of memory"
    PRECOMPILE_FAILURE = "precompile failure"
    REJECTED = "rejected"
    REVERT = "revert"
    STACK_OVERFLOW = "stack overflow"
    STACK_UNDERFLOW = "stack underflow"
    STATIC_MODE_VIOLATION = "static mode violation"
    UNDEFINED_INSTRUCTION = "undefined instruction"
    UNKNOWN_CALLER = "there shoulbe be a caller(sender) for the message"
    WASM_TRAP = "wasm trap"
    WASM_UNREACHABLE_INSTRUCTION = "wasm unreachable instruction"


class VmError(SewupError):
    """An execution failure; a customized error carries its own message."""

    def __init__(self, kind, detail=None):
        self.kind = kind
        self.detail = detail
        if kind is VmErrorKind.CUSTOMIZED_ERROR:
            message = f"`{detail}`"
        else:
            message = kind.value
        super().__init__(message)


class CallKind(enum.IntEnum):
    """The kind of a call message."""

    CALL = 0
    DELEGATECALL = 1
    CALLCODE = 2
    CREATE = 3
    CREATE2 = 4


class Flags(enum.IntEnum):
    """Message flags; a static message may not modify storage."""

    DEFAULT = 0
    STATIC = 1


def _zero():
    return Raw.from_uint(0, 32)


@dataclass
class VMResult:
    """What a successful execution returns."""

    gas_left: int = 0
    output_data: bytes = b""
    create_address: Optional[Raw] = None


@dataclass
class VMMessage:
    """A message ready to be executed."""

    kind: CallKind
    flags: Flags
    depth: int
    gas: int
    destination: Raw
    sender: Raw
    input_data: Optional[bytes]
    value: Raw
    code: Optional[bytes]
    create2_salt: None = None


@dataclass
class VMMessageBuilder:
    """Collects the parts of a message; ``build`` needs a sender."""

    kind: CallKind = CallKind.CALL
    flags: Flags = Flags.DEFAULT
    depth: int = 2**31 - 1
    gas: int = 0
    destination: Optional[Raw] = None
    sender: Optional[Raw] = None
    input_data: Optional[bytes] = None
    value: Raw = field(default_factory=_zero)
    code: Optional[bytes] = None
    create2_salt: None = None

    def read_only(self):
        """A builder whose message may not modify storage."""
        return dataclasses.replace(self, flags=Flags.STATIC)

    def with_destination(self, addr):
        return dataclasses.replace(self, destination=addr)

    def with_sender(self, addr):
        return dataclasses.replace(self, sender=addr)

    def build(self):
        """The message; the destination defaults to the zero unit."""
        if self.sender is None:
            raise VmError(VmErrorKind.UNKNOWN_CALLER)
        destination = self.destination if self.destination is not None else _zero()
        return VMMessage(
            kind=self.kind,
            flags=self.flags,
            depth=self.depth,
            gas=self.gas,
            destination=destination,
            sender=self.sender,
            input_data=self.input_data,
            value=self.value,
            code=self.code,
            create2_salt=self.create2_salt,
        )


class RT(abc.ABC):
    """A runtime able to execute contract messages."""

    @abc.abstractmethod
    def execute(self, msg):
        """Run ``msg`` and return a :class:`VMResult`; raise :class:`VmError` on failure."""

    @abc.abstractmethod
    def deploy(self, msg):
        """Deploy the contract carried by ``msg``."""

    @abc.abstractmethod
    def get_storage(self, account):
        """The storage map of a 20-byte account, or ``None``."""