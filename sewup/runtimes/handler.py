"""Running contracts on a runtime, from hex call data or a contract file."""

import string
from pathlib import Path

from ..errors import CalldataAbsent, CalldataMalformat
from ..raw import Raw
from .traits import VMMessageBuilder

__all__ = ["ContractHandler"]

_HEX_DIGITS = frozenset(string.hexdigits)


class ContractHandler:
    """Holds a contract's call data and the runtime that executes it."""

    def __init__(self, call_data=None, rt=None):
        self.call_data = call_data
        self.rt = rt

    def _runtime(self):
        if self.rt is None:
            raise RuntimeError("rt should be init when parsing the connection string")
        return self.rt

    def run_fn(self, call_data, input_data=None, gas=0):
        """Run ``call_data`` directly as a function, as for a constructor."""
        rt = self._runtime()
        code = self.get_call_data(call_data)
        msg = VMMessageBuilder(
            sender=Raw(),
            input_data=bytes(input_data or b""),
            gas=gas,
            code=code,
        ).build()
        return rt.execute(msg)

    def execute(self, addr, fun_sig, input_data=None, gas=0):
        """Call the function ``fun_sig`` of the contract as the caller ``addr``.

        The call data held by the handler is used up by the call.
        """
        rt = self._runtime()
        if self.call_data is None:
            raise CalldataAbsent()
        call_data, self.call_data = self.call_data, None
        code = self.get_call_data(call_data)

        selector = bytes(fun_sig)
        if len(selector) != 4:
            raise ValueError("a function signature has 4 bytes")
        payload = selector + bytes(input_data or b"")

        if addr is None:
            sender = Raw()
        else:
            hex_str = addr[2:] if addr.startswith("0x") else addr
            try:
                caller = bytes.fromhex(hex_str)
            except ValueError:
                raise ValueError("contract caller's address should be hex format") from None
            if len(caller) != 20:
                raise ValueError("contract caller's address should be bytes20")
            sender = Raw.from_raw_address(caller)

        msg = VMMessageBuilder(
            sender=sender,
            input_data=payload,
            gas=gas,
            code=code,
        ).build()
        return rt.execute(msg)

    @staticmethod
    def get_call_data(call_data_info):
        """The contract binary from a ``0x`` hex literal or from a file path."""
        if call_data_info.startswith("0x"):
            if len(call_data_info) % 2 != 0:
                raise CalldataMalformat()
            digits = call_data_info[2:]
            if not set(digits) <= _HEX_DIGITS:
                raise CalldataMalformat()
            return bytes.fromhex(digits)
        return Path(call_data_info).read_bytes()

    def __repr__(self):
        return f"ContractHandler(call_data={self.call_data!r}, rt={self.rt is not None})"