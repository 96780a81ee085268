import pytest

from sewup.errors import CalldataAbsent, CalldataMalformat
from sewup.runtimes.handler import ContractHandler
from sewup.runtimes.traits import RT, VMResult


class RecordingRuntime(RT):
    def __init__(self):
        self.messages = []

    def execute(self, msg):
        self.messages.append(msg)
        return VMResult(gas_left=msg.gas, output_data=b"done")

    def deploy(self, msg):
        self.execute(msg)

    def get_storage(self, account):
        return None


def test_get_call_data_hex():
    assert ContractHandler.get_call_data("0x0102ff") == b"\x01\x02\xff"
    assert ContractHandler.get_call_data("0x") == b""


def test_get_call_data_malformed():
    with pytest.raises(CalldataMalformat):
        ContractHandler.get_call_data("0x012")
    with pytest.raises(CalldataMalformat):
        ContractHandler.get_call_data("0xzz")


def test_get_call_data_from_file(tmp_path):
    path = tmp_path / "contract.wasm"
    path.write_bytes(b"\x00asm")
    assert ContractHandler.get_call_data(str(path)) == b"\x00asm"


def test_execute_builds_message():
    rt = RecordingRuntime()
    handler = ContractHandler(call_data="0xaabb", rt=rt)
    caller = "0x" + "11" * 20
    result = handler.execute(caller, b"\x01\x02\x03\x04", b"\x09", 100)
    assert result.output_data == b"done"
    assert result.gas_left == 100
    msg = rt.messages[0]
    assert msg.input_data == b"\x01\x02\x03\x04\x09"
    assert msg.code == b"\xaa\xbb"
    assert msg.sender.to_bytes20() == b"\x11" * 20


def test_execute_consumes_call_data():
    rt = RecordingRuntime()
    handler = ContractHandler(call_data="0x00", rt=rt)
    handler.execute(None, bytes(4))
    assert handler.call_data is None
    with pytest.raises(CalldataAbsent):
        handler.execute(None, bytes(4))
    assert handler.rt is rt


def test_execute_default_sender():
    rt = RecordingRuntime()
    ContractHandler(call_data="0x00", rt=rt).execute(None, bytes(4))
    assert rt.messages[0].sender.to_bytes32() == bytes(32)


def test_execute_bad_address():
    handler = ContractHandler(call_data="0x00", rt=RecordingRuntime())
    with pytest.raises(ValueError):
        handler.execute("0x1234", bytes(4))


def test_without_runtime():
    with pytest.raises(RuntimeError):
        ContractHandler(call_data="0x00").execute(None, bytes(4))
    with pytest.raises(RuntimeError):
        ContractHandler().run_fn("0x00")


def test_run_fn():
    rt = RecordingRuntime()
    handler = ContractHandler(rt=rt)
    result = handler.run_fn("0xcafe", b"\x07", 5)
    assert result.output_data == b"done"
    msg = rt.messages[0]
    assert msg.code == b"\xca\xfe"
    assert msg.input_data == b"\x07"
    assert msg.gas == 5
    assert handler.rt is rt