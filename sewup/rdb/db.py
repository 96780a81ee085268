"""A relational database kept in the 32-byte storage slots of one account.

Slot zero holds the database header:

| byte 0         | byte 1  | bytes 2-3         | ... | bytes 28-31                |
|----------------|---------|-------------------|-----|----------------------------|
| sewup features | version | rdb features (LE) | -   | number of tables (BE)      |

The table infos follow, two 16-byte infos per slot, and after them the
records of every table, each table in its own range of slots.
"""

import enum
import struct
from dataclasses import dataclass

from Crypto.Hash import keccak

from ..errors import TableNotExist
from ..codec import serialized_size
from ..row import Row
from ..utils import storage_index_to_addr
from .record import HEADER_SIZE

__all__ = [
    "CONFIG_ADDR",
    "RDB_FEATURE",
    "VERSION",
    "Feature",
    "TableInfo",
    "Db",
    "get_table_signature",
]

RDB_FEATURE = 1
VERSION = 0
CONFIG_ADDR = bytes(32)

_SLOT = 32
_INFO = struct.Struct("<4sIII")


class Feature(enum.IntEnum):
    """Feature flags recorded in the database header."""

    DEFAULT = 1


def get_table_signature(table_name):
    """The first four bytes of the Keccak-256 digest of the table name."""
    digest = keccak.new(digest_bits=256, data=table_name.encode("utf-8")).digest()
    return digest[:4]


def _type_name(record_type):
    return f"{record_type.__module__}.{record_type.__qualname__}"


@dataclass
class TableInfo:
    """Where a table lives in storage and how many slots one record takes."""

    sig: bytes = bytes(4)
    start: int = 0
    end: int = 0
    record_raw_size: int = 0

    @property
    def range(self):
        """The storage slots of the table."""
        return range(self.start, self.end)

    def bincode_encode(self):
        return _INFO.pack(bytes(self.sig), self.start, self.end, self.record_raw_size)

    @classmethod
    def bincode_decode(cls, data, offset):
        end = offset + _INFO.size
        if end > len(data):
            raise ValueError("unexpected end of input")
        sig, start, stop, size = _INFO.unpack(data[offset:end])
        return cls(sig, start, stop, size), end


class Db:
    """The tables of one account."""

    def __init__(self, storage=None):
        self.storage = {} if storage is None else storage
        self.version = VERSION
        self._features = int(Feature.DEFAULT)
        self.tables = []

    def features(self):
        """The features enabled in this database."""
        return [feature for feature in Feature if self._features & feature]

    def create_table(self, record_type):
        """Register a table for records of ``record_type``."""
        size = serialized_size(record_type())
        record_raw_size = 0 if size == 0 else (size + HEADER_SIZE) // _SLOT + 1
        start = self.tables[-1].end if self.tables else 2
        self.tables.append(
            TableInfo(
                sig=get_table_signature(_type_name(record_type)),
                start=start,
                end=start,
                record_raw_size=record_raw_size,
            )
        )

    def table(self, record_type):
        """The table of ``record_type`` with its records loaded from storage."""
        info = self.table_info(record_type)
        if info is None:
            raise TableNotExist(_type_name(record_type))
        from .table import Table

        data = []
        buffer = []
        addr = bytes(_SLOT)
        for storage_idx in info.range:
            addr = storage_index_to_addr(storage_idx, addr)
            buffer.append(bytes(self.storage.get(addr, bytes(_SLOT))))
            if info.record_raw_size and len(buffer) % info.record_raw_size == 0:
                data.append(Row(buffer))
                buffer = []
        return Table(record_type, info, data, self.storage)

    def drop_table(self, record_type):
        """Forget the table of ``record_type``."""
        sig = get_table_signature(_type_name(record_type))
        self.tables = [info for info in self.tables if info.sig != sig]

    def table_length(self):
        """The number of tables."""
        return len(self.tables)

    def table_info(self, record_type):
        """A copy of the info of the table of ``record_type``, or ``None``."""
        sig = get_table_signature(_type_name(record_type))
        for info in self.tables:
            if info.sig == sig:
                return TableInfo(info.sig, info.start, info.end, info.record_raw_size)
        return None

    @classmethod
    def load(cls, storage, block_height=None):
        """Read the database header and table infos kept in ``storage``."""
        if block_height is not None:
            raise ValueError("loading a database from a past block is not supported")
        db = cls(storage)
        config = bytes(storage.get(CONFIG_ADDR, bytes(_SLOT)))
        if config[0] != RDB_FEATURE:
            raise ValueError("Sewup feature not correct")
        if config[1] != VERSION:
            raise ValueError(f"storage version {config[1]} is not supported")
        db._features = int.from_bytes(config[2:4], "little")
        remaining = int.from_bytes(config[28:32], "big")

        addr = bytes(_SLOT)
        storage_index = 0
        while remaining > 0:
            storage_index += 1
            addr = storage_index_to_addr(storage_index, addr)
            buffer = bytes(storage.get(addr, bytes(_SLOT)))
            info, _ = TableInfo.bincode_decode(buffer, 0)
            db.tables.append(info)
            if remaining > 1:
                info, _ = TableInfo.bincode_decode(buffer, 16)
                db.tables.append(info)
            remaining -= 2
        return db

    def commit(self):
        """Write the header and the table infos, but not the records."""
        header = bytearray(_SLOT)
        header[0] = RDB_FEATURE
        header[1] = VERSION
        header[2:4] = self._features.to_bytes(2, "little")
        header[28:32] = len(self.tables).to_bytes(4, "big")
        self.storage[CONFIG_ADDR] = bytes(header)

        addr = bytes(_SLOT)
        for index, start in enumerate(range(0, len(self.tables), 2), start=1):
            addr = storage_index_to_addr(index, addr)
            pair = self.tables[start:start + 2]
            block = b"".join(info.bincode_encode() for info in pair)
            self.storage[addr] = block.ljust(_SLOT, b"\x00")

    def alloc_table_storage(self, sig, raw_length):
        """Give the table ``sig`` ``raw_length`` slots, moving the tables after it.

        Returns the new range of slots of the table.
        """
        sig = bytes(sig)
        info_slots = -(-len(self.tables) // 2)
        previous_end = info_slots + 1
        moves = []
        output = None
        for info in self.tables:
            new_range = None
            if info.sig == sig:
                new_range = (previous_end, previous_end + raw_length)
                output = range(*new_range)
            elif info.start != previous_end:
                new_range = (previous_end, previous_end + info.end - info.start)
            if new_range is not None:
                moves.append(((info.start, info.end), new_range))
                info.start, info.end = new_range
            previous_end = info.end

        self._migrate(moves)

        if output is None:
            raise TableNotExist(f"Table [sig: {list(sig)}]")
        return output

    def _migrate(self, moves):
        """Copy the slots of moved tables, last table first, highest slot first."""
        addr = bytes(_SLOT)
        for (old_start, old_end), (new_start, new_end) in reversed(moves):
            count = min(old_end - old_start, new_end - new_start)
            for i in range(1, count + 1):
                addr = storage_index_to_addr(old_end - i, addr)
                buffer = bytes(self.storage.get(addr, bytes(_SLOT)))
                addr = storage_index_to_addr(new_end - i, addr)
                self.storage[addr] = buffer