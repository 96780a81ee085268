"""Tables: fixed-size records of one type kept in consecutive storage slots."""

from ..errors import RecordDeleted, RecordIdIncorrect, TableIsEmpty
from ..utils import storage_index_to_addr
from .db import Db
from .record import HEADER_SIZE

__all__ = ["Table"]

_SLOT = 32


class Table:
    """The records of one table, held in memory until committed."""

    def __init__(self, record_type, info, data=None, storage=None):
        self.record_type = record_type
        self.info = info
        self.data = [] if data is None else list(data)
        self.storage = {} if storage is None else storage

    def _row(self, record_id):
        if record_id == 0:
            raise RecordIdIncorrect()
        if not self.data:
            raise TableIsEmpty()
        if not 0 < record_id <= len(self.data):
            raise IndexError(f"record {record_id} out of range for {len(self.data)} records")
        return self.data[record_id - 1]

    def add_record(self, instance):
        """Append a record; returns its id, counted from 1."""
        self.data.append(instance.to_row(self.info.record_raw_size))
        return len(self.data)

    def get_record(self, record_id):
        """The record with ``record_id``; raises if it was deleted."""
        record = self.record_type.from_row(self._row(record_id))
        if record is None:
            raise RecordDeleted()
        return record

    def all_records(self):
        """Every record that was not deleted, in id order."""
        records = (self.record_type.from_row(row) for row in self.data)
        return [record for record in records if record is not None]

    def filter_records(self, predicate):
        """(id, record) pairs of the live records for which ``predicate`` holds."""
        output = []
        for record_id, row in enumerate(self.data, start=1):
            record = self.record_type.from_row(row)
            if record is not None and predicate(record):
                output.append((record_id, record))
        return output

    def update_record(self, record_id, instance):
        """Replace the record with ``record_id``, or delete it when ``instance`` is None."""
        self._row(record_id)
        if instance is None:
            self.data[record_id - 1].wipe_header(HEADER_SIZE)
        else:
            self.data[record_id - 1] = instance.to_row(self.info.record_raw_size)

    def commit(self):
        """Write the records to storage and update the table infos.

        Returns the number of slots written.
        """
        raws = [raw for row in self.data for raw in row.raws]
        db = Db.load(self.storage)
        slots = db.alloc_table_storage(self.info.sig, len(raws))
        addr = bytes(_SLOT)
        for raw, storage_idx in zip(raws, slots):
            addr = storage_index_to_addr(storage_idx, addr)
            self.storage[addr] = raw.to_bytes32()
        db.commit()
        info = db.table_info(self.record_type)
        if info is not None:
            self.info = info
        return len(raws)

    def __len__(self):
        return len(self.data)

    def __repr__(self):
        return f"Table({self.record_type.__name__}, records={len(self.data)})"