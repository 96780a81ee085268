"""Records: the rows of a table.

A record is stored as a header byte followed by its binary encoding,
padded to whole 32-byte units. A zero header marks a deleted record.
"""

from ..codec import deserialize, serialize
from ..errors import RecordNotSized
from ..row import Row

__all__ = ["HEADER_SIZE", "Record"]

HEADER_SIZE = 1


class Record:
    """Base class for dataclasses stored as table records."""

    @classmethod
    def from_row(cls, row):
        """The record held by ``row``, or ``None`` if it was deleted."""
        buffer = row.to_bytes()
        if not buffer:
            raise ValueError("cannot read a record from an empty row")
        if buffer[0] == 0:
            return None
        return deserialize(buffer[HEADER_SIZE:], cls)

    def to_row(self, row_length):
        """Encode the record; it must fill exactly ``row_length`` units."""
        payload = serialize(self)
        header = (len(payload) + 1) & 31
        row = Row.from_bytes(bytes([header]) + payload)
        if len(row) != row_length:
            raise RecordNotSized()
        return row