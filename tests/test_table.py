from dataclasses import dataclass

import pytest

from sewup.codec import U32
from sewup.errors import (
    RecordDeleted,
    RecordIdIncorrect,
    RecordNotSized,
    TableIsEmpty,
)
from sewup.rdb.db import Db
from sewup.rdb.record import Record


@dataclass
class Person(Record):
    trusted: bool = False
    age: U32 = U32(0)


@dataclass
class Note(Record):
    text: str = ""


def _fresh_table(storage=None):
    storage = {} if storage is None else storage
    db = Db(storage)
    db.create_table(Person)
    db.commit()
    return db.table(Person), storage


def test_add_and_get_record():
    table, _ = _fresh_table()
    assert table.add_record(Person(True, U32(18))) == 1
    assert table.add_record(Person(False, U32(30))) == 2
    assert table.get_record(1) == Person(True, 18)
    assert table.get_record(2) == Person(False, 30)


def test_record_id_zero_is_rejected():
    table, _ = _fresh_table()
    table.add_record(Person(True, U32(1)))
    with pytest.raises(RecordIdIncorrect):
        table.get_record(0)
    with pytest.raises(RecordIdIncorrect):
        table.update_record(0, None)


def test_empty_table():
    table, _ = _fresh_table()
    with pytest.raises(TableIsEmpty):
        table.get_record(1)
    with pytest.raises(TableIsEmpty):
        table.update_record(1, Person())


def test_delete_and_update():
    table, _ = _fresh_table()
    table.add_record(Person(True, U32(1)))
    table.add_record(Person(True, U32(2)))
    table.add_record(Person(False, U32(3)))
    table.update_record(2, None)
    with pytest.raises(RecordDeleted):
        table.get_record(2)
    table.update_record(3, Person(True, U32(4)))
    assert table.get_record(3) == Person(True, 4)
    assert table.all_records() == [Person(True, 1), Person(True, 4)]


def test_filter_records_keeps_ids():
    table, _ = _fresh_table()
    table.add_record(Person(True, U32(1)))
    table.add_record(Person(False, U32(2)))
    table.add_record(Person(True, U32(3)))
    table.update_record(3, None)
    assert table.filter_records(lambda p: p.trusted) == [(1, Person(True, 1))]
    assert [rid for rid, _ in table.filter_records(lambda p: True)] == [1, 2]


def test_record_not_sized():
    storage = {}
    db = Db(storage)
    db.create_table(Note)
    db.commit()
    table = db.table(Note)
    with pytest.raises(RecordNotSized):
        table.add_record(Note("x" * 100))


def test_commit_round_trip():
    table, storage = _fresh_table()
    table.add_record(Person(True, U32(18)))
    table.add_record(Person(False, U32(40)))
    written = table.commit()
    assert written == len(table.data) * table.info.record_raw_size
    loaded = Db.load(storage).table(Person)
    assert loaded.all_records() == [Person(True, 18), Person(False, 40)]
    assert loaded.get_record(2) == Person(False, 40)


def test_commit_without_database_header_fails():
    storage = {}
    db = Db(storage)
    db.create_table(Person)
    table = db.table(Person)
    table.add_record(Person(True, U32(1)))
    with pytest.raises(ValueError):
        table.commit()