# sewup

Storage helpers for eWasm contracts. Contract data can be kept as
key/value buckets or as relational tables, both laid out in 32-byte
storage slots. Storage is an ordinary mapping from 32-byte keys to
32-byte values, such as a `dict`.

## Install

```
pip install sewup
```

To run the test suite:

```
pip install "sewup[test]"
pytest
```

## Basic types

- `sewup.raw.Raw` is one 32-byte storage unit. Input shorter than 32
  bytes is padded with zeros on the right. You can also build a `Raw`
  from an integer with `Raw.from_uint` / `Raw.from_int`, read it back
  with `to_uint` / `to_int`, or build it from a 20-byte address with
  `Raw.from_raw_address`.
- `sewup.row.Row` is a list of `Raw` units for data longer than one slot.
  It offers `Row.from_bytes`, `to_bytes`, `to_utf8_string`, `first_raw`
  and `wipe_header`.
- `sewup.sized_str.SizedString` is a string with a fixed byte capacity.
  `from_str` / `from_bytes` raise `SizeExcessError` when the data does
  not fit.
- `sewup.address.Address` is a 20-byte address. `Address.from_str`
  accepts hex with or without `0x`.

`sewup.codec` holds the binary encoding the storage uses:
`serialize`, `deserialize(data, type_)` and `serialized_size`. Integers
are little-endian and fixed-width. Use `U8`, `U16`, `U32`, `U64`, `I8`,
`I16`, `I32` and `I64` to choose a width; a plain `int` is 64 bits.
Dataclasses, lists, tuples, dicts, optionals and enums are supported.

## Key/value store

```python
from sewup.codec import U64
from sewup.kv.store import Store

storage = {}
store = Store(storage)
bucket = store.bucket("default", U64, U64)
bucket.set(1, 1)
bucket.set(2, 2)
assert bucket.get(1) == 1
assert bucket.next_key(1) == (2, 2)
store.save(bucket)
store.commit()

reloaded = Store.load(storage)
assert reloaded.buckets() == ["default"]
```

Opening a bucket takes it out of the store. Opening it a second time
before `save` raises `BucketAlreadyOpen`, and `commit` raises
`BucketNotSync` while any opened bucket has not been saved.

A `Bucket` supports `contains`, `get`, `set`, `remove`, iteration,
`iter_range`, `prev_key`, `next_key`, `pop`, `pop_front` and `pop_back`.
`Store.vec(name, value_type)` returns a `SewUpVec`, a bucket indexed by
position. It has list-like methods: `push`, `pop`, `append`, `resize`,
`resize_with`, `truncate`, `swap`, `reverse`, `sort`, `dedup`,
`rotate_left`, `rotate_right`, `starts_with`, `ends_with` and `to_list`.

## Relational storage

Records are dataclasses that subclass `sewup.rdb.record.Record`. Every
field needs a default, and every record of a table must encode to the
same number of slots.

```python
from dataclasses import dataclass

from sewup.rdb.db import Db
from sewup.rdb.record import Record


@dataclass
class Person(Record):
    trusted: bool = False


storage = {}
db = Db(storage)
db.create_table(Person)
db.commit()

table = db.table(Person)
record_id = table.add_record(Person(trusted=True))
table.commit()

loaded = Db.load(storage).table(Person)
assert loaded.get_record(record_id) == Person(trusted=True)
```

`Table` also offers `all_records`, `filter_records(predicate)` and
`update_record(record_id, instance)`. Pass `None` as the instance to
delete a record. Record ids start at 1. An id of 0 raises
`RecordIdIncorrect`, and reading a deleted record raises `RecordDeleted`.

## Runtimes

`sewup.runtimes.traits` defines `RT`, the abstract interface a virtual
machine implements (`execute`, `deploy`, `get_storage`). It also defines
`VMMessageBuilder`, `VMMessage` and `VMResult`, and `VmError` with its
`VmErrorKind`. `sewup.runtimes.handler.ContractHandler` builds messages
and passes them to an `RT`. Its call data is either a `0x` hex literal
or the path of a contract file.

## Token storage

`sewup.token_helpers.TokenStorage` keeps token balances, allowances,
approvals and token owners in a storage mapping. Each entry sits under a
SHA3-256 key built by the `calculate_*_hash` functions.

## What this package does not do

- It has no virtual machine. `RT` is only an interface, and running a
  contract needs an implementation of it.
- The token contract entry points (transfers, minting, event logs) are
  not included. Only the storage layout helpers are.
- `Store.load` and `Db.load` read only the current storage. Passing a
  block height raises `ValueError`.
- There is no command-line tool.