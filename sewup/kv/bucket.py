"""Buckets: typed key/value collections kept in 32-byte storage units.

A bucket is stored as two lists of units. The first holds one hash key per
item: the 24-byte digest of the key followed by the sizes, in units, of the
key row and the value row. The second holds the key and value rows of every
item, one after another, in the same order as the hash keys.
"""

from itertools import groupby

from ..raw import Raw
from .traits import (
    decode_key,
    decode_value,
    encode_key,
    encode_value,
    hash_key,
    hash_key_matches,
    hash_key_sizes,
    key_hash,
)

__all__ = ["Bucket", "RawBucket", "SewUpVec"]

RawBucket = tuple[list[Raw], list[Raw]]


class Bucket:
    """A named collection of key/value items of fixed key and value types."""

    def __init__(self, name, key_type, value_type, raw_bucket=None):
        self.name = name
        self.key_type = key_type
        self.value_type = value_type
        hash_keys, data = raw_bucket if raw_bucket is not None else ([], [])
        self.raw_bucket = (list(hash_keys), list(data))

    @property
    def _hash_keys(self):
        return self.raw_bucket[0]

    @property
    def _data(self):
        return self.raw_bucket[1]

    def _layout(self):
        """Yield (position, offset, key size, value size, hash key) for every item."""
        offset = 0
        for position, hkey in enumerate(self._hash_keys):
            k_size, v_size = hash_key_sizes(hkey)
            yield position, offset, k_size, v_size, hkey
            offset += k_size + v_size

    def _read_key(self, offset, k_size):
        from ..row import Row

        return decode_key(Row(self._data[offset:offset + k_size]), self.key_type)

    def _read_value(self, offset, v_size):
        from ..row import Row

        return decode_value(Row(self._data[offset:offset + v_size]), self.value_type)

    def _find(self, digest):
        for position, offset, k_size, v_size, hkey in self._layout():
            if hash_key_matches(hkey, digest):
                return position, offset, k_size, v_size
        return None

    def _delete(self, position, offset, k_size, v_size):
        del self._data[offset:offset + k_size + v_size]
        del self._hash_keys[position]

    def contains(self, key):
        """Whether an item with ``key`` is in the bucket."""
        return self._find(key_hash(key)) is not None

    def get(self, key):
        """The value stored under ``key``, or ``None``."""
        found = self._find(key_hash(key))
        if found is None:
            return None
        _, offset, k_size, v_size = found
        return self._read_value(offset + k_size, v_size)

    def set(self, key, value):
        """Store ``value`` under ``key``; a replaced item moves to the end."""
        value_row = encode_value(value)
        key_row = encode_key(key)
        hkey = hash_key(key, len(key_row), len(value_row))
        found = self._find(key_hash(key))
        if found is not None:
            self._delete(*found)
        self._hash_keys.append(hkey)
        self._data.extend(key_row.raws)
        self._data.extend(value_row.raws)

    def remove(self, key):
        """Remove the item with ``key``, if there is one."""
        found = self._find(key_hash(key))
        if found is not None:
            self._delete(*found)

    def __iter__(self):
        """Yield (key, value) pairs in storage order."""
        for _, offset, k_size, v_size, _ in self._layout():
            yield self._read_key(offset, k_size), self._read_value(offset + k_size, v_size)

    def iter_range(self, start, end):
        """Yield the (key, value) pairs at positions ``start`` up to ``end``."""
        if not 0 <= start <= end <= len(self):
            raise IndexError(f"range {start}..{end} out of bounds for {len(self)} items")
        for position, offset, k_size, v_size, _ in self._layout():
            if position >= end:
                break
            if position >= start:
                yield (
                    self._read_key(offset, k_size),
                    self._read_value(offset + k_size, v_size),
                )

    def prev_key(self, needle):
        """The item stored just before the item with key ``needle``, or ``None``."""
        previous = None
        for _, offset, k_size, v_size, _ in self._layout():
            key = self._read_key(offset, k_size)
            if key == needle:
                if previous is None:
                    return None
                p_key, p_offset, p_k_size, p_v_size = previous
                return p_key, self._read_value(p_offset + p_k_size, p_v_size)
            previous = (key, offset, k_size, v_size)
        return None

    def next_key(self, needle):
        """The item stored just after the item with key ``needle``, or ``None``."""
        matched = False
        for _, offset, k_size, v_size, _ in self._layout():
            key = self._read_key(offset, k_size)
            if matched:
                return key, self._read_value(offset + k_size, v_size)
            if key == needle:
                matched = True
        return None

    def pop(self, key):
        """Remove the item with ``key`` and return its value, or ``None``."""
        for _, offset, k_size, v_size, _ in self._layout():
            stored_key = self._read_key(offset, k_size)
            if stored_key == key:
                value = self._read_value(offset + k_size, v_size)
                self.remove(stored_key)
                return value
        return None

    def pop_back(self):
        """Remove and return the last (key, value) pair, or ``None``."""
        last = None
        for pair in self:
            last = pair
        if last is not None:
            self.remove(last[0])
        return last

    def pop_front(self):
        """Remove and return the first (key, value) pair, or ``None``."""
        first = next(iter(self), None)
        if first is not None:
            self.remove(first[0])
        return first

    def __len__(self):
        return len(self._hash_keys)

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, items={len(self)})"


class SewUpVec(Bucket):
    """A growable array kept in a bucket keyed by index."""

    def __init__(self, name, value_type, raw_bucket=None):
        super().__init__(name, int, value_type, raw_bucket)

    def _from_list(self, values):
        self.clear()
        for index, value in enumerate(values):
            self.set(index, value)

    def to_list(self):
        """All values in storage order."""
        return [value for _, value in self]

    def append(self, other):
        """Add every value of ``other`` to the end."""
        for value in list(other):
            self.push(value)

    def push(self, value):
        self.set(len(self), value)

    def pop(self):
        """Remove and return the last value, or ``None`` if empty."""
        length = len(self)
        if length == 0:
            return None
        value = self.get(length - 1)
        self.remove(length - 1)
        return value

    def clear(self):
        self._hash_keys.clear()
        self._data.clear()

    def resize_with(self, new_len, f):
        """Grow with values made by ``f()`` or shrink to ``new_len``."""
        length = len(self)
        if new_len > length:
            for index in range(length, new_len):
                self.set(index, f())
        else:
            self.truncate(new_len)

    def resize(self, new_len, value):
        """Grow with copies of ``value`` or shrink to ``new_len``."""
        self.resize_with(new_len, lambda: value)

    def extend_from_slice(self, other):
        self.append(other)

    def dedup(self):
        """Remove consecutive repeated values."""
        self._from_list([value for value, _ in groupby(self.to_list())])

    def swap(self, a, b):
        values = self.to_list()
        for index in (a, b):
            if not 0 <= index < len(values):
                raise IndexError(f"index {index} out of range for {len(values)} items")
        values[a], values[b] = values[b], values[a]
        self._from_list(values)

    def reverse(self):
        self._from_list(self.to_list()[::-1])

    def contains(self, x):
        """Whether any stored value equals ``x``."""
        return any(value == x for _, value in self)

    def starts_with(self, needle):
        needle = list(needle)
        return self.to_list()[: len(needle)] == needle

    def ends_with(self, needle):
        needle = list(needle)
        values = self.to_list()
        return len(needle) <= len(values) and values[len(values) - len(needle):] == needle

    def rotate_left(self, mid):
        values = self.to_list()
        if not 0 <= mid <= len(values):
            raise ValueError(f"cannot rotate {len(values)} items by {mid}")
        self._from_list(values[mid:] + values[:mid])

    def rotate_right(self, k):
        values = self.to_list()
        if not 0 <= k <= len(values):
            raise ValueError(f"cannot rotate {len(values)} items by {k}")
        split = len(values) - k
        self._from_list(values[split:] + values[:split])

    def fill_with(self, f):
        """Replace every value with one made by ``f()``."""
        for index in range(len(self)):
            self.set(index, f())

    def copy_from_slice(self, src):
        src = list(src)
        if len(src) != len(self):
            raise ValueError(
                f"source has {len(src)} items, destination has {len(self)}"
            )
        self._from_list(src)

    def sort(self):
        self._from_list(sorted(self.to_list()))

    def truncate(self, length):
        """Keep only the first ``length`` values."""
        for index in range(len(self) - 1, length - 1, -1):
            self.remove(index)