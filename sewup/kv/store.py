"""A key/value store kept in the 32-byte storage slots of one account.

Slot zero holds the store header:

| byte 0         | byte 1  | bytes 2-3         | ... | bytes 28-31          |
|----------------|---------|-------------------|-----|----------------------|
| sewup features | version | kv features (LE)  | -   | size in bytes (BE)   |

The buckets follow, encoded together in binary form and spread over the
next slots, 32 bytes per slot.
"""

import enum
from typing import Optional

from ..codec import U64, deserialize, serialize
from ..errors import BucketAlreadyOpen, BucketNotSync
from ..raw import Raw
from ..utils import storage_index_to_addr
from .bucket import Bucket, SewUpVec

__all__ = ["CONFIG_ADDR", "KV_FEATURE", "VERSION", "Feature", "Store"]

KV_FEATURE = 0
VERSION = 0
CONFIG_ADDR = bytes(32)

_SLOT = 32
_TENANTS = dict[str, Optional[tuple[list[Raw], list[Raw]]]]


class Feature(enum.IntEnum):
    """Feature flags recorded in the store header."""

    DEFAULT = 1


def _encode_tenants(tenants):
    parts = [serialize(U64(len(tenants)))]
    for name, raw_bucket in tenants.items():
        parts.append(serialize(name))
        if raw_bucket is None:
            parts.append(b"\x00")
        else:
            hash_keys, data = raw_bucket
            parts.append(b"\x01" + serialize(list(hash_keys)) + serialize(list(data)))
    return b"".join(parts)


class Store:
    """Buckets of one account, loaded from and committed to a storage map."""

    def __init__(self, storage=None):
        self.storage = {} if storage is None else storage
        self.version = VERSION
        self._features = int(Feature.DEFAULT)
        self._size = 0
        self.tenants = {}

    def features(self):
        """The features enabled in this store."""
        return [feature for feature in Feature if self._features & feature]

    def buckets(self):
        """The names of all buckets."""
        return list(self.tenants)

    def _open(self, name):
        if name in self.tenants:
            raw_bucket = self.tenants[name]
            if raw_bucket is None:
                raise BucketAlreadyOpen()
            self.tenants[name] = None
            return raw_bucket
        self.tenants[name] = None
        return ([], [])

    def bucket(self, name, key_type, value_type):
        """Open the bucket ``name``; it must be saved back before committing."""
        return Bucket(name, key_type, value_type, self._open(name))

    def drop_bucket(self, name):
        """Forget the bucket ``name``."""
        self.tenants.pop(name, None)

    def vec(self, name, value_type):
        """Open the bucket ``name`` as a growable array."""
        return SewUpVec(name, value_type, self._open(name))

    @property
    def load_size(self):
        """The size in bytes recorded in storage when the store was loaded."""
        return self._size

    def size(self):
        """The size in bytes of the encoded buckets."""
        return len(_encode_tenants(self.tenants))

    @classmethod
    def load(cls, storage, block_height=None):
        """Read the store kept in ``storage``."""
        if block_height is not None:
            raise ValueError("loading a store from a past block is not supported")
        store = cls(storage)
        config = bytes(storage.get(CONFIG_ADDR, bytes(_SLOT)))
        if config[0] != KV_FEATURE:
            raise ValueError("Sewup feature not correct")
        if config[1] != VERSION:
            raise ValueError(f"storage version {config[1]} is not supported")
        store._features = int.from_bytes(config[2:4], "little")
        store._size = int.from_bytes(config[28:32], "big")

        chunks = []
        addr = bytes(_SLOT)
        for index in range(1, store._size // _SLOT + 2):
            addr = storage_index_to_addr(index, addr)
            chunks.append(bytes(storage.get(addr, bytes(_SLOT))))
        tenants = deserialize(b"".join(chunks), _TENANTS)
        store.tenants = {
            name: None if raw_bucket is None else (list(raw_bucket[0]), list(raw_bucket[1]))
            for name, raw_bucket in tenants.items()
        }
        return store

    def save(self, bucket):
        """Put an opened bucket back into the store."""
        hash_keys, data = bucket.raw_bucket
        self.tenants[bucket.name] = (list(hash_keys), list(data))

    def commit(self):
        """Write the store into storage; returns the size in bytes of the buckets."""
        for name, raw_bucket in self.tenants.items():
            if raw_bucket is None:
                raise BucketNotSync(name)
        binary = _encode_tenants(self.tenants)
        length = len(binary)

        header = bytearray(_SLOT)
        header[0] = KV_FEATURE
        header[1] = VERSION
        header[2:4] = self._features.to_bytes(2, "little")
        header[28:32] = length.to_bytes(4, "big")
        self.storage[CONFIG_ADDR] = bytes(header)

        addr = bytes(_SLOT)
        for index, start in enumerate(range(0, length, _SLOT), start=1):
            addr = storage_index_to_addr(index, addr)
            self.storage[addr] = binary[start:start + _SLOT].ljust(_SLOT, b"\x00")
        return length