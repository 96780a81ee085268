"""Hashing, storage addressing and debugging helpers."""

import dataclasses
import hashlib
from collections.abc import Mapping

__all__ = [
    "sha3_256",
    "storage_index_to_addr",
    "get_field_by_name",
    "pretty_print_storage",
]

_SLOT = 32


def sha3_256(data):
    """The SHA3-256 digest of ``data``."""
    return hashlib.sha3_256(bytes(data)).digest()


def storage_index_to_addr(idx, addr=None):
    """The storage address of slot ``idx``, written over ``addr``.

    Five bits of the index go into each leading byte; only the first
    ``idx // 32 + 1`` bytes are rewritten, the rest of ``addr`` is kept.
    Returns the new 32-byte address.
    """
    result = bytearray(bytes(_SLOT) if addr is None else bytes(addr))
    if len(result) != _SLOT:
        raise ValueError("a storage address has 32 bytes")
    for j in range(min(idx // _SLOT + 1, _SLOT)):
        result[j] = (idx >> (5 * j)) & 31
    return bytes(result)


def get_field_by_name(data, field):
    """The value of the field named ``field`` of a dataclass or mapping."""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        fields = {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}
    elif isinstance(data, Mapping):
        fields = data
    else:
        raise TypeError("expected a struct")
    try:
        return fields[field]
    except KeyError:
        raise KeyError("no such field") from None


def pretty_print_storage(desc, storage):
    """A readable dump of a storage map, sorted by key."""
    if storage is None:
        return "Storage not use at this moment"
    lines = ["Storage: \n" if not desc.strip() else f"Storage at {desc}:\n"]
    for key, value in sorted(storage.items(), key=lambda item: bytes(item[0])):
        value_bytes = bytes(value)
        printable = "".join(chr(b) if 31 < b < 127 else " " for b in value_bytes)
        listing = "[" + ", ".join(str(b) for b in value_bytes) + "]"
        lines.append(f"{bytes(key).hex()}|{printable}|{listing}\n")
    return "".join(lines)