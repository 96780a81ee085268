"""Storage helpers for eWasm contracts: 32-byte storage types, a binary codec, key/value buckets, relational tables, runtime interfaces and token storage helpers."""

__version__ = "0.1.0"