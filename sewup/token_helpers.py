"""Storage layout shared by the token contracts: balances, allowances, approvals and owners."""

from .address import Address
from .utils import sha3_256

__all__ = [
    "calculate_approval_hash",
    "calculate_token_approval_hash",
    "calculate_allowance_hash",
    "calculate_balance_hash",
    "calculate_token_hash",
    "calculate_token_balance_hash",
    "TokenStorage",
]

_SLOT = 32


def _address_bytes(address):
    if isinstance(address, Address):
        return address.inner
    data = bytes(address)
    if len(data) != 20:
        raise ValueError("an address has 20 bytes")
    return data


def _token_bytes(token_id):
    data = bytes(token_id)
    if len(data) != _SLOT:
        raise ValueError("a token id has 32 bytes")
    return data


def calculate_approval_hash(sender, spender):
    """Storage key of the operator approval of ``spender`` by ``sender``."""
    return sha3_256(b"approval" + _address_bytes(sender) + _address_bytes(spender))


def calculate_token_approval_hash(token_id):
    """Storage key of the approved spender of a token."""
    return sha3_256(b"token approval" + _token_bytes(token_id))


def calculate_allowance_hash(sender, spender):
    """Storage key of the amount ``spender`` may move for ``sender``."""
    return sha3_256(b"allowance" + _address_bytes(sender) + _address_bytes(spender))


def calculate_balance_hash(address):
    """Storage key of the balance of an address."""
    return sha3_256(b"balanceOf" + _address_bytes(address))


def calculate_token_hash(token_id):
    """Storage key of the owner of a token."""
    return sha3_256(b"token_id" + _token_bytes(token_id))


def calculate_token_balance_hash(address, token_id):
    """Storage key of the balance of one token kind held by an address."""
    return sha3_256(b"balanceOf" + _address_bytes(address) + _token_bytes(token_id))


class TokenStorage:
    """Token state kept in a map from 32-byte keys to 32-byte values."""

    def __init__(self, storage=None):
        self.storage = {} if storage is None else storage

    def _load(self, key):
        return bytes(self.storage.get(key, bytes(_SLOT)))

    def _store(self, key, value):
        data = bytes(value)
        if len(data) != _SLOT:
            raise ValueError("a storage value has 32 bytes")
        self.storage[key] = data

    def get_balance(self, address):
        return self._load(calculate_balance_hash(address))

    def set_balance(self, address, value):
        self._store(calculate_balance_hash(address), value)

    def get_token_balance(self, address, token_id):
        return self._load(calculate_token_balance_hash(address, token_id))

    def set_token_balance(self, address, token_id, value):
        self._store(calculate_token_balance_hash(address, token_id), value)

    def get_allowance(self, sender, spender):
        return self._load(calculate_allowance_hash(sender, spender))

    def set_allowance(self, sender, spender, value):
        self._store(calculate_allowance_hash(sender, spender), value)

    def get_token_approval(self, token_id):
        """The address approved to move the token."""
        return Address.from_bytes32(self._load(calculate_token_approval_hash(token_id)))

    def set_token_approval(self, token_id, spender):
        self._store(
            calculate_token_approval_hash(token_id),
            bytes(12) + _address_bytes(spender),
        )

    def get_approval(self, sender, spender):
        """Whether ``spender`` is an approved operator for ``sender``."""
        return self._load(calculate_approval_hash(sender, spender))[31] == 1

    def set_approval(self, sender, spender, is_approved):
        self._store(
            calculate_approval_hash(sender, spender),
            bytes(31) + (b"\x01" if is_approved else b"\x00"),
        )

    def get_token_owner(self, token_id):
        return Address.from_bytes32(self._load(calculate_token_hash(token_id)))

    def set_token_owner(self, token_id, owner):
        self._store(calculate_token_hash(token_id), bytes(12) + _address_bytes(owner))