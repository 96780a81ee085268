import pytest

from sewup.address import Address
from sewup.token_helpers import (
    TokenStorage,
    calculate_allowance_hash,
    calculate_approval_hash,
    calculate_balance_hash,
    calculate_token_approval_hash,
    calculate_token_balance_hash,
    calculate_token_hash,
)

ALICE = Address(bytes([1] * 20))
BOB = Address(bytes([2] * 20))
TOKEN_A = bytes([7] * 32)
TOKEN_B = bytes([8] * 32)


def amount(n):
    return n.to_bytes(32, "big")


def test_hashes_are_32_bytes_and_distinct():
    hashes = {
        calculate_approval_hash(ALICE, BOB),
        calculate_allowance_hash(ALICE, BOB),
        calculate_balance_hash(ALICE),
        calculate_token_hash(TOKEN_A),
        calculate_token_approval_hash(TOKEN_A),
        calculate_token_balance_hash(ALICE, TOKEN_A),
    }
    assert len(hashes) == 6
    assert all(len(h) == 32 for h in hashes)


def test_hash_accepts_raw_address_bytes():
    assert calculate_balance_hash(bytes([1] * 20)) == calculate_balance_hash(ALICE)


def test_hash_rejects_bad_sizes():
    with pytest.raises(ValueError):
        calculate_balance_hash(bytes(19))
    with pytest.raises(ValueError):
        calculate_token_hash(bytes(31))


def test_balance_default_and_round_trip():
    store = TokenStorage()
    assert store.get_balance(ALICE) == bytes(32)
    store.set_balance(ALICE, amount(100))
    assert store.get_balance(ALICE) == amount(100)
    assert store.storage[calculate_balance_hash(ALICE)] == amount(100)
    assert store.get_balance(BOB) == bytes(32)


def test_balance_value_size_checked():
    with pytest.raises(ValueError):
        TokenStorage().set_balance(ALICE, b"\x01")


def test_token_balances_are_per_token():
    store = TokenStorage()
    store.set_token_balance(ALICE, TOKEN_A, amount(5))
    assert store.get_token_balance(ALICE, TOKEN_A) == amount(5)
    assert store.get_token_balance(ALICE, TOKEN_B) == bytes(32)


def test_allowance_is_directional():
    store = TokenStorage()
    store.set_allowance(ALICE, BOB, amount(9))
    assert store.get_allowance(ALICE, BOB) == amount(9)
    assert store.get_allowance(BOB, ALICE) == bytes(32)


def test_token_approval_round_trip():
    store = TokenStorage()
    assert store.get_token_approval(TOKEN_A) == Address()
    store.set_token_approval(TOKEN_A, BOB)
    assert store.get_token_approval(TOKEN_A) == BOB


def test_operator_approval_toggles():
    store = TokenStorage()
    assert store.get_approval(ALICE, BOB) is False
    store.set_approval(ALICE, BOB, True)
    assert store.get_approval(ALICE, BOB) is True
    assert store.get_approval(BOB, ALICE) is False
    store.set_approval(ALICE, BOB, False)
    assert store.get_approval(ALICE, BOB) is False


def test_token_owner_round_trip():
    store = TokenStorage()
    store.set_token_owner(TOKEN_A, ALICE)
    assert store.get_token_owner(TOKEN_A) == ALICE
    assert store.storage[calculate_token_hash(TOKEN_A)] == ALICE.to_bytes32()


def test_shared_storage_map():
    shared = {}
    TokenStorage(shared).set_balance(BOB, amount(3))
    assert TokenStorage(shared).get_balance(BOB) == amount(3)