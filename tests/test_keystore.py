"""Tests for the in-memory client key registry."""

from __future__ import annotations

import threading

import pytest

from hybrid_api.errors import ValidationError
from hybrid_api.keystore import KeyStore


def test_lookup_returns_registered_key():
    store = KeyStore()
    store.register("alice", "PEM-A")
    assert store.lookup("alice") == "PEM-A"
    assert store.count() == 1


def test_last_registration_wins():
    store = KeyStore()
    store.register("alice", "PEM-1")
    store.register("alice", "PEM-2")
    assert store.lookup("alice") == "PEM-2"
    assert store.count() == 1


@pytest.mark.parametrize("client_id", ["nonexistent", "", None])
def test_lookup_of_unknown_client_is_absent(client_id):
    store = KeyStore()
    store.register("alice", "PEM-A")
    assert store.lookup(client_id) is None


@pytest.mark.parametrize(
    "client_id, public_key",
    [("", "PEM"), (None, "PEM"), ("alice", ""), ("alice", None), (None, None)],
)
def test_register_requires_both_fields(client_id, public_key):
    store = KeyStore()
    with pytest.raises(ValidationError):
        store.register(client_id, public_key)
    assert store.count() == 0


def test_concurrent_registration():
    store = KeyStore()
    barrier = threading.Barrier(8)

    def worker(n: int) -> None:
        barrier.wait()
        for i in range(200):
            store.register(f"client-{n}-{i}", f"key-{n}-{i}")
            store.register("shared", f"key-{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.count() == 8 * 200 + 1
    assert store.lookup("client-3-150") == "key-3-150"
    assert store.lookup("shared").startswith("key-")
