"""Shared fixtures for the hybrid encryption API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hybrid_api.config import Settings
from hybrid_api.context import AppContext
from hybrid_api.crypto.keys import generate_keypair
from hybrid_api.identity import ServerIdentity
from hybrid_api.main import create_app


@pytest.fixture(scope="session")
def alice_keys():
    return generate_keypair()


@pytest.fixture(scope="session")
def bob_keys():
    return generate_keypair()


@pytest.fixture(scope="session")
def server_identity():
    identity = ServerIdentity()
    identity.initialize()
    return identity


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def context(settings, server_identity):
    # Fresh key registry per test, shared server keypair.
    return AppContext(settings=settings, identity=server_identity)


@pytest.fixture
def client(context):
    with TestClient(create_app(context=context)) as test_client:
        yield test_client


# 768-bit RSA key; too small for OAEP/SHA-256 to wrap a 32-byte key.
UNDERSIZED_PUBLIC_PEM = """-----BEGIN PUBLIC KEY-----
MHwwDQYJKoZIhvcNAQEBBQADawAwaAJhAMIiGlPtdnsOhTqqo6B3ar9sdi7G96Tr
HZNFmTvRAoQIeraX8PZYiWMQwHNpVvI6woZC0yKZO+Fyxk00aToVI/41v1nJlNZs
1RpuhzGQtev/QI7pACzkZiA6D3daFMI+JwIDAQAB
-----END PUBLIC KEY-----
"""


@pytest.fixture
def undersized_public_pem():
    return UNDERSIZED_PUBLIC_PEM
