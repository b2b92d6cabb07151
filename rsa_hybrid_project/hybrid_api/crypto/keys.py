"""
RSA key generation and PEM handling.

This module centralises every interaction with key material: creating
keypairs, parsing PEM strings supplied by clients and computing
fingerprints for logs.  Public keys travel as SubjectPublicKeyInfo PEM
and private keys as unencrypted PKCS#8 PEM, which is what most client
libraries (OpenSSL, Node's ``crypto``, WebCrypto exports) produce.

The functions here know nothing about HTTP requests or envelopes.
Higher level logic lives in ``crypto/envelope.py``.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..errors import KeyFormatError

PUBLIC_EXPONENT = 65537
DEFAULT_KEY_SIZE = 2048
# OAEP/SHA-256 needs at least 784 bits to wrap a 32-byte AES key.
MIN_PUBLIC_KEY_SIZE = 1024


@dataclass(frozen=True)
class KeyPair:
    """A PEM-encoded RSA keypair."""

    public_pem: str
    private_pem: str


def generate_private_key(key_size: int = DEFAULT_KEY_SIZE) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)


def public_key_to_pem(public_key: rsa.RSAPublicKey) -> str:
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def private_key_to_pem(private_key: rsa.RSAPrivateKey) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def generate_keypair(key_size: int = DEFAULT_KEY_SIZE) -> KeyPair:
    """Generate a fresh RSA keypair and return both halves as PEM."""
    private_key = generate_private_key(key_size)
    return KeyPair(
        public_pem=public_key_to_pem(private_key.public_key()),
        private_pem=private_key_to_pem(private_key),
    )


def load_public_key(public_key_pem: str) -> rsa.RSAPublicKey:
    """Parse a PEM public key.

    Raises ``KeyFormatError`` if the text is not a PEM-encoded RSA
    public key.
    """
    try:
        key = serialization.load_pem_public_key(public_key_pem.encode("utf-8"))
    except (ValueError, TypeError, UnicodeEncodeError) as exc:
        raise KeyFormatError("publicKey is not a valid PEM-encoded RSA public key") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyFormatError("publicKey must be an RSA key")
    if key.key_size < MIN_PUBLIC_KEY_SIZE:
        raise KeyFormatError(f"publicKey must be at least {MIN_PUBLIC_KEY_SIZE} bits")
    return key


def load_private_key(private_key_pem: str) -> rsa.RSAPrivateKey:
    """Parse an unencrypted PEM private key.

    Raises ``KeyFormatError`` if the text is not an unencrypted
    PEM-encoded RSA private key.
    """
    try:
        key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnicodeEncodeError) as exc:
        raise KeyFormatError("privateKey is not a valid PEM-encoded RSA private key") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyFormatError("privateKey must be an RSA key")
    return key


def fingerprint(public_key: rsa.RSAPublicKey) -> str:
    """Short SHA-256 fingerprint of the DER-encoded public key."""
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    digest = hashlib.sha256(der).hexdigest()
    return ":".join(digest[i:i + 2] for i in range(0, 32, 2))
