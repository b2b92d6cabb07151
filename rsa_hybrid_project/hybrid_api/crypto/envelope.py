"""
Hybrid RSA/AES envelope primitives.

An envelope carries three binary fields:

    * ``wrapped_key`` – a one-time AES-256 key encrypted under the
      recipient's RSA public key with OAEP (MGF1/SHA-256, SHA-256).
    * ``iv`` – a random 16-byte initialisation vector.
    * ``ciphertext`` – the PKCS7-padded plaintext encrypted with
      AES-256-CBC under the one-time key.

On the JSON boundary the fields are base64 strings named
``encryptedAESKey``, ``iv`` and ``encryptedData``.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import DecryptionError, KeyFormatError

logger = logging.getLogger(__name__)

AES_KEY_SIZE = 32  # 256 bits
IV_SIZE = 16  # AES block size
BLOCK_SIZE_BITS = 128


def _b64e(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64d(data: str) -> bytes:
    # MIME-style encoders wrap lines at 76 columns.
    unwrapped = "".join(data.split())
    return base64.b64decode(unwrapped.encode("ascii"), validate=True)


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


@dataclass(frozen=True)
class Envelope:
    """A sealed message: wrapped one-time key, IV and ciphertext."""

    wrapped_key: bytes
    iv: bytes
    ciphertext: bytes

    def to_wire(self) -> Dict[str, str]:
        """Base64-encode the fields under their JSON names."""
        return {
            "encryptedAESKey": _b64e(self.wrapped_key),
            "encryptedData": _b64e(self.ciphertext),
            "iv": _b64e(self.iv),
        }

    @classmethod
    def from_wire(cls, encrypted_aes_key: str, encrypted_data: str, iv: str) -> "Envelope":
        """Decode the base64 JSON fields.

        Invalid base64 cannot be opened, so it is reported as a
        ``DecryptionError`` like any other corrupt envelope.
        """
        try:
            return cls(
                wrapped_key=_b64d(encrypted_aes_key),
                iv=_b64d(iv),
                ciphertext=_b64d(encrypted_data),
            )
        except (binascii.Error, ValueError) as exc:
            logger.info("envelope_decode_failed", extra={"error_type": type(exc).__name__})
            raise DecryptionError() from exc


class EnvelopeCodec:
    """Seal and open hybrid envelopes.

    The codec is stateless; a single instance is shared by all request
    handlers.  Every call to ``seal`` draws a fresh key and IV.
    """

    def seal(self, plaintext: bytes, public_key: rsa.RSAPublicKey) -> Envelope:
        """Encrypt ``plaintext`` for the holder of ``public_key``."""
        aes_key = os.urandom(AES_KEY_SIZE)
        iv = os.urandom(IV_SIZE)

        padder = sym_padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = Cipher(algorithms.AES(aes_key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        try:
            wrapped_key = public_key.encrypt(aes_key, _oaep())
        except ValueError as exc:
            raise KeyFormatError("publicKey is too small to wrap an AES-256 key") from exc
        return Envelope(wrapped_key=wrapped_key, iv=iv, ciphertext=ciphertext)

    def seal_json(self, payload: Any, public_key: rsa.RSAPublicKey) -> Envelope:
        """Seal the compact UTF-8 JSON encoding of ``payload``."""
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        return self.seal(body.encode("utf-8"), public_key)

    def open(self, envelope: Envelope, private_key: rsa.RSAPrivateKey) -> bytes:
        """Recover the plaintext of ``envelope``.

        Raises ``DecryptionError`` if the key does not match, the IV or
        ciphertext is malformed, or the padding check fails.  Nothing is
        returned unless every step succeeds.
        """
        try:
            aes_key = private_key.decrypt(envelope.wrapped_key, _oaep())
            if len(aes_key) != AES_KEY_SIZE:
                raise ValueError(f"unwrapped key has {len(aes_key)} bytes")
            if len(envelope.iv) != IV_SIZE:
                raise ValueError(f"iv has {len(envelope.iv)} bytes")

            decryptor = Cipher(algorithms.AES(aes_key), modes.CBC(envelope.iv)).decryptor()
            padded = decryptor.update(envelope.ciphertext) + decryptor.finalize()

            unpadder = sym_padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            logger.info("envelope_open_failed", extra={"error_type": type(exc).__name__})
            raise DecryptionError() from exc

    def open_text(self, envelope: Envelope, private_key: rsa.RSAPrivateKey) -> str:
        """Open ``envelope`` and decode the plaintext as UTF-8."""
        plaintext = self.open(envelope, private_key)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.info("envelope_open_failed", extra={"error_type": type(exc).__name__})
            raise DecryptionError() from exc
