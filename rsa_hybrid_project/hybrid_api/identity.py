"""
The server's long-lived RSA identity.

A ``ServerIdentity`` starts ``UNINITIALIZED`` and becomes ``READY``
once ``initialize`` has generated its keypair.  The private key stays
in process memory; only the PEM public key is handed out.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa

from .crypto.keys import DEFAULT_KEY_SIZE, fingerprint, generate_private_key, public_key_to_pem

logger = logging.getLogger(__name__)


class IdentityState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class ServerIdentity:
    """Holds the keypair used to unwrap envelopes addressed to the server."""

    def __init__(self, key_size: int = DEFAULT_KEY_SIZE):
        self.key_size = key_size
        self._lock = threading.Lock()
        self._private_key: Optional[rsa.RSAPrivateKey] = None
        self._public_key_pem: Optional[str] = None
        self._fingerprint: Optional[str] = None

    @property
    def state(self) -> IdentityState:
        if self._private_key is None:
            return IdentityState.UNINITIALIZED
        return IdentityState.READY

    @property
    def is_ready(self) -> bool:
        return self.state is IdentityState.READY

    def initialize(self) -> None:
        """Generate the keypair.  Later calls are no-ops."""
        with self._lock:
            if self._private_key is not None:
                return
            private_key = generate_private_key(self.key_size)
            self._public_key_pem = public_key_to_pem(private_key.public_key())
            self._fingerprint = fingerprint(private_key.public_key())
            self._private_key = private_key
        logger.info(
            "server_identity_ready",
            extra={"key_size": self.key_size, "fingerprint": self._fingerprint},
        )

    def _require_ready(self) -> rsa.RSAPrivateKey:
        if self._private_key is None:
            raise RuntimeError("Server identity has not been initialized")
        return self._private_key

    @property
    def private_key(self) -> rsa.RSAPrivateKey:
        return self._require_ready()

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self._require_ready().public_key()

    @property
    def public_key_pem(self) -> str:
        self._require_ready()
        return self._public_key_pem

    @property
    def fingerprint(self) -> str:
        self._require_ready()
        return self._fingerprint
