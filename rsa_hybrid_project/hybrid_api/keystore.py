"""In-memory registry of client public keys."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from .errors import ValidationError

logger = logging.getLogger(__name__)


class KeyStore:
    """Maps client ids to PEM public keys for the lifetime of the process.

    Writes are serialised with a lock; readers see either the value
    before or after a concurrent ``register``.  Registering an existing
    id replaces its key.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: Dict[str, str] = {}

    def register(self, client_id: Optional[str], public_key: Optional[str]) -> None:
        if not client_id or not public_key:
            raise ValidationError("clientId and publicKey are required")
        with self._lock:
            replaced = client_id in self._keys
            self._keys[client_id] = public_key
        logger.info("client_registered", extra={"client_id": client_id, "replaced": replaced})

    def lookup(self, client_id: Optional[str]) -> Optional[str]:
        if not client_id:
            return None
        with self._lock:
            return self._keys.get(client_id)

    def count(self) -> int:
        with self._lock:
            return len(self._keys)
