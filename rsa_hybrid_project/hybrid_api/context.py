"""Long-lived objects shared by all request handlers."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Request

from .config import Settings
from .crypto.envelope import EnvelopeCodec
from .identity import ServerIdentity
from .keystore import KeyStore


@dataclass
class AppContext:
    settings: Settings
    identity: ServerIdentity
    keystore: KeyStore = field(default_factory=KeyStore)
    codec: EnvelopeCodec = field(default_factory=EnvelopeCodec)

    @classmethod
    def create(cls, settings: Settings) -> "AppContext":
        """Build an uninitialised context; the identity is generated at startup."""
        return cls(settings=settings, identity=ServerIdentity(settings.rsa_key_size))


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context stored on ``app.state``."""
    return request.app.state.context
