"""
Cryptographic helper package for the hybrid encryption API.

``keys`` handles RSA key generation and PEM parsing; ``envelope``
implements sealing and opening of RSA-OAEP + AES-256-CBC envelopes.
"""

from .envelope import Envelope, EnvelopeCodec
from .keys import KeyPair, generate_keypair, load_private_key, load_public_key

__all__ = [
    "Envelope",
    "EnvelopeCodec",
    "KeyPair",
    "generate_keypair",
    "load_private_key",
    "load_public_key",
]
