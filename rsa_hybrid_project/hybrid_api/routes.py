"""
REST endpoints of the hybrid encryption API.

Endpoints:
- GET  /api/info                         - Capabilities and endpoint listing
- GET  /api/public-key                   - Server public key
- GET  /api/generate-keys                - Fresh RSA keypair (test helper)
- POST /api/register-client              - Register a client public key
- POST /api/encrypt-helper               - Seal a message (test helper)
- POST /api/send-encrypted               - Send an envelope to the server
- POST /api/decrypt-helper               - Open an envelope (test helper)
- GET  /api/protected-data?clientId=xxx  - Sample data sealed to a client
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from .context import AppContext, get_context
from .crypto.envelope import Envelope
from .crypto.keys import generate_keypair, load_private_key, load_public_key
from .errors import UnregisteredClientError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

ENDPOINTS = [
    "GET  /api/info - This information",
    "GET  /api/public-key - Get the server public key",
    "GET  /api/generate-keys - Generate an RSA keypair",
    "POST /api/register-client - Register a client",
    "POST /api/encrypt-helper - Help encrypt a message",
    "POST /api/send-encrypted - Send an encrypted message",
    "POST /api/decrypt-helper - Help decrypt a response",
    "GET  /api/protected-data?clientId=xxx - Get protected data",
]


# ============================================================================
# Request Models
# ============================================================================

# Fields are optional at the schema level so that a missing field is
# reported as a 400 with a readable message rather than a 422.

class RegisterClientRequest(BaseModel):
    """Input model for the /register-client endpoint."""

    clientId: Optional[str] = Field(None, description="Unique client identifier")
    publicKey: Optional[str] = Field(None, description="Client RSA public key (PEM)")


class EnvelopeRequest(BaseModel):
    """Base64 envelope fields shared by the envelope-carrying endpoints."""

    encryptedAESKey: Optional[str] = Field(None, description="RSA-OAEP wrapped AES key (Base64)")
    encryptedData: Optional[str] = Field(None, description="AES-256-CBC ciphertext (Base64)")
    iv: Optional[str] = Field(None, description="AES initialisation vector (Base64)")

    def require_envelope(self, *extra: str) -> Envelope:
        if not (self.encryptedAESKey and self.encryptedData and self.iv):
            required = ", ".join(("encryptedAESKey", "encryptedData", "iv") + extra)
            raise ValidationError(f"Required fields: {required}")
        return Envelope.from_wire(self.encryptedAESKey, self.encryptedData, self.iv)


class SendEncryptedRequest(EnvelopeRequest):
    """Input model for the /send-encrypted endpoint."""

    clientId: Optional[str] = Field(None, description="Registered client to seal the reply to")


class DecryptHelperRequest(EnvelopeRequest):
    """Input model for the /decrypt-helper endpoint."""

    privateKey: Optional[str] = Field(None, description="RSA private key (PEM)")


class EncryptHelperRequest(BaseModel):
    """Input model for the /encrypt-helper endpoint."""

    message: Optional[str] = Field(None, description="Plaintext to seal")
    targetPublicKey: Optional[str] = Field(None, description="Recipient public key (PEM)")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def sample_protected_data() -> Dict[str, Any]:
    return {
        "userId": 12345,
        "username": "sample_user",
        "email": "user@example.com",
        "balance": 1500.50,
        "timestamp": _utc_now(),
    }


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/public-key")
async def public_key(ctx: AppContext = Depends(get_context)):
    return {
        "publicKey": ctx.identity.public_key_pem,
        "message": "Use this key to encrypt your AES key",
    }


@router.post("/register-client")
async def register_client(req: RegisterClientRequest, ctx: AppContext = Depends(get_context)):
    ctx.keystore.register(req.clientId, req.publicKey)
    return {"message": "Client registered successfully", "clientId": req.clientId}


@router.post("/send-encrypted")
async def send_encrypted(req: SendEncryptedRequest, ctx: AppContext = Depends(get_context)):
    """
    Open an envelope addressed to the server and answer it.

    The reply echoes the decrypted text as ``originalMessage``.  If
    ``clientId`` names a registered client the whole reply is sealed to
    that client's key; otherwise it is returned as plain JSON.
    """
    envelope = req.require_envelope()
    plaintext = ctx.codec.open_text(envelope, ctx.identity.private_key)
    logger.info(
        "encrypted_message_received",
        extra={"client_id": req.clientId, "plaintext_bytes": len(plaintext.encode("utf-8"))},
    )

    response_data = {
        "status": "success",
        "message": "Message received successfully",
        "originalMessage": plaintext,
        "timestamp": _utc_now(),
    }

    client_key_pem = ctx.keystore.lookup(req.clientId)
    if client_key_pem is None:
        return response_data

    sealed = ctx.codec.seal_json(response_data, load_public_key(client_key_pem))
    logger.info("response_sealed", extra={"client_id": req.clientId})
    return sealed.to_wire()


@router.get("/protected-data")
async def protected_data(clientId: Optional[str] = None, ctx: AppContext = Depends(get_context)):
    client_key_pem = ctx.keystore.lookup(clientId)
    if client_key_pem is None:
        raise UnregisteredClientError()

    sealed = ctx.codec.seal_json(sample_protected_data(), load_public_key(client_key_pem))
    return {**sealed.to_wire(), "message": "Data encrypted with your public key"}


@router.get("/generate-keys")
async def generate_keys(ctx: AppContext = Depends(get_context)):
    keypair = generate_keypair(ctx.settings.rsa_key_size)
    return {
        "publicKey": keypair.public_pem,
        "privateKey": keypair.private_pem,
        "message": "Keep these keys to use in your tests",
    }


@router.post("/encrypt-helper")
async def encrypt_helper(req: EncryptHelperRequest, ctx: AppContext = Depends(get_context)):
    if not req.message:
        raise ValidationError("The message field is required")

    if req.targetPublicKey:
        target_key = load_public_key(req.targetPublicKey)
    else:
        target_key = ctx.identity.public_key

    sealed = ctx.codec.seal(req.message.encode("utf-8"), target_key)
    return {**sealed.to_wire(), "message": "Use these values with /api/send-encrypted"}


@router.post("/decrypt-helper")
async def decrypt_helper(req: DecryptHelperRequest, ctx: AppContext = Depends(get_context)):
    if not req.privateKey:
        raise ValidationError("Required fields: encryptedAESKey, encryptedData, iv, privateKey")
    envelope = req.require_envelope("privateKey")
    private_key = load_private_key(req.privateKey)
    return {
        "decryptedData": ctx.codec.open_text(envelope, private_key),
        "message": "Data decrypted successfully",
    }


@router.get("/info")
async def info(ctx: AppContext = Depends(get_context)):
    return {
        "message": "Hybrid Encryption API",
        "encryption": {
            "asymmetric": f"RSA-{ctx.identity.key_size} with OAEP padding",
            "symmetric": "AES-256-CBC",
            "hash": "SHA-256",
        },
        "endpoints": ENDPOINTS,
        "serverKeyFingerprint": ctx.identity.fingerprint,
        "registeredClients": ctx.keystore.count(),
    }
