"""
Error taxonomy for the hybrid encryption API.

Every error a client can trigger is a subclass of ``HybridApiError``.
The FastAPI exception handler in ``main.py`` turns these into a JSON
body of the form ``{"error": "<message>"}`` with ``status_code``.
"""

from __future__ import annotations


class HybridApiError(Exception):
    """Base class for client-visible failures."""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(HybridApiError):
    """A required field is missing or malformed."""

    default_message = "Invalid request"


class KeyFormatError(ValidationError):
    """A PEM key supplied by the caller could not be parsed."""

    default_message = "The supplied key is not a valid PEM-encoded RSA key"


class DecryptionError(HybridApiError):
    """An envelope could not be opened.

    The message is always generic.  The underlying cipher error is
    chained on ``__cause__`` for logging but never shown to clients.
    """

    default_message = "Unable to decrypt the encrypted payload"

    def __init__(self) -> None:
        super().__init__(None)


class UnregisteredClientError(HybridApiError):
    """A registered client was required but the id is unknown."""

    default_message = "Client is not registered. Use /api/register-client first"
