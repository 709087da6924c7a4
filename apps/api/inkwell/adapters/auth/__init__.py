"""Auth verifier adapters."""

from .base import AuthVerificationError, TokenVerifier
from .mock_auth import MockTokenVerifier
from .session_auth import SessionIssuer, SessionTokenVerifier

__all__ = [
    "AuthVerificationError",
    "TokenVerifier",
    "MockTokenVerifier",
    "SessionIssuer",
    "SessionTokenVerifier",
]
