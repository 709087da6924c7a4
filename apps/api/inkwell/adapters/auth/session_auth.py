"""Signed session tokens issued at login."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt

from inkwell.adapters.auth.base import AuthVerificationError, TokenVerifier
from inkwell.schemas.auth import AuthPrincipal
from inkwell.schemas.user import Role

_ALGORITHM = "HS256"
_ISSUER = "inkwell"


class SessionIssuer:
    """Mints HS256 session tokens carrying the user id and current role."""

    def __init__(self, secret: str, ttl_seconds: int) -> None:
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)

    def issue(self, *, user_id: str, role: Role, now: datetime | None = None) -> tuple[str, datetime]:
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + self._ttl
        claims = {
            "sub": user_id,
            "role": role.value,
            "iss": _ISSUER,
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(claims, self._secret, algorithm=_ALGORITHM), expires_at


class SessionTokenVerifier(TokenVerifier):
    """Verifies session tokens signed with the session secret."""

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def verify_token(self, token: str) -> AuthPrincipal:
        try:
            decoded = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                issuer=_ISSUER,
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthVerificationError("Session expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthVerificationError("Invalid bearer token") from exc

        user_id = str(decoded.get("sub") or "").strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        try:
            role = Role(decoded.get("role", Role.USER.value))
        except ValueError as exc:
            raise AuthVerificationError("Bearer token has an unknown role") from exc

        return AuthPrincipal(user_id=user_id, role=role)


__all__ = ["SessionIssuer", "SessionTokenVerifier"]
