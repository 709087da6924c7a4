"""Mock auth verifier for local development and tests."""

from inkwell.adapters.auth.base import AuthVerificationError, TokenVerifier
from inkwell.schemas.auth import AuthPrincipal
from inkwell.schemas.user import Role


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<role>`` where role is ``user`` or ``admin``
    """

    def verify_token(self, token: str) -> AuthPrincipal:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        role = parts[2].strip() if len(parts) == 3 else Role.USER.value

        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        try:
            parsed_role = Role(role)
        except ValueError as exc:
            raise AuthVerificationError("Bearer token has an unknown role") from exc

        return AuthPrincipal(user_id=user_id, role=parsed_role)


__all__ = ["MockTokenVerifier"]
