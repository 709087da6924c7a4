"""Login and user service layer."""

import logging
from typing import Any

from inkwell.adapters.auth import SessionIssuer
from inkwell.core.logging_safety import mask_email, safe_log_identifier
from inkwell.domain.identity import IdentityResolutionError, RolePolicy, resolve_identity
from inkwell.errors import ApiError, not_found
from inkwell.repositories.memory import InMemoryStore, UserRecord
from inkwell.schemas.auth import SessionResponse
from inkwell.schemas.user import Provider, User

logger = logging.getLogger(__name__)


class IdentityService:
    def __init__(self, store: InMemoryStore, role_policy: RolePolicy, issuer: SessionIssuer) -> None:
        self._store = store
        self._role_policy = role_policy
        self._issuer = issuer

    def login(self, *, provider: Provider, profile: dict[str, Any]) -> SessionResponse:
        """Resolve a provider profile, refresh the user and open a session.

        The role is recomputed from the role table on every login.
        """
        try:
            identity = resolve_identity(provider, profile, self._role_policy)
        except IdentityResolutionError as exc:
            logger.warning("login.rejected provider=%s reason=%s", provider.value, exc)
            raise ApiError(status_code=400, code="VALIDATION_ERROR", message=str(exc)) from exc

        user, linked = self._store.upsert_user_for_login(provider, identity)
        token, expires_at = self._issuer.issue(user_id=user.id, role=user.role)

        logger.info(
            "login.resolved provider=%s account_id=%s user_id=%s email=%s role=%s linked=%s",
            provider.value,
            safe_log_identifier(identity.id, prefix="aid"),
            safe_log_identifier(user.id, prefix="uid"),
            mask_email(identity.email),
            user.role.value,
            linked,
        )
        return SessionResponse(token=token, expires_at=expires_at, user=self._to_user(user))

    def get_user(self, *, user_id: str) -> User:
        record = self._store.get_user(user_id)
        if record is None:
            raise not_found()
        return self._to_user(record)

    def list_users(self) -> list[User]:
        return [self._to_user(record) for record in self._store.list_users()]

    def _to_user(self, record: UserRecord) -> User:
        return User(
            id=record.id,
            display_name=record.display_name,
            email=record.email,
            avatar_url=record.avatar_url,
            role=record.role,
            providers=self._store.providers_for_user(record.id),
        )
