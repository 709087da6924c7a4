"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from secrets import compare_digest
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from inkwell.adapters.auth import (
    AuthVerificationError,
    MockTokenVerifier,
    SessionIssuer,
    SessionTokenVerifier,
    TokenVerifier,
)
from inkwell.core.config import Settings, get_settings
from inkwell.core.logging_safety import safe_log_identifier
from inkwell.domain.identity import RolePolicy
from inkwell.errors import ApiError
from inkwell.repositories.memory import InMemoryStore
from inkwell.schemas.auth import AuthPrincipal
from inkwell.services.blogs import BlogService
from inkwell.services.identity import IdentityService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
callback_secret_scheme = APIKeyHeader(
    name="X-Callback-Secret",
    auto_error=False,
    scheme_name="authCallbackSecret",
)
logger = logging.getLogger(__name__)


def _auth_error(message: str) -> ApiError:
    return ApiError(status_code=401, code="UNAUTHORIZED", message=message)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve verifier adapter from configuration."""
    if settings.auth_provider == "session":
        return SessionTokenVerifier(secret=settings.session_secret)
    return MockTokenVerifier()


def _verify_credentials(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    verifier: TokenVerifier,
) -> AuthPrincipal:
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error("Invalid or missing bearer token")

    try:
        principal = verifier.verify_token(credentials.credentials)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error(str(exc) or "Invalid bearer token") from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.user_id, prefix="pid"),
        principal.role.value,
    )
    request.state.auth_principal = principal
    return principal


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthPrincipal:
    """Validate bearer token and attach normalized principal to request context."""
    return _verify_credentials(request, credentials, verifier)


async def get_optional_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthPrincipal | None:
    """Anonymous readers are allowed; a bad token is still rejected."""
    if credentials is None:
        return None
    return _verify_credentials(request, credentials, verifier)


async def require_admin(
    request: Request,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
) -> AuthPrincipal:
    if not principal.is_admin:
        logger.warning(
            "auth.forbidden correlation_id=%s method=%s path=%s principal_id=%s",
            safe_log_identifier(_request_correlation_id(request), prefix="cid"),
            request.method,
            request.url.path,
            safe_log_identifier(principal.user_id, prefix="pid"),
        )
        raise ApiError(status_code=403, code="FORBIDDEN", message="Admin role required")
    return principal


async def require_callback_secret(
    request: Request,
    callback_secret: Annotated[str | None, Security(callback_secret_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Validate the shared secret presented by the OAuth edge."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if callback_secret is None or not compare_digest(callback_secret, settings.callback_secret):
        logger.warning(
            "callback.auth_rejected correlation_id=%s method=%s path=%s reason=invalid_callback_secret",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error("Invalid callback authentication")


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_blog_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> BlogService:
    return BlogService(
        store,
        default_policy=settings.default_content_policy,
        embed_hosts=settings.embed_hosts,
    )


def get_identity_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityService:
    return IdentityService(
        store,
        role_policy=RolePolicy.from_mapping(settings.admin_emails),
        issuer=SessionIssuer(secret=settings.session_secret, ttl_seconds=settings.session_ttl_seconds),
    )
