"""Authentication routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path

from inkwell.core.config import Settings, get_settings
from inkwell.domain.identity import PROVIDER_DISPLAY_NAMES, PROVIDER_SCOPES
from inkwell.routes.dependencies import (
    get_authenticated_principal,
    get_identity_service,
    require_callback_secret,
)
from inkwell.schemas.auth import AuthPrincipal, ProviderInfo, SessionResponse
from inkwell.schemas.error import ErrorResponse, NoLeakNotFoundError
from inkwell.schemas.user import Provider, User
from inkwell.services.identity import IdentityService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/providers", response_model=list[ProviderInfo])
async def list_providers(settings: Annotated[Settings, Depends(get_settings)]) -> list[ProviderInfo]:
    return [
        ProviderInfo(
            id=provider,
            name=PROVIDER_DISPLAY_NAMES[provider],
            client_id=settings.client_id_for(provider),
            scopes=list(PROVIDER_SCOPES[provider]),
            callback_path=f"/api/auth/callback/{provider.value}",
        )
        for provider in Provider
    ]


@router.post(
    "/callback/{provider}",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def provider_callback(
    provider: Annotated[Provider, Path()],
    profile: Annotated[dict[str, Any], Body()],
    __: Annotated[None, Depends(require_callback_secret)],
    service: Annotated[IdentityService, Depends(get_identity_service)],
) -> SessionResponse:
    return service.login(provider=provider, profile=profile)


@router.get(
    "/session",
    response_model=User,
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def get_session(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[IdentityService, Depends(get_identity_service)],
) -> User:
    return service.get_user(user_id=principal.user_id)
