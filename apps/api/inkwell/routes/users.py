"""User administration routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from inkwell.routes.dependencies import get_identity_service, require_admin
from inkwell.schemas.auth import AuthPrincipal
from inkwell.schemas.error import ErrorResponse
from inkwell.schemas.user import User
from inkwell.services.identity import IdentityService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=list[User],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def list_users(
    _: Annotated[AuthPrincipal, Depends(require_admin)],
    service: Annotated[IdentityService, Depends(get_identity_service)],
) -> list[User]:
    return service.list_users()
