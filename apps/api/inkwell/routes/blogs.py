"""Blog post routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from inkwell.routes.dependencies import (
    get_authenticated_principal,
    get_blog_service,
    get_optional_principal,
    get_request_correlation_id,
)
from inkwell.schemas.auth import AuthPrincipal
from inkwell.schemas.blog import BlogPost, CreateBlogRequest, UpdateBlogRequest
from inkwell.schemas.error import ErrorResponse, NoLeakNotFoundError, ValidationErrorResponse
from inkwell.services.blogs import BlogService

router = APIRouter(prefix="/blogs", tags=["Blogs"])


@router.get("", response_model=list[BlogPost], responses={401: {"model": ErrorResponse}})
async def list_blogs(
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> list[BlogPost]:
    return service.list_posts(principal=principal)


@router.get(
    "/{blogId}",
    response_model=BlogPost,
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def get_blog(
    blog_id: Annotated[str, Path(alias="blogId")],
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> BlogPost:
    return service.get_post(principal=principal, blog_id=blog_id)


@router.post(
    "",
    response_model=BlogPost,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_blog(
    payload: CreateBlogRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> BlogPost:
    return service.create_post(principal=principal, payload=payload)


@router.put(
    "",
    response_model=BlogPost,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": NoLeakNotFoundError},
    },
)
async def update_blog(
    payload: UpdateBlogRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> BlogPost:
    return service.update_post(principal=principal, payload=payload)


@router.delete(
    "/{blogId}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def delete_blog(
    blog_id: Annotated[str, Path(alias="blogId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> Response:
    service.delete_post(principal=principal, blog_id=blog_id, correlation_id=correlation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
