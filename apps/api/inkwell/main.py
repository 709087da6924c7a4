"""FastAPI application entrypoint.

Run with ``uvicorn --factory inkwell.main:create_app``; configuration is
validated before the app is built so a misconfigured process never starts.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from inkwell.core.config import load_settings
from inkwell.core.logging_safety import safe_log_identifier
from inkwell.domain.forms import errors_by_field
from inkwell.errors import ApiError
from inkwell.repositories.memory import InMemoryStore
from inkwell.routes import auth_router, blogs_router, editor_router, users_router
from inkwell.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_OPENAPI_RESPONSE_CODES: dict[str, dict[str, set[str]]] = {
    "/api/blogs": {
        "get": {"200", "401"},
        "post": {"201", "400", "401"},
        "put": {"200", "400", "401", "404"},
    },
    "/api/blogs/{blogId}": {
        "get": {"200", "401", "404"},
        "delete": {"204", "401", "404"},
    },
    "/api/auth/callback/{provider}": {"post": {"200", "400", "401"}},
    "/api/auth/session": {"get": {"200", "401", "404"}},
    "/api/users": {"get": {"200", "401", "403"}},
}


def _apply_contract_response_codes(schema: dict) -> None:
    """Limit documented response codes to what the handlers actually return."""
    for path, methods in _OPENAPI_RESPONSE_CODES.items():
        path_item = schema.get("paths", {}).get(path)
        if not path_item:
            continue

        for method, allowed_codes in methods.items():
            operation = path_item.get(method)
            if not operation:
                continue

            responses = operation.setdefault("responses", {})
            for status_code in list(responses.keys()):
                if status_code not in allowed_codes:
                    responses.pop(status_code, None)

            for status_code in sorted(allowed_codes):
                responses.setdefault(status_code, {"description": "See API contract"})


def _path_param_error(exc: RequestValidationError) -> bool:
    return any(error.get("loc", ("",))[0] == "path" for error in exc.errors())


def create_app() -> FastAPI:
    settings = load_settings()

    app = FastAPI(title="Inkwell API", version="1.0.0")
    app.state.store = InMemoryStore()
    app.state.settings = settings

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Unknown path values (e.g. an unsupported provider) read as missing resources.
        if _path_param_error(exc):
            payload = ErrorResponse(code="RESOURCE_NOT_FOUND", message="Resource not found")
            return JSONResponse(status_code=404, content=payload.model_dump(exclude_none=True))

        fields = errors_by_field(exc.errors())
        payload = ErrorResponse(
            code="VALIDATION_ERROR",
            message="Invalid request payload",
            details={"fields": fields},
        )
        return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        correlation_id = getattr(request.state, "correlation_id", None)
        logger.exception(
            "request.failed correlation_id=%s method=%s path=%s error=%s",
            safe_log_identifier(correlation_id, prefix="cid"),
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        payload = ErrorResponse(code="INTERNAL_ERROR", message="Something went wrong")
        return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))

    api_prefix = "/api"
    app.include_router(blogs_router, prefix=api_prefix)
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(editor_router, prefix=api_prefix)

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    logger.info(
        "app.started auth_provider=%s default_content_policy=%s",
        settings.auth_provider,
        settings.default_content_policy.value,
    )
    return app
