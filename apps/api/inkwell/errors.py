"""Application exception types."""

from inkwell.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class ConfigurationError(RuntimeError):
    """Raised at startup when required environment configuration is absent."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        self.missing = missing or []
        super().__init__(message)


def not_found() -> ApiError:
    return ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")


__all__ = ["ApiError", "ConfigurationError", "not_found"]
