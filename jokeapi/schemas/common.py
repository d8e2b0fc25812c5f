"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel

from jokeapi.errors import JokeApiError


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | list[Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail

    @classmethod
    def from_error(cls, exc: JokeApiError) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=exc.code, message=exc.message, detail=exc.detail))
