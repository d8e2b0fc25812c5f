"""Domain errors raised by services and rendered by the app's exception handlers."""

import math
from typing import Any


class JokeApiError(Exception):
    """Base exception carrying a stable error code and HTTP status."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(JokeApiError):
    """Client sent a request the service cannot act on."""

    status_code = 400
    code = "VALIDATION_ERROR"


class RatingValidationError(ValidationError):
    code = "INVALID_RATING"

    def __init__(self, value: Any = None):
        super().__init__(
            "Invalid rating value. Must be a number between 0 and 5.",
            detail={"value": _json_safe(value)},
        )


def _json_safe(value: Any) -> Any:
    # NaN/inf and arbitrary objects cannot go into a JSON error body
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, int) and abs(value) < 2**53:
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return repr(value)


class JokeNotFoundError(JokeApiError):
    status_code = 404
    code = "JOKE_NOT_FOUND"

    def __init__(self, joke_id: str):
        super().__init__("joke not found", detail={"id": joke_id})


class RateLimitedError(JokeApiError):
    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, retry_after: float):
        super().__init__(
            "Too many requests, please try again later.",
            detail={"retryAfter": math.ceil(retry_after)},
        )
