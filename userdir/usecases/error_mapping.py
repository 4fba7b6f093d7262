"""Translate adapter errors into user-facing NetworkError instances."""

from __future__ import annotations

from typing import Optional

from userdir.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiResponseError,
    ApiServerError,
    ApiTimeoutError,
)
from userdir.domain.errors import NetworkError


def map_api_error(
    exc: Exception,
    *,
    default_code: str = "FETCH_FAILED",
    default_message: Optional[str] = None,
    page: Optional[int] = None,
) -> NetworkError:
    """Map adapter exceptions to stable ``NetworkError`` codes.

    Args:
        exc: Exception raised by a port implementation.
        default_code: Code used for exceptions outside the adapter hierarchy.
        default_message: Message used when ``exc`` carries no text.
        page: Page number being fetched, kept on the error for logging.

    Returns:
        NetworkError: ``exc`` itself when it already is one.
    """
    if isinstance(exc, NetworkError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return NetworkError("REQUEST_TIMEOUT", "Request timed out. Check connection.", page=page)
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        if status in (401, 403):
            return NetworkError("AUTH_FAILED", "Access denied / API key invalid.", page=page)
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return NetworkError("REQUEST_FAILED", _compose_error_message(label, exc.hint), page=page)
    if isinstance(exc, ApiServerError):
        return NetworkError("SERVER_ERROR", "Directory service error, try again.", page=page)
    if isinstance(exc, ApiResponseError):
        return NetworkError("INVALID_RESPONSE", "Unexpected response from directory service.", page=page)
    if isinstance(exc, ApiError):
        return NetworkError("API_ERROR", str(exc) or "Request failed.", page=page)

    message = str(exc) or default_message or "Unexpected error."
    return NetworkError(default_code, message, page=page)


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_api_error"]
