from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the directory API."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message, status=status, code=code, hint=hint, payload=payload, context=context
        )


class ApiServerError(ApiError):
    """HTTP 5xx from the directory API."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload, context=context)


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


class ApiResponseError(ApiError):
    """2xx response whose body is not the expected JSON shape."""

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, code="INVALID_RESPONSE", payload=payload, context=context)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of an error body without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def extract_error_code(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("code", "error_code", "error"):
            value = payload.get(key)
            if value is not None:
                return str(value)
    return None


def extract_error_hint(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("hint", "details", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()[:200]
    if isinstance(payload, str):
        return payload.strip()[:200] or None
    return None


def first_string(payload: Any) -> Optional[str]:
    """Return the first human-readable message found in ``payload``."""
    if isinstance(payload, str):
        text = payload.strip()
        return text or None
    if isinstance(payload, dict):
        for key in ("detail", "message", "error", "title"):
            candidate = first_string(payload.get(key))
            if candidate:
                return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiResponseError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "extract_error_code",
    "extract_error_hint",
    "first_string",
    "parse_error_payload",
]
